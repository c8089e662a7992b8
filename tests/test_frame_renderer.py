import logging

import pytest
from PIL import Image, ImageDraw

from countdown_gif.schemas.style import STYLE_PRESETS, CountdownStyle
from countdown_gif.services import frame_renderer
from countdown_gif.services.duration import EXPIRED, Remaining
from countdown_gif.services.frame_renderer import CellLayout, render, resolve_labels
from countdown_gif.services.surface import CJK_FONT_PATHS, font_covers, load_font


def _collect(state, surface, frame_count, style=None):
    frames = []
    count = render(state, surface, frame_count, frames.append, style)
    return count, frames


def test_cell_geometry_spans_width():
    layout = CellLayout(645, 120, gap=10)
    assert layout.cell_width == 153.75
    assert layout.cell_height == 120
    assert layout.cell_x(0) == 0
    assert layout.cell_x(3) + layout.cell_width == 645
    assert 4 * layout.cell_width + 3 * 10 == 645


def test_cell_centers():
    layout = CellLayout(645, 120)
    assert layout.center(0) == (153.75 / 2, 60)
    assert layout.center(1) == (163.75 + 153.75 / 2, 60)


def test_expired_renders_single_frame(recording_surface):
    count, frames = _collect(EXPIRED, recording_surface, 30)
    assert count == 1
    assert len(frames) == 1
    labels, _ = resolve_labels(CountdownStyle())
    texts = [t[0] for t in frames[0].image]
    assert texts == [text for label in labels for text in ("00", label)]


def test_remaining_renders_requested_frames(recording_surface):
    count, frames = _collect(Remaining(3661000), recording_surface, 30)
    assert count == 30
    assert [f.index for f in frames] == list(range(30))


def test_each_frame_is_one_second_less(recording_surface):
    _, frames = _collect(Remaining(3661000), recording_surface, 30)
    assert frames[0].fields.as_strings() == ("00", "01", "01", "01")
    for previous, current in zip(frames, frames[1:]):
        assert current.fields.total_seconds == previous.fields.total_seconds - 1
    assert frames[-1].fields.total_seconds == 3661 - 29


def test_drawn_digits_match_fields(recording_surface):
    _, frames = _collect(Remaining(90_061_000), recording_surface, 3)
    for frame in frames:
        numbers = [t[0] for t in frame.image[::2]]
        assert numbers == list(frame.fields.as_strings())


def test_cells_are_filled_at_layout_positions(recording_surface):
    style = CountdownStyle()
    _collect(Remaining(10_000), recording_surface, 1, style)
    layout = CellLayout(645, 120)
    assert recording_surface.rects == [
        (layout.cell_x(i), 0, layout.cell_width, 120, style.cell_color) for i in range(4)
    ]


def test_text_is_offset_from_cell_middle(recording_surface):
    style = CountdownStyle()
    _, frames = _collect(Remaining(10_000), recording_surface, 1, style)
    number, label = frames[0].image[0], frames[0].image[1]
    assert number[2] == 60 + style.number_offset
    assert label[2] == 60 + style.label_offset
    assert number[3] == style.text_color


def test_classic_preset_labels(recording_surface):
    _, frames = _collect(EXPIRED, recording_surface, 1, STYLE_PRESETS["classic"])
    drawn = [t[0] for t in frames[0].image[1::2]]
    assert tuple(drawn) == resolve_labels(STYLE_PRESETS["classic"])[0]


def test_font_sizes_follow_base_unit():
    style = CountdownStyle(base_unit=20)
    assert style.number_size == 60
    assert style.label_size == 30


def test_label_offset_scales_with_number_size():
    small = CountdownStyle(base_unit=16)
    large = CountdownStyle(base_unit=32)
    assert small.label_offset == 48 - 15
    assert large.label_offset == 96 - 15
    assert STYLE_PRESETS["classic"].label_offset == 48 + 10


def _label_bitmaps(labels, font):
    bitmaps = []
    for label in labels:
        img = Image.new("L", (64, 64), 0)
        ImageDraw.Draw(img).text((8, 8), label, fill=255, font=font)
        assert img.getbbox() is not None, f"label {label!r} rendered empty"
        bitmaps.append(img.tobytes())
    return bitmaps


@pytest.mark.parametrize("preset", sorted(STYLE_PRESETS))
def test_labels_render_as_distinct_glyphs(preset):
    labels, font = resolve_labels(STYLE_PRESETS[preset])
    assert len(set(_label_bitmaps(labels, font))) == 4


def test_missing_label_font_falls_back_to_latin_labels(monkeypatch, tmp_path, caplog):
    monkeypatch.setattr(frame_renderer, "CJK_FONT_PATHS", [])
    style = CountdownStyle(label_font="missing-font.ttf")

    with caplog.at_level(logging.ERROR):
        labels, font = resolve_labels(style, font_dir=tmp_path)

    if font_covers(font, "".join(style.labels)):
        pytest.skip("Pillow's default font has CJK glyphs here")
    assert labels == ("D", "H", "M", "S")
    assert "No font covers the labels" in caplog.text
    assert len(set(_label_bitmaps(labels, font))) == 4


def _system_cjk_font():
    for path in CJK_FONT_PATHS:
        font = load_font("missing-font.ttf", 24, fallbacks=[path])
        if font_covers(font, "日時分秒"):
            return font
    return None


@pytest.mark.skipif(_system_cjk_font() is None, reason="no CJK font installed")
def test_cjk_labels_drawn_when_font_available():
    labels, font = resolve_labels(CountdownStyle())
    assert labels == ("日", "時", "分", "秒")
    assert len(set(_label_bitmaps(labels, font))) == 4
