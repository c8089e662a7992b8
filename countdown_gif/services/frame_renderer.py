"""
Countdown frame renderer.

Draws four equal-width cells (days, hours, minutes, seconds) across the
surface, one frame per second of countdown:
- Expired: a single static frame showing "00" in every cell
- Remaining: exactly frame_count frames, each one second less than the last
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from PIL import Image

from countdown_gif.schemas.style import CountdownStyle
from countdown_gif.services.duration import (
    ZERO_FIELDS,
    DurationFields,
    DurationState,
    Expired,
)
from countdown_gif.services.surface import (
    CJK_FONT_PATHS,
    LATIN_FONT_PATHS,
    Font,
    font_covers,
    load_font,
)

logger = logging.getLogger(__name__)

CELL_COUNT = 4


class Surface(Protocol):
    width: int
    height: int

    def set_fill_color(self, color: str) -> None: ...
    def set_font(self, font: Font) -> None: ...
    def fill_rect(self, x: float, y: float, width: float, height: float) -> None: ...
    def draw_text_centered(self, text: str, x: float, y: float) -> None: ...
    def snapshot(self) -> Image.Image: ...


@dataclass(frozen=True)
class Frame:
    index: int
    fields: DurationFields
    image: Image.Image


@dataclass(frozen=True)
class CellLayout:
    width: int
    height: int
    gap: int = 10

    @property
    def cell_width(self) -> float:
        return (self.width - self.gap * (CELL_COUNT - 1)) / CELL_COUNT

    @property
    def cell_height(self) -> int:
        return self.height

    def cell_x(self, i: int) -> float:
        return i * (self.cell_width + self.gap)

    def center(self, i: int) -> tuple[float, float]:
        return self.cell_x(i) + self.cell_width / 2, self.cell_height / 2


def resolve_labels(
    style: CountdownStyle, font_dir: Path | None = None
) -> tuple[tuple[str, ...], Font]:
    """Pick the unit labels and a font that can draw them."""
    label_font = load_font(style.label_font, style.label_size, font_dir, CJK_FONT_PATHS)
    if font_covers(label_font, "".join(style.labels)):
        return style.labels, label_font

    logger.error(
        f"No font covers the labels {''.join(style.labels)!r}, drawing {style.fallback_labels} instead"
    )
    fallback_font = load_font(style.number_font, style.label_size, font_dir, LATIN_FONT_PATHS)
    return style.fallback_labels, fallback_font


def _draw_cells(
    surface: Surface,
    layout: CellLayout,
    fields: DurationFields,
    style: CountdownStyle,
    number_font: Font,
    label_font: Font,
    labels: tuple[str, ...],
) -> None:
    for i, (value, label) in enumerate(zip(fields.as_strings(), labels)):
        surface.set_fill_color(style.cell_color)
        surface.fill_rect(layout.cell_x(i), 0, layout.cell_width, layout.cell_height)

        cx, cy = layout.center(i)
        surface.set_fill_color(style.text_color)
        surface.set_font(number_font)
        surface.draw_text_centered(value, cx, cy + style.number_offset)
        surface.set_font(label_font)
        surface.draw_text_centered(label, cx, cy + style.label_offset)


def render(
    state: DurationState,
    surface: Surface,
    frame_count: int,
    emit: Callable[[Frame], None],
    style: CountdownStyle | None = None,
    font_dir: Path | None = None,
) -> int:
    """
    Draw the countdown frames onto surface, handing each one to emit.

    Returns the number of frames emitted.
    """
    style = style or CountdownStyle()
    layout = CellLayout(surface.width, surface.height, style.gap)
    number_font = load_font(style.number_font, style.number_size, font_dir, LATIN_FONT_PATHS)
    labels, label_font = resolve_labels(style, font_dir)

    if isinstance(state, Expired):
        _draw_cells(surface, layout, ZERO_FIELDS, style, number_font, label_font, labels)
        emit(Frame(0, ZERO_FIELDS, surface.snapshot()))
        logger.debug("Target time has passed, rendered a single frame")
        return 1

    for elapsed in range(frame_count):
        fields = state.fields(elapsed)
        _draw_cells(surface, layout, fields, style, number_font, label_font, labels)
        emit(Frame(elapsed, fields, surface.snapshot()))

    logger.debug(f"Rendered {frame_count} countdown frames")
    return frame_count
