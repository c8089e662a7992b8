from datetime import datetime, timezone

import pytest

from countdown_gif.config import Settings


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(TMP_DIR=tmp_path / "tmp", CLEANUP_ENABLED=False)


class RecordingSurface:
    """Drawing surface fake that records every call."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.fill = None
        self.font = None
        self.rects: list[tuple] = []
        self.texts: list[tuple] = []

    def set_fill_color(self, color):
        self.fill = color

    def set_font(self, font):
        self.font = font

    def fill_rect(self, x, y, width, height):
        self.rects.append((x, y, width, height, self.fill))

    def draw_text_centered(self, text, x, y):
        self.texts.append((text, x, y, self.fill))

    def snapshot(self):
        drawn, self.texts = self.texts, []
        return drawn


@pytest.fixture
def recording_surface() -> RecordingSurface:
    return RecordingSurface(645, 120)
