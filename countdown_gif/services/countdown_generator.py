"""
Countdown GIF generation entry point.

Validates the request, resolves the countdown once, renders the frames into a
GIF encoder piped to a file in the temporary directory, and calls on_complete
once the file has been fully written. The file is removed again after a short
grace period so a consumer can finish reading it.
"""

import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path

from countdown_gif.config import Settings, settings as default_settings
from countdown_gif.schemas.countdown import (
    DEFAULT_FRAMES,
    DEFAULT_HEIGHT,
    DEFAULT_NAME,
    DEFAULT_WIDTH,
    CountdownRequest,
)
from countdown_gif.schemas.style import CountdownStyle, get_style
from countdown_gif.services.duration import compute
from countdown_gif.services.frame_renderer import Frame, render
from countdown_gif.services.gif_encoder import FileSink, GifEncoder
from countdown_gif.services.surface import PillowSurface

logger = logging.getLogger(__name__)


def _remove_artifact(path: Path) -> None:
    try:
        os.unlink(path)
        logger.info(f"Removed {path}")
    except OSError as e:
        logger.error(f"Failed to remove {path}: {e}")


def schedule_cleanup(path: Path, delay: float) -> threading.Timer:
    """Delete path after delay seconds on a background timer."""
    timer = threading.Timer(delay, _remove_artifact, args=(path,))
    timer.daemon = True
    timer.start()
    return timer


def generate(
    time: str,
    width: int | None = DEFAULT_WIDTH,
    height: int | None = DEFAULT_HEIGHT,
    frames: int | None = DEFAULT_FRAMES,
    name: str | None = DEFAULT_NAME,
    on_complete: Callable[[], None] | None = None,
    style: CountdownStyle | None = None,
    settings: Settings | None = None,
) -> Path:
    """
    Render a countdown GIF to <TMP_DIR>/<name>.gif.

    Args:
        time: Target timestamp (ISO-8601). Unparseable values render as expired.
        width, height, frames: Clamped to their allowed ranges.
        name: Output file stem
        on_complete: Called with no arguments once the GIF is on disk
        style: Cell styling; defaults to the configured preset
        settings: Overrides the module-level settings

    Returns:
        Path of the written GIF
    """
    settings = settings or default_settings
    style = style or get_style(settings.STYLE_PRESET)
    request = CountdownRequest(time=time, width=width, height=height, frames=frames, name=name)

    state = compute(request.time)

    tmp_dir = Path(settings.TMP_DIR)
    tmp_dir.mkdir(parents=True, exist_ok=True)
    file_path = tmp_dir / request.filename

    encoder = GifEncoder(request.width, request.height)
    sink = encoder.pipe(FileSink(file_path))

    def _on_finish() -> None:
        try:
            if on_complete is not None:
                on_complete()
        finally:
            if settings.CLEANUP_ENABLED:
                schedule_cleanup(file_path, settings.CLEANUP_DELAY_SECONDS)

    sink.on_finish(_on_finish)

    encoder.start()
    encoder.set_repeat(settings.GIF_REPEAT)
    encoder.set_delay(settings.FRAME_DELAY_MS)
    encoder.set_quality(settings.GIF_QUALITY)
    encoder.set_transparent(style.transparent_color)

    surface = PillowSurface(request.width, request.height, style.background_color)

    def _emit(frame: Frame) -> None:
        encoder.add_frame(frame.image)

    count = render(state, surface, request.frames, _emit, style, settings.FONT_DIR)
    encoder.finish()

    logger.info(f"Countdown GIF generated: {file_path} ({count} frames)")
    return file_path
