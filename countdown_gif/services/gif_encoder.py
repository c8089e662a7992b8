"""
Animated GIF encoding with a streaming output sink.

GifEncoder buffers frames between start() and finish(), encodes them with
Pillow and streams the bytes into a piped sink. The sink signals completion
through its finish event once the last chunk has been written and the file
closed.
"""

import io
import logging
import threading
from collections.abc import Callable
from pathlib import Path

from PIL import Image, ImageChops

from countdown_gif.services.surface import hex_to_rgb

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class EncoderError(RuntimeError):
    pass


class FileSink:
    """Write-once file destination that signals when fully persisted."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.finished = threading.Event()
        self._file = None
        self._callbacks: list[Callable[[], None]] = []

    def on_finish(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def write(self, chunk: bytes) -> None:
        if self.finished.is_set():
            raise EncoderError(f"Sink {self.path} already finished")
        if self._file is None:
            self._file = open(self.path, "wb")
        self._file.write(chunk)

    def end(self) -> None:
        if self.finished.is_set():
            return
        if self._file is None:
            self._file = open(self.path, "wb")
        self._file.close()
        self.finished.set()
        for callback in self._callbacks:
            callback()

    def abort(self) -> None:
        """Close the file after a failed write without signalling finish."""
        if self._file is not None and not self._file.closed:
            self._file.close()

    def wait(self, timeout: float | None = None) -> bool:
        return self.finished.wait(timeout)


class GifEncoder:
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.repeat = 0
        self.delay = 0
        self.quality = 10
        self.transparent: tuple[int, int, int] | None = None
        self._frames: list[Image.Image] = []
        self._sink: FileSink | None = None
        self._started = False
        self._finished = False

    def pipe(self, sink: FileSink) -> FileSink:
        self._sink = sink
        return sink

    def start(self) -> None:
        self._frames = []
        self._started = True
        self._finished = False

    def set_repeat(self, repeat: int) -> None:
        """0 loops forever; a positive value loops that many extra times."""
        self.repeat = max(0, int(repeat))

    def set_delay(self, milliseconds: int) -> None:
        self.delay = max(0, int(milliseconds))

    def set_quality(self, quality: int) -> None:
        """1 is best and slowest, 20 is fastest; 10 is a reasonable default."""
        self.quality = max(1, int(quality))

    def set_transparent(self, color: str | None) -> None:
        self.transparent = hex_to_rgb(color) if color else None

    def add_frame(self, image: Image.Image) -> None:
        if not self._started or self._finished:
            raise EncoderError("add_frame() called outside start()/finish()")
        if image.size != (self.width, self.height):
            raise EncoderError(
                f"Frame size {image.size} does not match encoder size {(self.width, self.height)}"
            )
        self._frames.append(self._prepare(image))

    def _prepare(self, image: Image.Image) -> Image.Image:
        rgb = image.convert("RGB")
        if self.transparent is not None:
            # Pillow maps fully transparent pixels onto a transparent palette index
            matches = [
                band.point(lambda v, target=target: 255 if v == target else 0)
                for band, target in zip(rgb.split(), self.transparent)
            ]
            match = ImageChops.multiply(ImageChops.multiply(matches[0], matches[1]), matches[2])
            rgba = rgb.convert("RGBA")
            rgba.putalpha(ImageChops.invert(match))
            return rgba
        method = Image.Quantize.MEDIANCUT if self.quality <= 10 else Image.Quantize.FASTOCTREE
        return rgb.quantize(colors=256, method=method)

    def finish(self) -> None:
        if not self._started or self._finished:
            raise EncoderError("finish() called without a matching start()")
        if self._sink is None:
            raise EncoderError("No output sink piped to the encoder")
        if not self._frames:
            raise EncoderError("Cannot encode a GIF without frames")

        buffer = io.BytesIO()
        first, *rest = self._frames
        first.save(
            buffer,
            format="GIF",
            save_all=True,
            append_images=rest,
            duration=self.delay,
            loop=self.repeat,
            disposal=2 if self.transparent is not None else 1,
            optimize=False,
        )
        self._finished = True
        logger.info(f"Encoded {len(self._frames)} frames ({buffer.tell()} bytes)")
        self._frames = []

        buffer.seek(0)
        try:
            while chunk := buffer.read(CHUNK_SIZE):
                self._sink.write(chunk)
        except Exception:
            self._sink.abort()
            raise
        self._sink.end()
