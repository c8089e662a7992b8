import logging
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from countdown_gif.config import settings

logger = logging.getLogger(__name__)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont

_fonts_cache: dict[str, Font] = {}

# System fonts with CJK coverage, tried after the configured font directory
CJK_FONT_PATHS = [
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Bold.ttc",
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/google-noto-cjk/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/truetype/wqy/wqy-microhei.ttc",
    "/usr/share/fonts/truetype/wqy/wqy-zenhei.ttc",
    "/usr/share/fonts/wenquanyi/wqy-microhei/wqy-microhei.ttc",
    "/usr/share/fonts/truetype/droid/DroidSansFallbackFull.ttf",
    "/usr/share/fonts/truetype/arphic/uming.ttc",
    "/System/Library/Fonts/PingFang.ttc",
    "/System/Library/Fonts/Hiragino Sans GB.ttc",
    "/Library/Fonts/Arial Unicode.ttf",
    "C:/Windows/Fonts/msjh.ttc",
    "C:/Windows/Fonts/msyh.ttc",
]

LATIN_FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "C:/Windows/Fonts/arialbd.ttf",
]

# A private-use code point no font maps, used to capture the .notdef glyph
_MISSING_GLYPH = "\U0010fffd"


def load_font(
    name: str,
    size: int,
    font_dir: Path | None = None,
    fallbacks: list[str] | None = None,
) -> Font:
    """Load name from font_dir, then each fallback path, then Pillow's default font."""
    font_path = (font_dir or settings.FONT_DIR) / name
    candidates = [str(font_path), *(fallbacks or [])]
    key = f"{'|'.join(candidates)}_{size}"
    if key in _fonts_cache:
        return _fonts_cache[key]

    font = None
    for candidate in candidates:
        try:
            font = ImageFont.truetype(candidate, size)
            break
        except (OSError, IOError):
            continue
    if font is None:
        logger.warning(f"Font {font_path} not found, using default font")
        font = ImageFont.load_default(size)
    elif candidate != str(font_path):
        logger.info(f"Font {font_path} not found, using {candidate}")
    _fonts_cache[key] = font
    return font


def render_glyph(text: str, font: Font) -> bytes:
    """Rasterise text in white on black and return the raw pixels."""
    left, top, right, bottom = font.getbbox(text)
    width = max(1, right - min(left, 0))
    height = max(1, bottom - min(top, 0))
    img = Image.new("L", (width + 2, height + 2), 0)
    ImageDraw.Draw(img).text((1 - min(left, 0), 1 - min(top, 0)), text, fill=255, font=font)
    if img.getbbox() is None:
        return b""
    return img.tobytes()


def font_covers(font: Font, text: str) -> bool:
    """True when every character of text draws a real glyph rather than nothing or .notdef."""
    missing = render_glyph(_MISSING_GLYPH, font)
    for char in text:
        if char.isspace():
            continue
        glyph = render_glyph(char, font)
        if not glyph or glyph == missing:
            return False
    return True


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Convert hex color string to RGB tuple."""
    hex_color = hex_color.lstrip("#")
    return (
        int(hex_color[0:2], 16),
        int(hex_color[2:4], 16),
        int(hex_color[4:6], 16),
    )


class PillowSurface:
    """A canvas-like drawing surface over a Pillow RGB image."""

    def __init__(self, width: int, height: int, background: str = "#000000"):
        self.width = width
        self.height = height
        self.image = Image.new("RGB", (width, height), hex_to_rgb(background))
        self._draw = ImageDraw.Draw(self.image)
        self._fill = (255, 255, 255)
        self._font: Font | None = None

    def set_fill_color(self, color: str) -> None:
        self._fill = hex_to_rgb(color)

    def set_font(self, font: Font) -> None:
        self._font = font

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        # Pillow rectangles include the bottom-right pixel
        x0, y0 = round(x), round(y)
        x1, y1 = round(x + width) - 1, round(y + height) - 1
        if x1 < x0 or y1 < y0:
            return
        self._draw.rectangle([x0, y0, x1, y1], fill=self._fill)

    def draw_text_centered(self, text: str, x: float, y: float) -> None:
        """Draw text with its bounding box centred on (x, y)."""
        font = self._font or ImageFont.load_default()
        bbox = self._draw.textbbox((0, 0), text, font=font)
        text_width = bbox[2] - bbox[0]
        text_height = bbox[3] - bbox[1]
        self._draw.text(
            (x - text_width / 2 - bbox[0], y - text_height / 2 - bbox[1]),
            text,
            fill=self._fill,
            font=font,
        )

    def snapshot(self) -> Image.Image:
        return self.image.copy()
