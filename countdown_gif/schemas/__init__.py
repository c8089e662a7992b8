from countdown_gif.schemas.countdown import CountdownRequest
from countdown_gif.schemas.style import STYLE_PRESETS, CountdownStyle, get_style

__all__ = [
    "CountdownRequest",
    "CountdownStyle", "STYLE_PRESETS", "get_style",
]
