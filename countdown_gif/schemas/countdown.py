from pydantic import BaseModel, ConfigDict, field_validator

from countdown_gif.utils.clamp import clamp

DEFAULT_WIDTH = 645
DEFAULT_HEIGHT = 120
DEFAULT_FRAMES = 30
DEFAULT_NAME = "default"

WIDTH_RANGE = (150, 645)
HEIGHT_RANGE = (120, 500)
FRAMES_RANGE = (1, 90)


def _clamp_or_default(v: int | None, default: int, bounds: tuple[int, int]) -> int:
    if v is None:
        return default
    return clamp(int(v), *bounds)


class CountdownRequest(BaseModel):
    """Validated countdown parameters. Out-of-range sizes are clamped, not rejected."""

    time: str
    width: int | None = DEFAULT_WIDTH
    height: int | None = DEFAULT_HEIGHT
    frames: int | None = DEFAULT_FRAMES
    name: str | None = DEFAULT_NAME

    model_config = ConfigDict(frozen=True)

    @field_validator("width")
    @classmethod
    def clamp_width(cls, v: int | None) -> int:
        return _clamp_or_default(v, DEFAULT_WIDTH, WIDTH_RANGE)

    @field_validator("height")
    @classmethod
    def clamp_height(cls, v: int | None) -> int:
        return _clamp_or_default(v, DEFAULT_HEIGHT, HEIGHT_RANGE)

    @field_validator("frames")
    @classmethod
    def clamp_frames(cls, v: int | None) -> int:
        return _clamp_or_default(v, DEFAULT_FRAMES, FRAMES_RANGE)

    @field_validator("name")
    @classmethod
    def sanitize_name(cls, v: str | None) -> str:
        # Keep the artifact inside the temporary directory
        if not v:
            return DEFAULT_NAME
        cleaned = v.replace("/", "_").replace("\\", "_").strip(". ")
        return cleaned or DEFAULT_NAME

    @property
    def filename(self) -> str:
        return f"{self.name}.gif"
