from pydantic import BaseModel, ConfigDict, Field, field_validator


def _validate_hex_color(v: str | None) -> str | None:
    if v is None:
        return v
    if len(v) != 7 or not v.startswith("#"):
        raise ValueError("Color must be a 7-character hex string like '#1E54A3'")
    try:
        int(v[1:], 16)
    except ValueError:
        raise ValueError("Color must be a valid hex color")
    return v.upper()


class CountdownStyle(BaseModel):
    """Colours, fonts and label text for the four countdown cells."""

    cell_color: str = "#1E54A3"
    text_color: str = "#FFFFFF"
    background_color: str = "#000000"
    transparent_color: str | None = "#000000"
    labels: tuple[str, str, str, str] = ("日", "時", "分", "秒")
    # Drawn instead of labels when no available font has their glyphs
    fallback_labels: tuple[str, str, str, str] = ("D", "H", "M", "S")

    base_unit: int = Field(default=16, gt=0)
    number_scale: float = Field(default=3.0, gt=0)
    label_scale: float = Field(default=1.5, gt=0)
    number_font: str = "Arial-Bold.ttf"
    label_font: str = "NotoSansTC-Medium.ttf"

    # number_offset is measured from the cell middle, label_gap from number_size
    number_offset: int = -10
    label_gap: int = -15
    gap: int = Field(default=10, ge=0)

    model_config = ConfigDict(frozen=True)

    @field_validator("cell_color", "text_color", "background_color", "transparent_color")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        return _validate_hex_color(v)

    @property
    def number_size(self) -> int:
        return int(self.base_unit * self.number_scale)

    @property
    def label_size(self) -> int:
        return int(self.base_unit * self.label_scale)

    @property
    def label_offset(self) -> int:
        """Distance from the cell middle to the label centre."""
        return self.number_size + self.label_gap


STYLE_PRESETS: dict[str, CountdownStyle] = {
    # Transparent framing with the larger CJK labels
    "framed": CountdownStyle(),
    # Opaque blue cells, dark digits, small labels
    "classic": CountdownStyle(
        cell_color="#008DF2",
        text_color="#1E54A3",
        transparent_color=None,
        labels=("天", "時", "分", "秒"),
        label_scale=14 / 16,
        number_font="Arial.ttf",
        label_font="NotoSansTC-Medium.ttf",
        number_offset=0,
        label_gap=10,
    ),
}


def get_style(name: str) -> CountdownStyle:
    try:
        return STYLE_PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown style preset '{name}', expected one of {sorted(STYLE_PRESETS)}"
        ) from None
