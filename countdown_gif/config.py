from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    TMP_DIR: Path = Path("tmp")
    CLEANUP_ENABLED: bool = True
    CLEANUP_DELAY_SECONDS: float = 2.0

    STYLE_PRESET: str = "framed"
    FRAME_DELAY_MS: int = 1000
    GIF_QUALITY: int = 10
    GIF_REPEAT: int = 0

    FONT_DIR: Path = Path(__file__).resolve().parent / "assets" / "fonts"

    model_config = {"env_prefix": "COUNTDOWN_", "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
