"""
Library configuration using Pydantic Settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    # Media toolchain
    FFMPEG_BINARY: str = "ffmpeg"
    FFPROBE_BINARY: str = "ffprobe"
    TOOLCHAIN_PROBE_TIMEOUT_SECONDS: int = 10

    # Scratch files live only for the duration of one trim/concatenate call
    MEDIA_SCRATCH_DIR: str = "/tmp/edit_coach_scratch"
    MEDIA_CONTAINER_EXTENSION: str = ".webm"
    MEDIA_MIME_TYPE: str = "video/webm"

    # Editing session
    HIGHLIGHT_TITLE_SUFFIX: str = " (Highlight)"
    MIN_TRIM_SECONDS: float = 0.5

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()


def require_ffmpeg_binary() -> str:
    """Return the configured ffmpeg binary or raise a configuration error."""
    binary = (settings.FFMPEG_BINARY or "").strip()
    if not binary:
        raise ValueError("FFMPEG_BINARY is not configured")
    return binary
