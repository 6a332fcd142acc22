"""Application configuration."""

import os
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

GALLERY_PLACEHOLDER_SIZE = "300x300"
TOP_THREE_PLACEHOLDER_SIZE = "150x150"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    voting_api_base_url: str = "http://localhost:5000"
    image_path_prefix: str = "/images"
    placeholder_image_url: str = (
        "https://via.placeholder.com/{size}?text=Image+Not+Found"
    )
    session_file: Path = Path("~/.harley_vote/session.json")
    refresh_interval_seconds: float = 30.0
    http_timeout_seconds: float = 10.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("refresh_interval_seconds", "http_timeout_seconds")
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @field_validator("voting_api_base_url", "image_path_prefix")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def placeholder_url(settings: Settings, size: str) -> str:
    """Return the placeholder image URL for a given size, e.g. ``300x300``."""
    return settings.placeholder_image_url.format(size=size)
