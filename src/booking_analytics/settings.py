"""Configuration settings for booking analytics."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyticsSettings(BaseSettings):
    """Defaults for report generation and logging."""

    default_window: Literal["7", "30", "90", "all"] = Field(
        default="30",
        description="Lookback period used when a request does not name one",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["text", "json"] = "text"
    environment: str = "development"

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    @field_validator("default_window", mode="before")
    @classmethod
    def normalize_window(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else str(v)


class APISettings(BaseSettings):
    """HTTP API configuration."""

    key: str = ""
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)

    model_config = SettingsConfigDict(env_prefix="API_")


class Settings(BaseSettings):
    """Root settings container."""

    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    api: APISettings = Field(default_factory=APISettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
