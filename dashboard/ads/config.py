"""Configuration for the ads lifecycle."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class AdSettings(BaseSettings):
    """Settings for ad request review and scheduling."""

    model_config = {"env_prefix": "ADS_", "case_sensitive": False}

    # Backend
    backend_base_url: str = Field(
        default="http://localhost:8000/api",
        description="Base URL of the remote backend that owns ad requests",
    )
    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for backend calls",
    )

    # Field contracts
    rejection_reason_min_length: int = 10
    title_min_length: int = 5
    description_min_length: int = 10
    min_duration_days: int = 1
    max_duration_days: int = 365
    min_duration_seconds: int = 3
    max_duration_seconds: int = 30

    # Logging
    log_level: str = Field(default="INFO", description="Default log level")
    log_json: bool = Field(default=True, description="Render log events as JSON")
    service_name: str = Field(
        default="admin-dashboard",
        description="Bound to every log event as ``service``",
    )


@lru_cache
def get_ad_settings() -> AdSettings:
    """Get cached ad settings instance."""
    return AdSettings()
