"""
Configuration module for the prompt bot framework.

All secrets are read from environment variables.
"""
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    port: int = 3978
    host: str = "0.0.0.0"
    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "pretty"] = "pretty"

    # Recognition
    recognizer_provider: Literal["pattern", "remote"] = "pattern"
    recognizer_endpoint: str = ""
    recognizer_api_key: str = ""
    recognizer_timeout_seconds: float = 5.0
    default_culture: str = "en-us"

    # Language generation
    lg_provider: Literal["template", "remote"] = "template"
    lg_endpoint: str = ""
    lg_application_id: str = "cafebot"
    lg_endpoint_key: str = ""
    lg_endpoint_region: str = "westus"  # must match the key's region
    lg_timeout_seconds: float = 5.0

    # Conversation state
    state_ttl_seconds: int = 86400  # 24 hours, 0 disables eviction

    # CORS
    cors_origins: str = "*"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
