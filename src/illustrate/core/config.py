"""Application configuration using Pydantic BaseSettings."""

import logging
from typing import Optional

import structlog
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from illustrate.models.enums import ProviderCode


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application Environment
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Transport
    http_timeout_seconds: float = Field(default=120.0, alias="HTTP_TIMEOUT_SECONDS")

    # Provider credentials
    # Optional: a missing key fails only the jobs that target that provider
    openai_api_key: str = Field(default="", alias="OPENAI_API_KEY")
    stability_api_key: str = Field(default="", alias="STABILITY_API_KEY")
    replicate_api_token: str = Field(default="", alias="REPLICATE_API_TOKEN")
    google_api_key: str = Field(default="", alias="GOOGLE_API_KEY")
    fal_api_key: str = Field(default="", alias="FAL_API_KEY")
    hugging_face_token: str = Field(default="", alias="HUGGING_FACE_TOKEN")

    # Job Queue
    failed_item_ttl_seconds: int = Field(default=300, alias="FAILED_ITEM_TTL_SECONDS")

    def secret_for(self, provider: ProviderCode) -> Optional[str]:
        """Return the configured secret for a provider, or None when unset."""
        secrets = {
            ProviderCode.OPENAI: self.openai_api_key,
            ProviderCode.STABILITY_AI: self.stability_api_key,
            ProviderCode.REPLICATE: self.replicate_api_token,
            ProviderCode.GOOGLE_CLOUD: self.google_api_key,
            ProviderCode.FAL_AI: self.fal_api_key,
            ProviderCode.HUGGING_FACE: self.hugging_face_token,
        }
        return secrets.get(provider) or None

    @model_validator(mode="after")
    def validate_limits(self) -> "Settings":
        """Reject settings that would make every request fail."""
        if self.http_timeout_seconds <= 0:
            raise ValueError(
                f"HTTP_TIMEOUT_SECONDS must be positive (got {self.http_timeout_seconds})"
            )
        if self.failed_item_ttl_seconds < 0:
            raise ValueError(
                f"FAILED_ITEM_TTL_SECONDS cannot be negative (got {self.failed_item_ttl_seconds})"
            )
        return self


def configure_logging(settings: Settings) -> None:
    """Configure structlog based on application environment.

    - Production: JSON output for log aggregation
    - Development: Console output for human readability
    """
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    if settings.app_env == "production":
        renderer = [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderer = [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            *renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
