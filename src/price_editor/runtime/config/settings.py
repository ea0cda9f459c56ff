"""Primitive values loaded from environment variables and .env files."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Environment and deployment
    environment: Literal["development", "production", "test"] = Field(
        default="development", validation_alias="APP_ENVIRONMENT"
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Infrastructure URLs
    database_url: str = Field(
        default="sqlite:///./price_editor.db", validation_alias="DATABASE_URL"
    )
    redis_url: str | None = Field(default=None, validation_alias="REDIS_URL")

    # Host store
    wc_site_url: str = Field(
        default="http://localhost:8080", validation_alias="WC_SITE_URL"
    )
    wc_consumer_key: str | None = Field(default=None, validation_alias="WC_CONSUMER_KEY")
    wc_consumer_secret: str | None = Field(
        default=None, validation_alias="WC_CONSUMER_SECRET"
    )

    # Security
    nonce_secret: str = Field(
        default="dev-nonce-secret", validation_alias="NONCE_SECRET"
    )

    @property
    def has_host_credentials(self) -> bool:
        """Whether both WooCommerce REST API keys are present."""
        return bool(self.wc_consumer_key and self.wc_consumer_secret)
