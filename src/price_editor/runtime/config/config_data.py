"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class RateLimiterConfig(BaseModel):
    """Per-user fixed window request counter."""

    requests: int = Field(
        default=100, description="Number of requests allowed per window"
    )
    window_seconds: int = Field(default=60, description="Window length in seconds")
    enabled: bool = Field(default=True, description="Enable rate limiting")
    key_prefix: str = Field(
        default="wpe_rate_", description="Prefix of the per-user counter key"
    )


class RedisConfig(BaseModel):
    """Redis configuration model."""

    enabled: bool = Field(default=False, description="Enable Redis service")
    url: str | None = Field(default=None, description="Redis connection URL")
    password: str | None = Field(
        default=None, description="Password for Redis authentication"
    )
    decode_responses: bool = Field(
        default=True, description="Decode Redis responses to strings"
    )
    max_connections: int = Field(default=20, description="Connection pool size")
    socket_timeout: float = Field(default=5.0, description="Socket timeout (s)")
    socket_connect_timeout: float = Field(
        default=5.0, description="Socket connect timeout (s)"
    )

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the Redis connection string with password if provided."""
        if not self.url:
            return ""
        if self.password:
            if "@" in self.url:
                # URL already has auth info
                return self.url
            parts = self.url.split("://", 1)
            if len(parts) == 2:
                scheme, rest = parts
                return f"{scheme}://:{self.password}@{rest}"
        return self.url

    @property
    def sanitized_connection_string(self) -> str:
        """Connection string safe for logs."""
        if self.password:
            return self.connection_string.replace(self.password, "***")
        return self.connection_string


class HostConfig(BaseModel):
    """Connection to the WooCommerce/WordPress host store."""

    site_url: str = Field(
        default="http://localhost:8080", description="WordPress site URL"
    )
    api_prefix: str = Field(default="wp-json", description="REST API root path")
    consumer_key: str | None = Field(
        default=None, description="WooCommerce REST API consumer key"
    )
    consumer_secret: str | None = Field(
        default=None, description="WooCommerce REST API consumer secret"
    )
    timeout_seconds: float = Field(default=15.0, description="HTTP timeout")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    identity_cache_ttl: int = Field(
        default=60, description="Seconds a resolved caller stays cached"
    )

    @computed_field
    @property
    def api_base_url(self) -> str:
        """Base URL of the host REST API."""
        return f"{self.site_url.rstrip('/')}/{self.api_prefix.strip('/')}/"


class EditorConfig(BaseModel):
    """Behaviour of the editor endpoints."""

    manage_capability: str = Field(
        default="manage_woocommerce",
        description="Capability required for every editor endpoint",
    )
    edit_capability: str = Field(
        default="edit_products",
        description="Capability required to write to a product",
    )
    cache_duration: int = Field(
        default=3600, description="Seconds categories and tax classes stay cached"
    )
    enable_logging: bool = Field(
        default=False, description="Emit audit events for product changes"
    )
    page_length: int = Field(default=50, description="Default grid page length")


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default="logs/app.log", description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./price_editor.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )

    @computed_field
    @property
    def connection_string(self) -> str:
        """Database URL with the password taken from the environment if configured."""
        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        if not self.password_env_var:
            return self.url

        import os

        password = os.getenv(self.password_env_var)
        if not password:
            raise ValueError(f"Environment variable {self.password_env_var} not set")
        if base_url.password and base_url.password != password:
            logger.warning(
                "Database password from environment variable does not match the one in the URL. Using password from environment variable."
            )
        return base_url.set(password=password).render_as_string(hide_password=False)


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    api_prefix: str = Field(default="/api/v1", description="Prefix of editor routes")
    nonce_signing_secret: str | None = Field(
        default=None, description="Secret for signing editor nonces"
    )
    nonce_max_age_hours: int = Field(
        default=12, description="Hours an editor nonce stays valid"
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    rate_limiter: RateLimiterConfig = Field(
        default_factory=RateLimiterConfig, description="Rate limiter configuration"
    )
    redis: RedisConfig = Field(
        default_factory=RedisConfig, description="Redis configuration"
    )
    host: HostConfig = Field(
        default_factory=HostConfig, description="Host store configuration"
    )
    editor: EditorConfig = Field(
        default_factory=EditorConfig, description="Editor configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
