"""Centralized configuration management with environment-aware defaults.

Configuration is expressed as Pydantic Settings so every value is typed and
validated, can be overridden through environment variables or a ``.env``
file, and is cached for the lifetime of the process.

Nested sections use the ``__`` delimiter, e.g.
``AUTH_CONFIG__SECRET_FOR_KEY`` or ``DATABASE_CONFIG__DATABASE_URL``.

Configuration sources (in order of precedence):
1. Environment variables
2. .env file in project root
3. Default values in model definitions
4. Environment-based defaults (production vs development)
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_DATABASE_DRIVERS = ("sqlite+aiosqlite://", "postgresql+asyncpg://")


class LogConfig(BaseModel):
    """Logging configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_formatter_type: Literal["console", "json"] | None = Field(
        default=None,
        description="Log output formatter. Auto-detected if not specified.",
    )
    excluded_paths: list[str] = Field(
        default_factory=lambda: ["/health"],
        description="Paths to exclude from request logging",
    )
    slow_request_threshold_ms: int = Field(
        default=1000,
        gt=0,
        description="Threshold for slow request warnings (milliseconds)",
    )
    enable_sql_logging: bool = Field(
        default=False,
        description="Enable slow SQL query logging",
    )
    slow_query_threshold_ms: int = Field(
        default=100,
        gt=0,
        description="Slow query threshold in milliseconds",
    )
    sensitive_fields: list[str] = Field(
        default_factory=lambda: [
            "password",
            "token",
            "secret",
            "authorization",
        ],
        description="Field names to redact",
    )


class ObservabilityConfig(BaseModel):
    """OpenTelemetry tracing configuration."""

    enable_tracing: bool = Field(
        default=True,
        description="Enable OpenTelemetry tracing",
    )
    exporter_type: Literal["console", "otlp", "none"] = Field(
        default="console",
        description="Trace exporter type. Defaults to console for development.",
    )
    exporter_endpoint: str | None = Field(
        default=None,
        description="OTLP exporter endpoint",
    )
    trace_sample_rate: float = Field(
        default=1.0,
        ge=0.0,
        le=1.0,
        description="Trace sampling rate (0.0 to 1.0)",
    )

    @field_validator("exporter_endpoint", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for nullable fields."""
        if v == "":
            return None
        return v


class DatabaseConfig(BaseModel):
    """Database configuration settings.

    The connection string must name an async driver. SQLite (aiosqlite) is
    the default store; PostgreSQL (asyncpg) is supported for deployments.
    Pool sizing only applies to PostgreSQL.
    """

    database_url: str = Field(
        default="sqlite+aiosqlite:///./cityinfo.db",
        description="Database connection URL",
    )
    pool_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of connections to maintain in the pool",
    )
    max_overflow: int = Field(
        default=5,
        ge=0,
        le=50,
        description="Maximum overflow connections above pool_size",
    )
    pool_timeout: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout in seconds for acquiring a connection from the pool",
    )
    pool_pre_ping: bool = Field(
        default=True,
        description="Whether to test connections before using them",
    )
    echo: bool = Field(
        default=False,
        description="Whether to log SQL statements (use only for debugging)",
    )

    @field_validator("database_url", mode="after")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate that the database URL uses a supported async driver."""
        if not v.startswith(SUPPORTED_DATABASE_DRIVERS):
            msg = (
                "Database URL must use one of the async drivers: "
                f"{', '.join(SUPPORTED_DATABASE_DRIVERS)}"
            )
            raise ValueError(msg)
        return v

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured store is SQLite."""
        return self.database_url.startswith("sqlite")


class AuthConfig(BaseModel):
    """Bearer token signing and validation settings."""

    secret_for_key: str = Field(
        default="cityinfo-development-signing-secret-change-me",
        min_length=32,
        description="Symmetric secret used to sign tokens (HMAC-SHA256)",
    )
    issuer: str = Field(
        default="https://localhost:8000",
        description="Token issuer; tokens from other issuers are rejected",
    )
    audience: str = Field(
        default="cityinfoapi",
        description="Token audience; tokens for other audiences are rejected",
    )


class MailConfig(BaseModel):
    """Notification mail addresses."""

    mail_to_address: str = Field(
        default="admin@mycompany.com",
        description="Recipient of deletion notifications",
    )
    mail_from_address: str = Field(
        default="noreply@mycompany.com",
        description="Sender of deletion notifications",
    )


class FileConfig(BaseModel):
    """Downloadable file settings."""

    download_path: str = Field(
        default="files/cityinfo-guide.txt",
        description="Path of the file served by the files endpoint",
    )


class Settings(BaseSettings):
    """Main settings class for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        env_nested_delimiter="__",
    )

    # Application settings
    app_name: str = Field(default="CityInfo API", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment the application is running in",
    )
    debug: bool = Field(default=True, description="Debug mode flag")

    # API settings
    api_host: str = Field(default="127.0.0.1", description="API host")
    api_port: int = Field(default=8000, description="API port")
    docs_url: str | None = Field(default="/docs", description="Swagger UI URL")
    redoc_url: str | None = Field(default="/redoc", description="ReDoc URL")
    openapi_url: str | None = Field(
        default="/openapi.json", description="OpenAPI schema URL"
    )
    strict_content_negotiation: bool = Field(
        default=True,
        description="Answer 406 when the Accept header names no supported format",
    )

    log_config: LogConfig = Field(
        default_factory=LogConfig, description="Logging configuration"
    )
    observability_config: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig, description="Observability configuration"
    )
    database_config: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    auth_config: AuthConfig = Field(
        default_factory=AuthConfig, description="Token configuration"
    )
    mail_config: MailConfig = Field(
        default_factory=MailConfig, description="Mail configuration"
    )
    file_config: FileConfig = Field(
        default_factory=FileConfig, description="File download configuration"
    )

    def model_post_init(self, __context: object) -> None:
        """Post initialization to set environment-based defaults."""
        super().model_post_init(__context)

        if self.log_config.log_formatter_type is None:
            self.log_config.log_formatter_type = self._detect_formatter()

        if self.environment == "production":
            if self.observability_config.exporter_type == "console":
                self.observability_config.exporter_type = "otlp"
            if self.observability_config.trace_sample_rate == 1.0:
                self.observability_config.trace_sample_rate = 0.1

    def _detect_formatter(self) -> Literal["console", "json"]:
        """Auto-detect log formatter based on environment."""
        # Container platforms collect stdout as structured JSON
        if os.getenv("K_SERVICE") or os.getenv("AWS_EXECUTION_ENV"):
            return "json"
        if self.environment == "development":
            return "console"
        return "json"

    @field_validator("docs_url", "redoc_url", "openapi_url", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for nullable fields."""
        if v == "":
            return None
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
