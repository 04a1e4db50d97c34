"""Startgate Configuration Schema.

Pydantic-based settings loaded from the environment. Structural problems
(wrong types, out-of-range values, malformed service lists) are reported here;
presence and strength of secrets are left to the startup probes so that they
show up in the validation report.
"""

from __future__ import annotations

from enum import StrEnum
import logging
from typing import Any
from urllib.parse import urlparse

from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from startgate.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_OPENROUTER_MODEL = "google/gemini-2.5-flash"


class Environment(StrEnum):
    """Valid environment values."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(StrEnum):
    """Valid log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ExternalServiceConfig(BaseModel):
    """An external HTTP dependency probed with a HEAD request."""

    name: str = Field(..., min_length=1, description="Short service name")
    url: str = Field(..., description="URL answering HEAD when healthy")
    critical: bool = Field(
        default=False, description="Whether an outage blocks startup"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Strip and reject blank names."""
        v = v.strip()
        if not v:
            msg = "External service name cannot be blank"
            raise ValueError(msg)
        return v

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate external service URL."""
        parsed = urlparse(v)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            msg = f"Invalid external service URL: {v}"
            raise ValueError(msg)
        return v


class StartgateConfig(BaseSettings):
    """Settings for the startup gate and the dependencies it probes."""

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
        alias="ENVIRONMENT",
    )
    port: int = Field(
        default=3000, description="Server port", ge=1, le=65535, alias="PORT"
    )
    log_level: LogLevel = Field(
        default=LogLevel.INFO, description="Logging level", alias="LOG_LEVEL"
    )

    # Database
    database_url: str = Field(
        default="", description="PostgreSQL DSN", alias="DATABASE_URL", repr=False
    )
    db_pool_min: int = Field(default=2, ge=0, alias="DB_POOL_MIN")
    db_pool_max: int = Field(default=10, ge=1, alias="DB_POOL_MAX")

    # Token secrets
    jwt_secret: str = Field(default="", alias="JWT_SECRET", repr=False)
    jwt_refresh_secret: str = Field(
        default="", alias="JWT_REFRESH_SECRET", repr=False
    )

    # OpenRouter
    openrouter_api_key: str = Field(
        default="", alias="OPENROUTER_API_KEY", repr=False
    )
    openrouter_base_url: str = Field(
        default=DEFAULT_OPENROUTER_BASE_URL, alias="OPENROUTER_BASE_URL"
    )
    openrouter_model: str = Field(
        default=DEFAULT_OPENROUTER_MODEL, alias="OPENROUTER_MODEL"
    )
    site_url: str | None = Field(default=None, alias="SITE_URL")
    site_name: str | None = Field(default=None, alias="SITE_NAME")

    # Cloudflare R2
    r2_access_key_id: str = Field(default="", alias="R2_ACCESS_KEY_ID", repr=False)
    r2_secret_access_key: str = Field(
        default="", alias="R2_SECRET_ACCESS_KEY", repr=False
    )
    r2_bucket_name: str = Field(default="", alias="R2_BUCKET_NAME")
    r2_account_id: str = Field(default="", alias="R2_ACCOUNT_ID")

    # Startup gate
    probe_timeout: float = Field(
        default=10.0,
        description="Default per-probe timeout in seconds",
        gt=0,
        le=120,
        alias="STARTUP_PROBE_TIMEOUT",
    )
    external_services: list[ExternalServiceConfig] = Field(
        default_factory=list,
        description="Additional HTTP dependencies (JSON list)",
        alias="EXTERNAL_SERVICES",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("site_url")
    @classmethod
    def validate_site_url(cls, v: str | None) -> str | None:
        """Validate optional site URL sent as the OpenRouter referer."""
        if v:
            parsed = urlparse(v)
            if not parsed.scheme or not parsed.netloc:
                msg = f"Invalid SITE_URL: {v}"
                raise ValueError(msg)
        return v or None

    @model_validator(mode="after")
    def validate_consistency(self) -> StartgateConfig:
        """Cross-field checks."""
        if self.db_pool_min > self.db_pool_max:
            msg = (
                f"DB_POOL_MIN ({self.db_pool_min}) cannot exceed "
                f"DB_POOL_MAX ({self.db_pool_max})"
            )
            raise ValueError(msg)

        names = [service.name for service in self.external_services]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            msg = f"Duplicate external service names: {duplicates}"
            raise ValueError(msg)
        return self

    def get_startup_summary(self) -> dict[str, Any]:
        """Non-secret configuration summary for reports."""
        return {
            "environment": self.environment.value,
            "port": self.port,
            "log_level": self.log_level.value,
            "probe_timeout": self.probe_timeout,
            "database_configured": bool(self.database_url.strip()),
            "r2_bucket": self.r2_bucket_name or None,
            "external_services": [s.name for s in self.external_services],
        }

    @classmethod
    def validate_from_env(cls) -> tuple[StartgateConfig | None, list[str]]:
        """Validate configuration from environment variables.

        Returns:
            Tuple of (config, errors). Config is None if validation fails.
        """
        try:
            return cls(), []
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field_path = ".".join(str(loc) for loc in error["loc"])
                if field_path:
                    errors.append(f"{field_path}: {error['msg']}")
                else:
                    errors.append(error["msg"])
            return None, errors
        except (ValueError, TypeError) as e:
            # pydantic-settings raises SettingsError (a ValueError) for
            # environment values it cannot decode, e.g. malformed JSON.
            return None, [str(e)]


def load_config() -> StartgateConfig:
    """Load and validate configuration with clear error reporting."""
    config, errors = StartgateConfig.validate_from_env()

    if errors or config is None:
        logger.error("Configuration validation failed:")
        for error in errors:
            logger.error("  • %s", error)
        msg = "Configuration validation failed - see logs for details"
        raise ConfigurationError(msg, errors)

    logger.info("Configuration loaded successfully")
    return config
