"""Application configuration."""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "transit-norm"
    DEBUG: bool = False

    # Adapter Registry Settings
    ADAPTER_CACHE_SIZE: int = Field(default=32, ge=1)  # Max cached adapters before LRU eviction
    NETWORK_CATALOG_PATH: str | None = None  # Optional JSON catalog merged over the built-in networks

    # Batch Normalization Settings
    DROP_FILTERED_LINES: bool = True  # Drop lines whose product is UNKNOWN from batch results

    # OpenTelemetry Settings
    OTEL_ENABLED: bool = False
    OTEL_SERVICE_NAME: str = "transit-norm"
    OTEL_ENVIRONMENT: str = "production"
    OTEL_EXPORTER_OTLP_TRACES_ENDPOINT: str | None = None
    OTEL_EXPORTER_OTLP_HEADERS: str | None = Field(default=None, validation_alias="SECRET_OTEL_HEADERS")

    # Logging Settings
    LOG_LEVEL: str = "INFO"

    @field_validator("LOG_LEVEL", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        normalized = v.upper()
        valid_levels = logging.getLevelNamesMapping()
        if normalized not in valid_levels:
            msg = f"Invalid LOG_LEVEL '{v}'. Must be one of: {', '.join(sorted(valid_levels.keys()))}"
            raise ValueError(msg)
        return normalized

    @field_validator("NETWORK_CATALOG_PATH", mode="after")
    @classmethod
    def blank_catalog_path_is_none(cls, v: str | None) -> str | None:
        """Treat an empty catalog path as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()


settings = Settings()


def require_config(*field_names: str) -> None:
    """
    Validate that required configuration fields are set.

    Args:
        *field_names: Names of required configuration fields

    Raises:
        ValueError: If any required field is missing or None

    Example:
        from transit_norm.core.config import require_config
        require_config("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT")
    """
    missing = []
    for field in field_names:
        value = getattr(settings, field, None)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)

    if missing:
        msg = f"Required configuration missing: {', '.join(missing)}"
        raise ValueError(msg)
