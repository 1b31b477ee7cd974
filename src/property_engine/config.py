"""Centralized configuration for property-engine using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``PROPERTY_ENGINE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PROPERTY_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    service_name: str = Field(default="property-engine", description="Service name reported in traces")

    # Logging
    log_level: str = Field(default="info", description="Root logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    # Worker
    worker_backend: Literal["thread", "process"] = Field(
        default="thread",
        description="Execution context for PropertyWorker: a background thread or a separate process",
    )

    # Search
    fuzzy_search_default: bool = Field(
        default=True, description="Apply the fuzzy-match bonus when a search request does not say otherwise"
    )

    # Observability
    metrics_enabled: bool = Field(default=True, description="Record Prometheus metrics for dispatched requests")
    tracing_enabled: bool = Field(default=True, description="Wrap dispatched requests in OpenTelemetry spans")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {value!r}")
        return normalized.lower()

    def is_process_backend(self) -> bool:
        """Check whether workers should run in a separate process."""
        return self.worker_backend == "process"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
