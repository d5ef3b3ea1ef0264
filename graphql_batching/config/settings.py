"""Centralized configuration management for the GraphQL batching gateway.

This module provides a single source of truth for the gateway configuration:
schema identifier, batch ceiling, debug verbosity, CORS policy, server binding
and logging/metrics switches. Values come from ``GRAPHQL_BATCH_*`` environment
variables or a ``.env`` file.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Centralized settings for the GraphQL batching gateway."""

    # === Schema Configuration ===
    schema_key: str = Field(default="default", description="Identifier of the schema served by the gateway")
    schema_sdl_path: str | None = Field(
        default=None, description="SDL file registered under schema_key at startup"
    )
    autobuild: bool = Field(default=True, description="Build the schema on demand when it is missing")

    # === Batch Configuration ===
    batch_max: int = Field(default=10, gt=0, description="Maximum number of operations per request")
    debug: bool = Field(default=False, description="Include code/file/line/trace in operation errors")

    # === Persisted Queries ===
    persisted_queries_path: str | None = Field(
        default=None, description="JSON file mapping persisted query ids to query text"
    )

    # === CORS Configuration ===
    cors_enabled: bool = Field(default=True, description="Emit CORS headers and answer preflight requests")
    cors_allowed_origins: list[str] = Field(default_factory=lambda: ["*"])
    cors_allowed_headers: list[str] = Field(
        default_factory=lambda: ["Authorization", "Content-Type", "Content-Language"]
    )
    cors_allowed_methods: list[str] = Field(default_factory=lambda: ["GET", "POST", "OPTIONS"])
    cors_allow_credentials: bool = Field(default=False)
    cors_max_age: int = Field(default=86400, ge=0)

    # === HTTP Server Configuration ===
    graphql_path: str = Field(default="/graphql", description="Route serving GraphQL requests")
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # === Logging Configuration ===
    log_level: str = Field(default="INFO", description="Logging level")
    structured_logging: bool = Field(default=False, description="Emit JSON log lines on the console")

    # === Metrics Configuration ===
    enable_metrics: bool = Field(default=True, description="Enable metrics collection")

    model_config = SettingsConfigDict(
        env_prefix="GRAPHQL_BATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("graphql_path")
    @classmethod
    def normalize_graphql_path(cls, value: str) -> str:
        value = "/" + value.strip("/")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def schema_sdl_file(self) -> Path | None:
        return Path(self.schema_sdl_path).resolve() if self.schema_sdl_path else None

    @property
    def persisted_queries_file(self) -> Path | None:
        return Path(self.persisted_queries_path).resolve() if self.persisted_queries_path else None


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        load_dotenv()
        _settings = Settings()
    return _settings


def reset_settings():
    """Reset the global settings instance (primarily for testing)."""
    global _settings
    _settings = None
