"""
Application Settings - Pydantic Settings for configuration management.

Supports environment variables and .env file loading.
"""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import BeforeValidator, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def normalize_to_uppercase(v: str) -> str:
    """Normalize string to uppercase."""
    if isinstance(v, str):
        return v.upper()
    return v


class StoreSettings(BaseSettings):
    """Manager store settings (connection secrets live in the credential file)."""

    model_config = SettingsConfigDict(env_prefix="STORE_")

    label: str = Field(default="Manager", description="Node label holding manager records")
    max_connection_pool_size: int = Field(default=5, description="Connection pool size")
    query_timeout_ms: int = Field(default=30000, description="Query timeout in milliseconds")


class RepairSettings(BaseSettings):
    """Cycle repair behaviour."""

    model_config = SettingsConfigDict(env_prefix="REPAIR_")

    dry_run: bool = Field(default=False, description="Plan repairs without writing")


class ObservabilitySettings(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="OBSERVABILITY_")

    log_format: Literal["json", "console"] = Field(
        default="console", description="Log format (json for pipelines, console for terminals)"
    )


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR"],
        BeforeValidator(normalize_to_uppercase),
    ] = Field(default="WARNING", description="Logging level")

    # Path to the store credential file
    credentials_path: str | None = Field(
        default=None,
        validation_alias="ORG_HIERARCHY_CREDENTIALS",
        description="Path to the JSON store credential file",
    )

    # Sub-settings
    store: StoreSettings = Field(default_factory=StoreSettings)
    repair: RepairSettings = Field(default_factory=RepairSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
