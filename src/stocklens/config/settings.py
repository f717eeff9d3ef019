"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CollectorSettings(BaseSettings):
    """Paginated collection configuration."""

    model_config = SettingsConfigDict(env_prefix="COLLECTOR_")

    page_size: int = 200
    # Upper bound for sources that never report their last page
    max_pages: int = 10_000

    @field_validator("page_size", "max_pages")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v


class GraphQLSettings(BaseSettings):
    """GraphQL backend configuration."""

    model_config = SettingsConfigDict(env_prefix="GRAPHQL_")

    endpoint: str = "http://localhost:8000/graphql"
    timeout: float = 30.0
    api_token: str | None = None


class AnalyticsSettings(BaseSettings):
    """Financial analytics configuration."""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    low_stock_threshold: int = 10
    walk_in_customer_label: str = "Walk-in Customer"
    unknown_supplier_label: str = "Unknown Supplier"
    unknown_salesperson_label: str = "N/A"
    default_warehouse_label: str = "Default"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "stocklens"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    collector: CollectorSettings = Field(default_factory=CollectorSettings)
    graphql: GraphQLSettings = Field(default_factory=GraphQLSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
