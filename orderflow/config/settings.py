"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "orderflow.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class CommerceSettings(BaseSettings):
    """Commercial constants shared by pricing, negotiation and ledger."""

    model_config = SettingsConfigDict(env_prefix="COMMERCE_")

    agent_commission_rate: Decimal = Decimal("0.02")
    intermediary_share_rate: Decimal = Decimal("0.03")

    # Transitions retried once on a lost conditional update
    transition_retries: int = 1


class InvoiceSettings(BaseSettings):
    """Invoice composition configuration."""

    model_config = SettingsConfigDict(env_prefix="INVOICE_")

    gst_rate: Decimal = Decimal("0.05")
    # Fixed trade reduction on intermediary tax invoices (not order.discount_percent)
    intermediary_discount_rate: Decimal = Decimal("0.03")
    settlement_days: int = 60

    seller_name: str = "SALONI SALES"
    seller_gstin: str = "07AJIPH1947G1Z9"
    jurisdiction: str = "Delhi"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Orderflow Wholesale Engine"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    commerce: CommerceSettings = Field(default_factory=CommerceSettings)
    invoice: InvoiceSettings = Field(default_factory=InvoiceSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


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
