"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class FinCoreConfig(BaseSettings):
    """FinCore ledger configuration"""

    model_config = SettingsConfigDict(
        env_prefix="FINCORE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage configuration
    storage_backend: str = "memory"  # memory or sqlite
    database_path: str = "fincore.db"
    seed_demo_data: bool = True

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    # Business rules configuration
    allow_overdraft: bool = True
    minimum_balance: Decimal = Decimal("0.00")  # only enforced when overdraft is off
    reject_negative_amounts: bool = False

    # Session configuration
    invalidate_session_on_logout: bool = False


# Global configuration instance
config = FinCoreConfig()


def get_config() -> FinCoreConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> FinCoreConfig:
    """Reload configuration from environment"""
    global config
    config = FinCoreConfig()
    return config
