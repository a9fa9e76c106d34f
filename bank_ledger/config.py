"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings


class LedgerConfig(BaseSettings):
    """Bank ledger configuration"""

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    install_log_handler: bool = True  # create_service configures the "bank_ledger" logger

    # Money configuration
    currency: str = "INR"  # ISO 4217 code, see currency.Currency

    # Business rules configuration
    opening_bonus: str = "10000.00"  # Credited to every newly registered account
    password_min_length: int = 6
    account_number_prefix: str = "ACC"

    # Bootstrap configuration
    seed_demo_data: bool = True

    class Config:
        env_prefix = "BANK_LEDGER_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = LedgerConfig()


def get_config() -> LedgerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> LedgerConfig:
    """Reload configuration from environment"""
    global config
    config = LedgerConfig()
    return config
