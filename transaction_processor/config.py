"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "text")


class ProcessorConfig(BaseSettings):
    """Transaction processor configuration"""

    model_config = SettingsConfigDict(
        env_prefix="TXPROC_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stderr

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
        return value


# Global configuration instance
config = ProcessorConfig()


def get_config() -> ProcessorConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> ProcessorConfig:
    """Reload configuration from environment"""
    global config
    config = ProcessorConfig()
    return config
