"""
Application configuration management.
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``TREEPATCH_*`` environment variables."""

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Tree loading
    java_config_path: Optional[Path] = None  # Falls back to the plugin's bundled config.yaml

    # Command line
    check_result: bool = False

    model_config = SettingsConfigDict(
        env_prefix="TREEPATCH_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
