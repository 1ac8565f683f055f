"""
LoanRisk Settings - Runtime configuration management.

Settings are read from environment variables (prefix ``LOANRISK_``) and
from a ``.env`` file if one is present.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Engine and logging settings.

    Environment variables:
        LOANRISK_CONFIG_PATH: Fuzzy system YAML to load instead of the packaged one
        LOANRISK_LOG_DIR: Directory for rotating log files (disabled when unset)
        LOANRISK_LOG_LEVEL: Console log level. Default: WARNING
        LOANRISK_DEBUG: Enable debug logging. Default: false
    """

    config_path: Optional[Path] = Field(
        default=None,
        description="Fuzzy system configuration file overriding the packaged default",
    )
    log_dir: Optional[Path] = Field(
        default=None, description="Directory for rotating log files"
    )
    log_level: str = Field(default="WARNING", description="Console log level")
    debug: bool = Field(default=False, description="Enable debug logging")

    model_config = SettingsConfigDict(
        env_prefix="LOANRISK_", env_file=".env", extra="ignore"
    )


@lru_cache
def get_engine_settings() -> EngineSettings:
    """Get engine settings with caching."""
    return EngineSettings()
