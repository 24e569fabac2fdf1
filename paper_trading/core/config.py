"""
Application settings.

Settings are read from environment variables prefixed with PAPER_TRADING_.
"""

import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from paper_trading.core.constants import PAPER_STORAGE_KEY
from paper_trading.core.exceptions.paper_trading import ConfigurationError

ENV_PREFIX = "PAPER_TRADING_"
_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseModel):
    """Storage and logging settings."""

    storage_path: Path | None = Field(
        default=None, description="JSON file holding the portfolio; in-memory when unset"
    )
    storage_key: str = Field(default=PAPER_STORAGE_KEY, min_length=1)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that the log level is known to loguru."""
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level {v}. Expected one of: {', '.join(sorted(_LOG_LEVELS))}")
        return level

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """Build settings from PAPER_TRADING_* environment variables.

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for field_name in cls.model_fields:
            raw = env.get(f"{ENV_PREFIX}{field_name.upper()}")
            if raw:
                values[field_name] = raw
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {ENV_PREFIX}* settings: {e}") from e
