"""
Runtime settings read from the environment.

Defaults come from ``constants``; environment variables override them when set.
"""

import os
from dataclasses import dataclass
from typing import Optional

from ..exceptions import ConfigError
from .constants import (
    API_KEY_ENV_VAR,
    API_URL,
    DATABASE_URL_ENV_VAR,
    DEFAULT_DATABASE_URL,
    LOG_LEVEL,
    LOG_LEVEL_ENV_VAR,
    REFRESH_GAP_SECONDS,
    SCHEDULER_INTERVAL_SECONDS,
)


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    api_url: str = API_URL
    database_url: str = DEFAULT_DATABASE_URL
    refresh_gap_seconds: float = REFRESH_GAP_SECONDS
    scheduler_interval_seconds: float = SCHEDULER_INTERVAL_SECONDS
    log_level: str = LOG_LEVEL

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        return cls(
            api_key=os.getenv(API_KEY_ENV_VAR) or None,
            api_url=os.getenv("COVID_API_URL", API_URL),
            database_url=os.getenv(DATABASE_URL_ENV_VAR, DEFAULT_DATABASE_URL),
            refresh_gap_seconds=_float_env("COVID_REFRESH_GAP_SECONDS", REFRESH_GAP_SECONDS),
            scheduler_interval_seconds=_float_env(
                "COVID_REFRESH_INTERVAL_SECONDS", SCHEDULER_INTERVAL_SECONDS
            ),
            log_level=os.getenv(LOG_LEVEL_ENV_VAR, LOG_LEVEL),
        )


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigError(f"Environment variable {name} must be a number, got {value!r}") from e
