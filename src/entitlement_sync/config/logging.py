"""Logging and error-reporting configuration values."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final

from .env import env_bool, optional_env_var
from .errors import ConfigurationError

_LEVELS: Final[dict[str, int]] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level: int = logging.INFO
    json_logs: bool = False
    sentry_dsn: str | None = None


def parse_log_level(value: str) -> int:
    level = _LEVELS.get(value.strip().lower())
    if level is None:
        raise ConfigurationError(f"Invalid LOG_LEVEL: {value!r}")
    return level


def get_logging_config() -> LoggingConfig:
    level = optional_env_var("LOG_LEVEL")
    return LoggingConfig(
        level=parse_log_level(level) if level else logging.INFO,
        json_logs=env_bool("JSON_LOGS", default=False),
        sentry_dsn=optional_env_var("SENTRY_DSN"),
    )
