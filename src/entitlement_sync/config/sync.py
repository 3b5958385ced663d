"""Scheduling and safety defaults for the entitlement sync."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .env import env_bool, env_duration, env_int
from .errors import ConfigurationError

DEFAULT_RUN_FREQUENCY = timedelta(minutes=1)
DEFAULT_EXECUTION_TIMEOUT = timedelta(minutes=5)
DEFAULT_MAX_REMOVALS_THRESHOLD = 100


@dataclass(frozen=True, slots=True)
class SyncConfig:
    daemon: bool = True
    run_frequency: timedelta = DEFAULT_RUN_FREQUENCY
    execution_timeout: timedelta = DEFAULT_EXECUTION_TIMEOUT
    max_removals_threshold: int = DEFAULT_MAX_REMOVALS_THRESHOLD

    def __post_init__(self) -> None:
        if self.run_frequency <= timedelta():
            raise ConfigurationError("RUN_FREQUENCY must be positive")
        if self.execution_timeout <= timedelta():
            raise ConfigurationError("EXECUTION_TIMEOUT must be positive")
        if self.max_removals_threshold < 0:
            raise ConfigurationError("MAX_REMOVALS_THRESHOLD must not be negative")


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        daemon=env_bool("DAEMON", default=True),
        run_frequency=env_duration("RUN_FREQUENCY", default=DEFAULT_RUN_FREQUENCY),
        execution_timeout=env_duration("EXECUTION_TIMEOUT", default=DEFAULT_EXECUTION_TIMEOUT),
        max_removals_threshold=env_int(
            "MAX_REMOVALS_THRESHOLD", default=DEFAULT_MAX_REMOVALS_THRESHOLD
        ),
    )
