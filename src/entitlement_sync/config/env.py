"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
import re
from datetime import timedelta
from typing import TYPE_CHECKING, Final

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS: Final[dict[str, str]] = {
    "h": "hours",
    "m": "minutes",
    "s": "seconds",
    "ms": "milliseconds",
}


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""

    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = os.getenv(name)
        if value is None or not value.strip():
            missing.append(name)
            continue
        values[name] = value

    if missing:
        missing_list = ", ".join(sorted(missing))
        raise MissingConfigurationError(f"Missing configuration for: {missing_list}")

    return values


def require_env_var(name: str) -> str:
    """Return a required environment variable by name."""

    return require_env_vars([name])[name]


def optional_env_var(name: str) -> str | None:
    """Return a stripped environment variable, treating blank values as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean value: {value!r}")


def parse_duration(value: str) -> timedelta:
    """Parse a Go-style duration such as ``90s``, ``5m`` or ``1h30m``."""

    normalized = value.strip().lower()
    if not normalized:
        raise ConfigurationError("Duration must not be empty")

    position = 0
    total = timedelta()
    for match in _DURATION_PART.finditer(normalized):
        if match.start() != position:
            break
        amount, unit = match.groups()
        total += timedelta(**{_DURATION_UNITS[unit]: float(amount)})
        position = match.end()

    if position != len(normalized):
        raise ConfigurationError(f"Invalid duration value: {value!r}")
    return total


def env_bool(name: str, *, default: bool) -> bool:
    value = optional_env_var(name)
    if value is None:
        return default
    try:
        return parse_bool(value)
    except ConfigurationError as exc:
        raise ConfigurationError(f"{name}: {exc}") from exc


def env_int(name: str, *, default: int) -> int:
    value = optional_env_var(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name}: invalid integer {value!r}") from exc


def env_duration(name: str, *, default: timedelta) -> timedelta:
    value = optional_env_var(name)
    if value is None:
        return default
    try:
        return parse_duration(value)
    except ConfigurationError as exc:
        raise ConfigurationError(f"{name}: {exc}") from exc
