"""Shared logging helpers for the entitlement sync."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Final

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

_TEXT_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# LogRecord attributes that are not user supplied ``extra`` fields.
_RESERVED_ATTRS: Final[frozenset[str]] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
    | {"message", "asctime", "taskName"}
)


class JsonFormatter(logging.Formatter):
    """Render records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
            "caller": f"{record.module}:{record.lineno}",
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value if _is_json_safe(value) else repr(value)
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _is_json_safe(value: object) -> bool:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return False
    return True


def configure_logging(
    *,
    level: int = logging.INFO,
    json_logs: bool = False,
    sentry_dsn: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the root logger once with sensible defaults.

    Text output mirrors ``logging.basicConfig`` with a terse format. ``json_logs``
    switches to one JSON object per line for log shippers. When ``sentry_dsn`` is
    given, Sentry is initialised so ERROR records are reported as events and
    lower levels are kept as breadcrumbs. Pass ``force=True`` to reconfigure
    during tests or specialised entry points.
    """

    handler = logging.StreamHandler()
    if json_logs:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%H:%M:%S"))

    logging.basicConfig(level=level, handlers=[handler], force=force)

    if sentry_dsn:
        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)],
            send_default_pii=False,
        )
        logging.getLogger(__name__).info("Sentry error reporting enabled")
