from __future__ import annotations

import json
import logging
import sys

import pytest

from entitlement_sync.common import logging as logging_module
from entitlement_sync.common.logging import JsonFormatter, configure_logging


def _record(message: str, *args: object, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        "entitlement_sync.test", logging.WARNING, __file__, 10, message, args, None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_renders_one_object_per_line() -> None:
    line = JsonFormatter().format(_record("Deleted %s entitlements", 3, run="abc", ids={1}))

    payload = json.loads(line)
    assert payload["level"] == "warning"
    assert payload["logger"] == "entitlement_sync.test"
    assert payload["msg"] == "Deleted 3 entitlements"
    assert payload["run"] == "abc"
    assert payload["ids"] == "{1}"
    assert "\n" not in line


def test_json_formatter_includes_exception() -> None:
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record("failed")
        record.exc_info = sys.exc_info()

    payload = json.loads(JsonFormatter().format(record))

    assert "ValueError: boom" in payload["error"]


def test_configure_logging_selects_formatter() -> None:
    root = logging.getLogger()
    previous = list(root.handlers), root.level
    try:
        configure_logging(level=logging.DEBUG, json_logs=True, force=True)

        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
    finally:
        root.handlers[:] = previous[0]
        root.setLevel(previous[1])


def test_configure_logging_initialises_sentry(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}
    monkeypatch.setattr(logging_module.sentry_sdk, "init", lambda **kwargs: captured.update(kwargs))
    root = logging.getLogger()
    previous = list(root.handlers), root.level
    try:
        configure_logging(sentry_dsn="https://key@sentry.example/1", force=True)
    finally:
        root.handlers[:] = previous[0]
        root.setLevel(previous[1])

    assert captured["dsn"] == "https://key@sentry.example/1"
    assert captured["send_default_pii"] is False
