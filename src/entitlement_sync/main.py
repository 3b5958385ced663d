#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from entitlement_sync.app import run_daemon, run_once
from entitlement_sync.common.logging import configure_logging
from entitlement_sync.config import ConfigurationError, get_app_config

if TYPE_CHECKING:
    from collections.abc import Sequence

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Synchronise Discord entitlements into the database"
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--once",
        dest="daemon",
        action="store_false",
        default=None,
        help="Run a single synchronisation and exit (overrides DAEMON)",
    )
    mode.add_argument(
        "--daemon",
        dest="daemon",
        action="store_true",
        default=None,
        help="Synchronise every RUN_FREQUENCY until interrupted (overrides DAEMON)",
    )
    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        config = get_app_config()
    except ConfigurationError as exc:
        configure_logging()
        log.error("Invalid configuration: %s", exc)  # noqa: TRY400
        sys.exit(2)

    configure_logging(
        level=config.logging.level,
        json_logs=config.logging.json_logs,
        sentry_dsn=config.logging.sentry_dsn,
    )

    daemon = config.sync.daemon if parsed_args.daemon is None else parsed_args.daemon
    if daemon:
        run_daemon(config)
        return

    try:
        run_once(config)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)


if __name__ == "__main__":
    main()
