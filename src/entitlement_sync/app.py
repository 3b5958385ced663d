"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
import contextlib
import signal
from collections.abc import Awaitable, Callable
from logging import getLogger
from typing import TYPE_CHECKING

from entitlement_sync.adapters.discord import DiscordEntitlementFetcher
from entitlement_sync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemySyncUnitOfWork,
    shutdown,
    startup,
)
from entitlement_sync.daemon import SyncDaemon
from entitlement_sync.domain.entitlement_sync import SyncResult, SyncSettings, sync_entitlements
from entitlement_sync.domain.ports.unit_of_work import SyncUnitOfWork

if TYPE_CHECKING:
    from entitlement_sync.config import AppConfig
    from entitlement_sync.domain.ports.fetching import EntitlementFetcher

UnitOfWorkFactory = Callable[[], SyncUnitOfWork]
SyncRunner = Callable[[], Awaitable[SyncResult]]


log = getLogger(__name__)


def sync_settings(config: AppConfig) -> SyncSettings:
    return SyncSettings(
        execution_timeout=config.sync.execution_timeout,
        max_removals=config.sync.max_removals_threshold,
    )


def build_sync_runner(
    config: AppConfig,
    *,
    fetcher: EntitlementFetcher | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SyncRunner:
    """Bind the configured adapters into a zero-argument reconciliation run."""

    effective_fetcher = fetcher or DiscordEntitlementFetcher(config=config.discord)
    effective_uow = unit_of_work_factory or SqlAlchemySyncUnitOfWork
    settings = sync_settings(config)

    async def run() -> SyncResult:
        result = await sync_entitlements(
            fetcher=effective_fetcher,
            unit_of_work_factory=effective_uow,
            settings=settings,
        )
        reconciled = result.reconciled
        log.info(
            "Finished entitlement sync: fetched=%s, created=%s, refreshed=%s, deleted=%s, "
            "skipped=%s, missing=%s, removed=%s, vetoed=%s",
            result.fetched,
            reconciled.applied.created,
            reconciled.applied.refreshed,
            reconciled.applied.deleted,
            reconciled.applied.skipped,
            reconciled.removal.candidates,
            reconciled.removal.removed,
            reconciled.vetoed,
        )
        return result

    return run


async def run_once_async(
    config: AppConfig,
    *,
    fetcher: EntitlementFetcher | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SyncResult:
    """Run exactly one reconciliation pass against the configured database."""

    log.info("Connecting to database...")
    await startup(database_uri=config.database_uri)
    log.info("Database connected.")
    try:
        runner = build_sync_runner(
            config, fetcher=fetcher, unit_of_work_factory=unit_of_work_factory
        )
        return await runner()
    finally:
        await shutdown()


async def run_daemon_async(
    config: AppConfig,
    *,
    fetcher: EntitlementFetcher | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> None:
    """Run the fixed-interval scheduler until SIGINT/SIGTERM."""

    log.info("Connecting to database...")
    await startup(database_uri=config.database_uri)
    log.info("Database connected.")
    daemon = SyncDaemon(
        build_sync_runner(config, fetcher=fetcher, unit_of_work_factory=unit_of_work_factory),
        frequency=config.sync.run_frequency,
    )

    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(signum, daemon.stop)

    try:
        await daemon.start()
    finally:
        await shutdown()


def run_once(config: AppConfig) -> SyncResult:
    return asyncio.run(run_once_async(config))


def run_daemon(config: AppConfig) -> None:
    asyncio.run(run_daemon_async(config))
