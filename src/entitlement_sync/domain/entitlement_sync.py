"""Application service running one reconciliation pass."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from entitlement_sync.domain.errors import DeadlineExceeded
from entitlement_sync.domain.reconciliation import (
    EntitlementReconciler,
    RemovalGuard,
    SkuResolver,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from entitlement_sync.domain.ports.fetching import EntitlementFetcher
    from entitlement_sync.domain.ports.unit_of_work import SyncUnitOfWork
    from entitlement_sync.domain.reconciliation import ReconcileResult

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SyncSettings:
    execution_timeout: timedelta
    max_removals: int


@dataclass(slots=True)
class SyncResult:
    """Outcome of a committed reconciliation run."""

    fetched: int
    reconciled: ReconcileResult
    duration: timedelta
    slow: bool = False


async def sync_entitlements(
    *,
    fetcher: EntitlementFetcher,
    unit_of_work_factory: Callable[[], SyncUnitOfWork],
    settings: SyncSettings,
) -> SyncResult:
    """Fetch the active entitlements and reconcile them in one transaction.

    The whole run, HTTP and database work alike, shares one cancellation scope
    bounded by ``settings.execution_timeout``. Any failure rolls the unit of
    work back and propagates (``FetchError``, ``StoreError`` or
    ``DeadlineExceeded``); nothing is committed unless both passes finished.
    """

    timeout_seconds = settings.execution_timeout.total_seconds()
    guard = RemovalGuard(settings.max_removals)
    started = time.monotonic()
    log.debug("Running synchronisation")

    scope = asyncio.timeout(timeout_seconds)
    try:
        async with scope, unit_of_work_factory() as uow:
            entitlements = await fetcher.fetch_all()
            log.debug("Fetched entitlements: count=%s", len(entitlements))

            reconciler = EntitlementReconciler(
                uow.repositories,
                SkuResolver(uow.repositories.skus),
                guard,
            )
            reconciled = await reconciler.reconcile(entitlements)
            await uow.commit()
    except TimeoutError as exc:
        if not scope.expired():
            raise
        raise DeadlineExceeded(
            f"Synchronisation exceeded its execution timeout of {timeout_seconds:g}s",
            timeout_seconds=timeout_seconds,
        ) from exc
    finally:
        duration = timedelta(seconds=time.monotonic() - started)
        slow = duration > settings.execution_timeout / 2
        if slow:
            log.warning("Execution took more than 50%% of the timeout: duration=%s", duration)

    return SyncResult(
        fetched=len(entitlements),
        reconciled=reconciled,
        duration=duration,
        slow=slow,
    )
