"""Fixed-interval scheduler for reconciliation runs."""

from __future__ import annotations

import asyncio
import time
from logging import getLogger
from typing import TYPE_CHECKING

from entitlement_sync.domain.errors import SyncError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from datetime import timedelta

    from entitlement_sync.domain.entitlement_sync import SyncResult

log = getLogger(__name__)


class SyncDaemon:
    """Run ``run`` every ``frequency``, never more than one run at a time.

    The interval is re-armed only after a run has finished, and a failed run is
    logged and retried on the next tick instead of stopping the loop.
    """

    def __init__(
        self,
        run: Callable[[], Awaitable[SyncResult]],
        *,
        frequency: timedelta,
    ) -> None:
        self._run = run
        self._frequency = frequency
        self._stopping = asyncio.Event()
        self.runs = 0
        self.failures = 0

    async def start(self) -> None:
        log.info("Starting daemon: frequency=%s", self._frequency)
        while not self._stopping.is_set():
            try:
                async with asyncio.timeout(self._frequency.total_seconds()):
                    await self._stopping.wait()
            except TimeoutError:
                await self.tick()
        log.info("Shutting down daemon")

    def stop(self) -> None:
        self._stopping.set()

    async def tick(self) -> SyncResult | None:
        """Execute one run, containing any failure."""

        started = time.monotonic()
        self.runs += 1
        try:
            return await self._run()
        except SyncError as exc:
            self.failures += 1
            log.error("Failed to run: %s", exc)  # noqa: TRY400
        except Exception:
            self.failures += 1
            log.exception("Unexpected failure during run")
        finally:
            log.info("Run completed: duration=%.3fs", time.monotonic() - started)
        return None
