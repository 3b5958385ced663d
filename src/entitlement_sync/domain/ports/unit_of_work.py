"""Unit-of-work abstraction around one reconciliation transaction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from entitlement_sync.domain.ports.persistence import (
        EntitlementRepository,
        ExternalLinkRepository,
        SkuRepository,
    )


@dataclass(slots=True, frozen=True)
class SyncRepositories:
    """Repositories a reconciliation run works with."""

    skus: SkuRepository
    entitlements: EntitlementRepository
    links: ExternalLinkRepository


@runtime_checkable
class SyncUnitOfWork(Protocol):
    """Async transaction boundary: rolls back on every exit path but ``commit``."""

    @property
    def repositories(self) -> SyncRepositories: ...

    async def __aenter__(self) -> SyncUnitOfWork: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
