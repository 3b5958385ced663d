"""Reusable in-memory fakes and factories for entitlement sync tests."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Literal

from entitlement_sync.domain.errors import FetchError, StoreError
from entitlement_sync.domain.model import (
    Entitlement,
    EntitlementSource,
    ExternalEntitlement,
    Sku,
)
from entitlement_sync.domain.ports.unit_of_work import SyncRepositories

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType
    from uuid import UUID

    from entitlement_sync.domain.ports.fetching import EntitlementFetcher
    from entitlement_sync.domain.ports.persistence import (
        EntitlementRepository,
        ExternalLinkRepository,
        SkuRepository,
    )
    from entitlement_sync.domain.ports.unit_of_work import SyncUnitOfWork

PREMIUM_SKU_ID = 1100
UNKNOWN_SKU_ID = 9900


def make_external(
    external_id: int,
    *,
    sku_id: int = PREMIUM_SKU_ID,
    guild_id: int | None = None,
    user_id: int | None = None,
    ends_at: datetime | None = None,
    deleted: bool = False,
) -> ExternalEntitlement:
    """Build an external entitlement; defaults to a guild grant keyed on the id."""

    if guild_id is None and user_id is None:
        guild_id = 500_000 + external_id
    return ExternalEntitlement(
        id=external_id,
        sku_id=sku_id,
        guild_id=guild_id,
        user_id=user_id,
        ends_at=ends_at or datetime(2030, 1, 1, tzinfo=UTC) + timedelta(days=external_id % 7),
        deleted=deleted,
    )


class InMemoryStore:
    """Committed state shared across fake units of work."""

    def __init__(self, skus: Sequence[Sku] = ()) -> None:
        self.skus: dict[UUID, Sku] = {sku.id: sku for sku in skus}
        self.entitlements: dict[UUID, Entitlement] = {}
        self.links: dict[int, UUID] = {}

    def copy(self) -> InMemoryStore:
        clone = InMemoryStore(tuple(self.skus.values()))
        clone.entitlements = {
            key: Entitlement(
                id=value.id,
                guild_id=value.guild_id,
                user_id=value.user_id,
                sku_id=value.sku_id,
                source=value.source,
                expires_at=value.expires_at,
            )
            for key, value in self.entitlements.items()
        }
        clone.links = dict(self.links)
        return clone

    def add_linked(self, external: ExternalEntitlement, sku: Sku) -> Entitlement:
        entitlement = Entitlement(
            guild_id=external.guild_id,
            user_id=external.user_id,
            sku_id=sku.id,
            source=EntitlementSource.DISCORD,
            expires_at=external.ends_at,
        )
        self.entitlements[entitlement.id] = entitlement
        self.links[external.id] = entitlement.id
        return entitlement


class FakeSkuRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self.lookups: list[int] = []

    async def get_by_external_id(self, external_id: int) -> Sku | None:
        self.lookups.append(external_id)
        for sku in self._store.skus.values():
            if sku.external_id == external_id:
                return sku
        return None


class FakeEntitlementRepository:
    def __init__(self, store: InMemoryStore, *, fail_on_create: int | None = None) -> None:
        self._store = store
        self._fail_on_create = fail_on_create
        self.create_calls = 0
        self.deleted: list[UUID] = []

    async def create(
        self,
        *,
        guild_id: int | None,
        user_id: int | None,
        sku_id: UUID,
        source: EntitlementSource,
        expires_at: datetime | None,
    ) -> Entitlement:
        self.create_calls += 1
        if self._fail_on_create == self.create_calls:
            raise StoreError(f"create #{self.create_calls} failed")

        for existing in self._store.entitlements.values():
            if (existing.guild_id, existing.user_id, existing.sku_id, existing.source) == (
                guild_id,
                user_id,
                sku_id,
                source,
            ):
                existing.expires_at = expires_at
                return existing

        entitlement = Entitlement(
            guild_id=guild_id,
            user_id=user_id,
            sku_id=sku_id,
            source=source,
            expires_at=expires_at,
        )
        self._store.entitlements[entitlement.id] = entitlement
        return entitlement

    async def delete_by_id(self, entitlement_id: UUID) -> None:
        self.deleted.append(entitlement_id)
        for external_id in [k for k, v in self._store.links.items() if v == entitlement_id]:
            del self._store.links[external_id]
        entitlement = self._store.entitlements.get(entitlement_id)
        if entitlement is not None and entitlement.source is EntitlementSource.DISCORD:
            del self._store.entitlements[entitlement_id]


class FakeExternalLinkRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def add(self, *, external_id: int, entitlement_id: UUID) -> bool:
        if external_id in self._store.links:
            return False
        self._store.links[external_id] = entitlement_id
        return True

    async def get_entitlement_id(self, external_id: int) -> UUID | None:
        return self._store.links.get(external_id)

    async def list_all(self) -> dict[int, UUID]:
        return dict(self._store.links)


def build_repositories(
    store: InMemoryStore, *, fail_on_create: int | None = None
) -> SyncRepositories:
    return SyncRepositories(
        skus=FakeSkuRepository(store),
        entitlements=FakeEntitlementRepository(store, fail_on_create=fail_on_create),
        links=FakeExternalLinkRepository(store),
    )


class FakeSyncUnitOfWork:
    """Works on a scratch copy of the store; ``commit`` publishes it."""

    def __init__(self, store: InMemoryStore, *, fail_on_create: int | None = None) -> None:
        self._store = store
        self._fail_on_create = fail_on_create
        self._working: InMemoryStore | None = None
        self._repositories: SyncRepositories | None = None
        self.committed = False
        self.rolled_back = False

    @property
    def repositories(self) -> SyncRepositories:
        assert self._repositories is not None
        return self._repositories

    async def __aenter__(self) -> FakeSyncUnitOfWork:
        self._working = self._store.copy()
        self._repositories = build_repositories(
            self._working, fail_on_create=self._fail_on_create
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            await self.rollback()
        self._working = None
        return False

    async def commit(self) -> None:
        assert self._working is not None
        self._store.entitlements = self._working.entitlements
        self._store.links = self._working.links
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True


class FakeEntitlementFetcher:
    """Returns a canned listing, optionally failing or stalling first."""

    def __init__(
        self,
        entitlements: Sequence[ExternalEntitlement] = (),
        *,
        error: FetchError | None = None,
        delay: float = 0.0,
    ) -> None:
        self.entitlements = list(entitlements)
        self._error = error
        self._delay = delay
        self.calls = 0

    async def fetch_all(self) -> list[ExternalEntitlement]:
        self.calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return list(self.entitlements)


if TYPE_CHECKING:
    _store = InMemoryStore()
    _sku_check: SkuRepository = FakeSkuRepository(_store)
    _entitlement_check: EntitlementRepository = FakeEntitlementRepository(_store)
    _link_check: ExternalLinkRepository = FakeExternalLinkRepository(_store)
    _uow_check: SyncUnitOfWork = FakeSyncUnitOfWork(_store)
    _fetcher_check: EntitlementFetcher = FakeEntitlementFetcher()
