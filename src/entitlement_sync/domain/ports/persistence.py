"""Ports for the persisted entitlement store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from entitlement_sync.domain.model import Entitlement, EntitlementSource, Sku


@runtime_checkable
class SkuRepository(Protocol):
    """Read-only lookup of SKUs by their external id."""

    async def get_by_external_id(self, external_id: int) -> Sku | None: ...


@runtime_checkable
class EntitlementRepository(Protocol):
    """Persistence contract for entitlements."""

    async def create(
        self,
        *,
        guild_id: int | None,
        user_id: int | None,
        sku_id: UUID,
        source: EntitlementSource,
        expires_at: datetime | None,
    ) -> Entitlement:
        """Persist an entitlement, returning the stored row for this natural key."""
        ...

    async def delete_by_id(self, entitlement_id: UUID) -> None:
        """Delete an externally sourced entitlement together with its links."""
        ...


@runtime_checkable
class ExternalLinkRepository(Protocol):
    """Persistence contract for external-id links."""

    async def add(self, *, external_id: int, entitlement_id: UUID) -> bool:
        """Link an external id, returning ``False`` when it was already linked."""
        ...

    async def get_entitlement_id(self, external_id: int) -> UUID | None: ...

    async def list_all(self) -> dict[int, UUID]: ...
