"""Persisted entitlement aggregates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import EntitlementSource


def new_id() -> UUID:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class Sku:
    """A purchasable product. Read-only for the sync."""

    id: UUID = field(default_factory=new_id)
    label: str
    external_id: int | None = None


@dataclass(eq=False, kw_only=True)
class Entitlement:
    """A grant of a SKU to a guild and/or user."""

    id: UUID = field(default_factory=new_id)
    guild_id: int | None = None
    user_id: int | None = None
    sku_id: UUID
    source: EntitlementSource
    expires_at: datetime | None = None


@dataclass(eq=False, kw_only=True)
class ExternalEntitlementLink:
    """Maps an external entitlement id onto the persisted entitlement it created."""

    external_id: int
    entitlement_id: UUID
