"""Entitlements as reported by the external source."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class ExternalEntitlement:
    """One entry of the external active-entitlement listing."""

    id: int
    sku_id: int
    guild_id: int | None = None
    user_id: int | None = None
    ends_at: datetime | None = None
    deleted: bool = False
