"""Ports for fetching the external entitlement listing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from entitlement_sync.domain.model import ExternalEntitlement


@runtime_checkable
class EntitlementFetcher(Protocol):
    """Source of the complete, currently active external entitlement set.

    Implementations either return every page or raise ``FetchError``; a partial
    listing must never be returned.
    """

    async def fetch_all(self) -> Sequence[ExternalEntitlement]: ...


__all__ = ["EntitlementFetcher"]
