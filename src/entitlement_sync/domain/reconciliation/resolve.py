"""Run-scoped SKU resolution.

Responsibilities of this stage:
- map an external SKU id onto the local ``Sku`` row
- remember hits and misses for the rest of the run so every SKU id is looked
  up at most once

A miss is not an error: entitlements of an unknown SKU are simply deferred
until a later run finds the SKU.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from entitlement_sync.domain.model import Sku
    from entitlement_sync.domain.ports.persistence import SkuRepository

log = getLogger(__name__)


class SkuResolver:
    """Resolve external SKU ids, caching both hits and misses.

    Build one per run; the caches must not outlive the transaction they were
    filled in.
    """

    def __init__(self, skus: SkuRepository) -> None:
        self._skus = skus
        self._resolved: dict[int, Sku] = {}
        self._unknown: set[int] = set()

    async def resolve(self, external_sku_id: int) -> Sku | None:
        """Return the SKU for ``external_sku_id`` or ``None`` when it is unknown."""

        if external_sku_id in self._unknown:
            return None
        cached = self._resolved.get(external_sku_id)
        if cached is not None:
            return cached

        sku = await self._skus.get_by_external_id(external_sku_id)
        if sku is None:
            self._unknown.add(external_sku_id)
            log.debug("SKU %s not found, skipping its entitlements for this run", external_sku_id)
            return None

        self._resolved[external_sku_id] = sku
        return sku

    @property
    def unknown_skus(self) -> frozenset[int]:
        return frozenset(self._unknown)

    @property
    def resolved_skus(self) -> dict[int, Sku]:
        return dict(self._resolved)
