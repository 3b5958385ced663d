"""Reconcile the external entitlement listing against the persisted store.

Two passes per run, in order:
1) per-entitlement apply: delete flagged entitlements that are linked, create
   every other entitlement whose SKU resolves
2) absence diff: links whose external id is missing from the listing are
   handed to the removal guard and deleted unless vetoed

Entitlements of an unknown SKU are skipped by pass 1 but still count as
present for pass 2.

Out of scope for this module:
- fetching the listing
- commit/rollback (owned by the unit of work)
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from entitlement_sync.domain.model import EntitlementSource, ExternalEntitlementLink

if TYPE_CHECKING:
    from collections.abc import Sequence

    from entitlement_sync.domain.model import ExternalEntitlement, Sku
    from entitlement_sync.domain.ports.unit_of_work import SyncRepositories

    from .policy import RemovalGuard, RemovalVeto
    from .resolve import SkuResolver

log = getLogger(__name__)


@dataclass(slots=True)
class ApplyOutcome:
    """Counters of the per-entitlement pass."""

    created: int = 0
    refreshed: int = 0
    deleted: int = 0
    skipped: int = 0


@dataclass(slots=True)
class RemovalOutcome:
    """Result of the absence-diff pass."""

    candidates: int = 0
    removed: int = 0
    veto: RemovalVeto | None = None


@dataclass(slots=True)
class ReconcileResult:
    applied: ApplyOutcome
    removal: RemovalOutcome

    @property
    def created(self) -> int:
        return self.applied.created

    @property
    def deleted(self) -> int:
        return self.applied.deleted + self.removal.removed

    @property
    def vetoed(self) -> bool:
        return self.removal.veto is not None


class EntitlementReconciler:
    """Apply creates and deletes for one run using run-scoped collaborators."""

    def __init__(
        self,
        repositories: SyncRepositories,
        resolver: SkuResolver,
        guard: RemovalGuard,
    ) -> None:
        self._repositories = repositories
        self._resolver = resolver
        self._guard = guard

    async def reconcile(self, entitlements: Sequence[ExternalEntitlement]) -> ReconcileResult:
        applied = await self.apply(entitlements)
        candidates = await self.find_missing(entitlements)
        removal = await self.remove_missing(candidates)
        return ReconcileResult(applied=applied, removal=removal)

    async def apply(self, entitlements: Sequence[ExternalEntitlement]) -> ApplyOutcome:
        """Pass 1: create or delete each entitlement whose SKU is known."""

        outcome = ApplyOutcome()
        for entitlement in entitlements:
            sku = await self._resolver.resolve(entitlement.sku_id)
            if sku is None:
                outcome.skipped += 1
                continue

            if entitlement.deleted:
                if await self._delete_flagged(entitlement):
                    outcome.deleted += 1
                continue

            # No pre-existence check: the store keys creation on the natural key
            # and link creation on the external id.
            if await self._create(entitlement, sku):
                outcome.created += 1
            else:
                outcome.refreshed += 1

        log.debug(
            "Applied entitlements: created=%s, refreshed=%s, deleted=%s, skipped=%s",
            outcome.created,
            outcome.refreshed,
            outcome.deleted,
            outcome.skipped,
        )
        return outcome

    async def find_missing(
        self, entitlements: Sequence[ExternalEntitlement]
    ) -> list[ExternalEntitlementLink]:
        """Pass 2: linked external ids that are absent from the listing."""

        active_ids = {entitlement.id for entitlement in entitlements}
        linked = await self._repositories.links.list_all()
        return [
            ExternalEntitlementLink(external_id=external_id, entitlement_id=entitlement_id)
            for external_id, entitlement_id in sorted(linked.items())
            if external_id not in active_ids
        ]

    async def remove_missing(
        self, candidates: Sequence[ExternalEntitlementLink]
    ) -> RemovalOutcome:
        decision = self._guard.evaluate(candidates)
        outcome = RemovalOutcome(candidates=len(candidates), veto=decision.veto)
        for link in decision.approved:
            log.info(
                "Deleting missing entitlement %s (external id %s)",
                link.entitlement_id,
                link.external_id,
            )
            await self._repositories.entitlements.delete_by_id(link.entitlement_id)
            outcome.removed += 1
        return outcome

    async def _delete_flagged(self, entitlement: ExternalEntitlement) -> bool:
        entitlement_id = await self._repositories.links.get_entitlement_id(entitlement.id)
        if entitlement_id is None:
            return False
        log.info(
            "Found deleted entitlement %s (external id %s)", entitlement_id, entitlement.id
        )
        await self._repositories.entitlements.delete_by_id(entitlement_id)
        return True

    async def _create(self, entitlement: ExternalEntitlement, sku: Sku) -> bool:
        created = await self._repositories.entitlements.create(
            guild_id=entitlement.guild_id,
            user_id=entitlement.user_id,
            sku_id=sku.id,
            source=EntitlementSource.DISCORD,
            expires_at=entitlement.ends_at,
        )
        linked = await self._repositories.links.add(
            external_id=entitlement.id,
            entitlement_id=created.id,
        )
        if linked:
            log.debug("Created entitlement %s (external id %s)", created.id, entitlement.id)
        return linked
