"""Translate Discord entitlement payloads into domain entities."""

from __future__ import annotations

from datetime import UTC

from entitlement_sync.domain.model import ExternalEntitlement

from .schema import EntitlementPayload, EntitlementPayloadInput


def parse_entitlement(payload: EntitlementPayloadInput) -> ExternalEntitlement:
    model = (
        payload
        if isinstance(payload, EntitlementPayload)
        else EntitlementPayload.model_validate(payload)
    )
    ends_at = model.ends_at
    if ends_at is not None and ends_at.tzinfo is None:
        ends_at = ends_at.replace(tzinfo=UTC)
    return ExternalEntitlement(
        id=model.id,
        sku_id=model.sku_id,
        guild_id=model.guild_id,
        user_id=model.user_id,
        ends_at=ends_at,
        deleted=model.deleted,
    )
