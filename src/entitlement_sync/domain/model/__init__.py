"""Domain model for the entitlement sync."""

from __future__ import annotations

from .entitlements import Entitlement, ExternalEntitlementLink, Sku, new_id
from .enums import EntitlementSource
from .external import ExternalEntitlement

__all__ = [
    "Entitlement",
    "EntitlementSource",
    "ExternalEntitlement",
    "ExternalEntitlementLink",
    "Sku",
    "new_id",
]
