"""Public interface for the Discord adapter."""

from __future__ import annotations

from .client import PAGE_LIMIT, DiscordAPIError, DiscordEntitlementFetcher, build_resilience
from .schema import EntitlementPayload, EntitlementPayloadInput
from .translator import parse_entitlement

__all__ = [
    "PAGE_LIMIT",
    "DiscordAPIError",
    "DiscordEntitlementFetcher",
    "EntitlementPayload",
    "EntitlementPayloadInput",
    "build_resilience",
    "parse_entitlement",
]
