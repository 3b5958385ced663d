"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntitlementSource(StrEnum):
    """Origin of a persisted entitlement. Only ``DISCORD`` rows are reconciled."""

    DISCORD = "discord"
    PATREON = "patreon"
    VOTING = "voting"
