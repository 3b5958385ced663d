"""Reconciliation core: SKU resolution, the two passes, and the removal guard."""

from __future__ import annotations

from .engine import (
    ApplyOutcome,
    EntitlementReconciler,
    ReconcileResult,
    RemovalOutcome,
)
from .policy import RemovalDecision, RemovalGuard, RemovalVeto
from .resolve import SkuResolver

__all__ = [
    "ApplyOutcome",
    "EntitlementReconciler",
    "ReconcileResult",
    "RemovalDecision",
    "RemovalGuard",
    "RemovalOutcome",
    "RemovalVeto",
    "SkuResolver",
]
