"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import EntitlementFetcher
from .persistence import EntitlementRepository, ExternalLinkRepository, SkuRepository
from .unit_of_work import SyncRepositories, SyncUnitOfWork

__all__ = [
    "EntitlementFetcher",
    "EntitlementRepository",
    "ExternalLinkRepository",
    "SkuRepository",
    "SyncRepositories",
    "SyncUnitOfWork",
]
