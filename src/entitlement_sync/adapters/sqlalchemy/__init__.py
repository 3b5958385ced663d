"""SQLAlchemy adapter package for the entitlement sync."""

from __future__ import annotations

from .mappings import (
    discord_entitlement_table,
    entitlement_table,
    mapper_registry,
    sku_table,
    start_mappers,
)
from .repositories import (
    SqlAlchemyEntitlementRepository,
    SqlAlchemyExternalLinkRepository,
    SqlAlchemySkuRepository,
)
from .unit_of_work import SqlAlchemySyncUnitOfWork, shutdown, startup

__all__ = [
    "SqlAlchemyEntitlementRepository",
    "SqlAlchemyExternalLinkRepository",
    "SqlAlchemySkuRepository",
    "SqlAlchemySyncUnitOfWork",
    "discord_entitlement_table",
    "entitlement_table",
    "mapper_registry",
    "shutdown",
    "sku_table",
    "start_mappers",
    "startup",
]
