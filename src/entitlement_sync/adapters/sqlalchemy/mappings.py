"""SQLAlchemy mapping metadata for the entitlement domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    String,
    Table,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from entitlement_sync.domain.model import (
    Entitlement,
    EntitlementSource,
    ExternalEntitlementLink,
    Sku,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

sku_table = Table(
    "sku",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("label", String, nullable=False),
    Column("external_id", BigInteger, nullable=True, unique=True),
)

entitlement_table = Table(
    "entitlement",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("guild_id", BigInteger, nullable=True),
    Column("user_id", BigInteger, nullable=True),
    Column("sku_id", UUIDColumnType, ForeignKey("sku.id"), nullable=False),
    Column(
        "source",
        Enum(
            EntitlementSource,
            native_enum=False,
            length=16,
            validate_strings=True,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
    ),
    Column("expires_at", UTCDateTime(), nullable=True),
    Index("ix_entitlement_natural_key", "guild_id", "user_id", "sku_id", "source"),
)

discord_entitlement_table = Table(
    "discord_entitlement",
    mapper_registry.metadata,
    Column("discord_id", BigInteger, primary_key=True, key="external_id", autoincrement=False),
    Column(
        "entitlement_id",
        UUIDColumnType,
        ForeignKey("entitlement.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Index("ix_discord_entitlement_entitlement_id", "entitlement_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Sku, sku_table)
    mapper_registry.map_imperatively(Entitlement, entitlement_table)
    mapper_registry.map_imperatively(ExternalEntitlementLink, discord_entitlement_table)

    configure_mappers()
    return mapper_registry
