"""Repository implementations backed by SQLAlchemy async sessions."""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from entitlement_sync.adapters.sqlalchemy.mappings import (
    discord_entitlement_table,
    entitlement_table,
    sku_table,
)
from entitlement_sync.domain.errors import StoreError
from entitlement_sync.domain.model import (
    Entitlement,
    EntitlementSource,
    ExternalEntitlementLink,
    Sku,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from datetime import datetime
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession


def store_operation[**P, T](func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
    """Translate SQLAlchemy failures into ``StoreError`` at the repository boundary."""

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError as exc:
            raise StoreError(f"{func.__qualname__} failed: {exc}") from exc

    return wrapper


class SqlAlchemySkuRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @store_operation
    async def get_by_external_id(self, external_id: int) -> Sku | None:
        stmt = select(Sku).where(sku_table.c.external_id == external_id).limit(1)
        return (await self.session.execute(stmt)).scalar_one_or_none()


class SqlAlchemyEntitlementRepository:
    """Entitlement persistence restricted to externally sourced rows on delete."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @store_operation
    async def create(
        self,
        *,
        guild_id: int | None,
        user_id: int | None,
        sku_id: UUID,
        source: EntitlementSource,
        expires_at: datetime | None,
    ) -> Entitlement:
        stmt = (
            select(Entitlement)
            .where(entitlement_table.c.guild_id.is_not_distinct_from(guild_id))
            .where(entitlement_table.c.user_id.is_not_distinct_from(user_id))
            .where(entitlement_table.c.sku_id == sku_id)
            .where(entitlement_table.c.source == source)
            .limit(1)
        )
        existing = (await self.session.execute(stmt)).scalar_one_or_none()
        if existing is not None:
            existing.expires_at = expires_at
            await self.session.flush()
            return existing

        entitlement = Entitlement(
            guild_id=guild_id,
            user_id=user_id,
            sku_id=sku_id,
            source=source,
            expires_at=expires_at,
        )
        self.session.add(entitlement)
        await self.session.flush()
        return entitlement

    @store_operation
    async def delete_by_id(self, entitlement_id: UUID) -> None:
        await self.session.execute(
            delete(ExternalEntitlementLink).where(
                discord_entitlement_table.c.entitlement_id == entitlement_id
            )
        )
        await self.session.execute(
            delete(Entitlement)
            .where(entitlement_table.c.id == entitlement_id)
            .where(entitlement_table.c.source == EntitlementSource.DISCORD)
        )


class SqlAlchemyExternalLinkRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @store_operation
    async def add(self, *, external_id: int, entitlement_id: UUID) -> bool:
        if await self.session.get(ExternalEntitlementLink, external_id) is not None:
            return False
        self.session.add(
            ExternalEntitlementLink(external_id=external_id, entitlement_id=entitlement_id)
        )
        await self.session.flush()
        return True

    @store_operation
    async def get_entitlement_id(self, external_id: int) -> UUID | None:
        stmt = select(discord_entitlement_table.c.entitlement_id).where(
            discord_entitlement_table.c.external_id == external_id
        )
        return (await self.session.execute(stmt)).scalar_one_or_none()

    @store_operation
    async def list_all(self) -> dict[int, UUID]:
        stmt = select(
            discord_entitlement_table.c.external_id,
            discord_entitlement_table.c.entitlement_id,
        )
        rows = (await self.session.execute(stmt)).all()
        return {int(external_id): entitlement_id for external_id, entitlement_id in rows}


if TYPE_CHECKING:
    from entitlement_sync.domain.ports.persistence import (
        EntitlementRepository,
        ExternalLinkRepository,
        SkuRepository,
    )

    _session_stub = cast("AsyncSession", object())
    _sku_repo: SkuRepository = SqlAlchemySkuRepository(_session_stub)
    _entitlement_repo: EntitlementRepository = SqlAlchemyEntitlementRepository(_session_stub)
    _link_repo: ExternalLinkRepository = SqlAlchemyExternalLinkRepository(_session_stub)
