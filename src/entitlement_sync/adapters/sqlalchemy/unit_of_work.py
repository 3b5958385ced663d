"""SQLAlchemy-backed unit of work for reconciliation runs."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final, Literal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from entitlement_sync.adapters.sqlalchemy.mappings import start_mappers
from entitlement_sync.adapters.sqlalchemy.migrations import upgrade_head
from entitlement_sync.adapters.sqlalchemy.repositories import (
    SqlAlchemyEntitlementRepository,
    SqlAlchemyExternalLinkRepository,
    SqlAlchemySkuRepository,
    store_operation,
)
from entitlement_sync.config.storage import get_database_uri
from entitlement_sync.domain.ports.unit_of_work import SyncRepositories

if TYPE_CHECKING:
    from collections.abc import Awaitable
    from types import TracebackType

    from sqlalchemy.ext.asyncio import AsyncEngine

log = getLogger(__name__)

ROLLBACK_TIMEOUT_SECONDS: Final[float] = 15.0


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: AsyncEngine | None = None
    _session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine | None:
        return self._engine

    @engine.setter
    def engine(self, value: AsyncEngine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call entitlement_sync.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


async def startup(
    *,
    engine: AsyncEngine | None = None,
    database_uri: str | None = None,
    force: bool = False,
    migrate: bool = True,
) -> AsyncEngine:
    """Initialise the async engine, mappers and schema, then the session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_async_engine(database_uri or get_database_uri())
    start_mappers()
    if migrate:
        await upgrade_head(engine=resolved_engine)

    _STATE.engine = resolved_engine
    return resolved_engine


def configured_engine() -> AsyncEngine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


async def shutdown() -> None:
    """Dispose the managed engine and reset state."""

    if _STATE.engine is not None:
        await _STATE.engine.dispose()
    _STATE.engine = None


class SqlAlchemySyncUnitOfWork:
    """One session, one transaction: committed explicitly, rolled back otherwise.

    Rollback and close get their own timeout, independent of the run's
    deadline, so a hung transaction cannot block shutdown.
    """

    def __init__(self, *, rollback_timeout: float = ROLLBACK_TIMEOUT_SECONDS) -> None:
        self.session_factory: async_sessionmaker[AsyncSession] = _STATE.session_factory
        self.rollback_timeout = rollback_timeout
        self._session: AsyncSession | None = None
        self._repositories: SyncRepositories | None = None

    def _build_repositories(self, session: AsyncSession) -> SyncRepositories:
        return SyncRepositories(
            skus=SqlAlchemySkuRepository(session),
            entitlements=SqlAlchemyEntitlementRepository(session),
            links=SqlAlchemyExternalLinkRepository(session),
        )

    async def __aenter__(self) -> SqlAlchemySyncUnitOfWork:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                await self.rollback()
        finally:
            await self._bounded(session.close(), "close")
            self.session = None
            self._repositories = None
        return False

    @store_operation
    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self._bounded(self.session.rollback(), "rollback")

    async def _bounded(self, operation: Awaitable[None], name: str) -> None:
        try:
            async with asyncio.timeout(self.rollback_timeout):
                await operation
        except TimeoutError:
            log.error("Session %s did not finish within %ss", name, self.rollback_timeout)
        except SQLAlchemyError:
            log.exception("Session %s failed", name)

    @property
    def repositories(self) -> SyncRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: AsyncSession | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


if TYPE_CHECKING:
    from entitlement_sync.domain.ports.unit_of_work import SyncUnitOfWork

    _uow_check: SyncUnitOfWork = SqlAlchemySyncUnitOfWork()
