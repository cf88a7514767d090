"""Database Module

Owns the single file-backed SQLite store shared by the lexicon, the lemma
ledger and the review schedule. All units of work funnel through one
``Store`` whose lock serializes transactions: at most one transaction is
open at a time, and every write commits atomically or rolls back entirely.
"""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from functools import lru_cache
from pathlib import Path
from typing import AsyncIterator, Awaitable, TypeVar

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from core.config import Settings, get_settings
from core.logging import db_logger

log = db_logger()

T = TypeVar("T")

Base = declarative_base()

_PRAGMAS = (
    "PRAGMA foreign_keys = ON",
    "PRAGMA journal_mode = WAL",
    "PRAGMA journal_size_limit = 6144000",
)


def _install_sqlite_hooks(engine: AsyncEngine) -> None:
    """Enable foreign keys and transactional DDL on every connection.

    The sqlite3 driver opens transactions lazily and never around DDL, so
    its own handling is switched off and BEGIN is emitted explicitly; a
    dictionary rebuild (drop, create, fill) then rolls back as one unit.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        for pragma in _PRAGMAS:
            cursor.execute(pragma)
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


class Store:
    """Owned handle to the backing store.

    Engines receive a Store and open units of work through it:

        async with store.transaction() as session:
            await session.execute(...)

    Writes started through ``run`` belong to the store rather than to the
    caller: abandoning the await does not interrupt them.
    """

    __slots__ = ("url", "engine", "_sessionmaker", "_lock", "_running")

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        database = make_url(url).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_async_engine(url, echo=echo)
        _install_sqlite_hooks(self.engine)
        self._sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self._lock = asyncio.Lock()
        self._running: set[asyncio.Task] = set()

    @classmethod
    def from_settings(cls, settings: Settings) -> Store:
        return cls(settings.DATABASE_URL, echo=settings.LOG_SQL)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Exclusive unit of work: commit on success, roll back on any exception."""
        async with self._lock:
            async with self._sessionmaker() as session:
                try:
                    async with session.begin():
                        yield session
                except BaseException:
                    log.debug("transaction_rolled_back", url=self.url)
                    raise

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Read unit of work, ordered with writes through the same lock."""
        async with self._lock:
            async with self._sessionmaker() as session:
                async with session.begin():
                    yield session

    async def run(self, work: Awaitable[T]) -> T:
        """Run a unit of work to completion even if the caller stops waiting.

        Cancelling the awaiting task cancels only the wait; the work goes on
        and commits, or rolls back if it fails.
        """
        task = asyncio.ensure_future(work)
        self._running.add(task)
        task.add_done_callback(self._finished)
        return await asyncio.shield(task)

    def _finished(self, task: asyncio.Task) -> None:
        self._running.discard(task)
        if not task.cancelled() and task.exception() is not None:
            log.warning("unit_of_work_failed", url=self.url, error=str(task.exception()))

    @property
    def pending(self) -> int:
        """Units of work started through ``run`` that have not finished."""
        return len(self._running)

    async def drain(self) -> None:
        """Wait for every unit of work started through ``run``."""
        while self._running:
            await asyncio.gather(*self._running, return_exceptions=True)

    async def init(self) -> None:
        """Create any table that does not exist yet."""
        import models  # noqa: F401  registers every table on Base.metadata

        async with self.transaction() as session:
            await session.run_sync(
                lambda sync_session: Base.metadata.create_all(sync_session.connection())
            )
        log.info("store_initialized", url=self.url)

    async def dispose(self) -> None:
        await self.drain()
        await self.engine.dispose()
        log.debug("store_disposed", url=self.url)


@lru_cache
def get_store() -> Store:
    """Process-wide store built from settings."""
    return Store.from_settings(get_settings())
