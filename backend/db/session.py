"""Async engine and session factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core import settings

# Largest value SQLite and Postgres accept for an INTEGER/BIGINT bind.
MAX_SQL_INTEGER = 2**63 - 1


def _is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores FOREIGN KEY clauses unless enabled per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection: Any, _record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str) -> AsyncEngine:
    if _is_sqlite(database_url):
        engine = create_async_engine(
            database_url,
            connect_args={"check_same_thread": False},
        )
        enable_sqlite_foreign_keys(engine)
        return engine
    return create_async_engine(database_url, pool_pre_ping=True)


async_engine = build_engine(settings.database_url)
AsyncSessionMaker = async_sessionmaker(async_engine, expire_on_commit=False)


async def get_session() -> AsyncIterator[AsyncSession]:
    """Yield a session bound to the application engine."""
    async with AsyncSessionMaker() as session:
        yield session
