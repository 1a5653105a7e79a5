"""Database helpers."""

from .errors import is_foreign_key_violation, is_unique_violation
from .session import (
    MAX_SQL_INTEGER,
    AsyncSessionMaker,
    async_engine,
    build_engine,
    get_session,
)

__all__ = [
    "MAX_SQL_INTEGER",
    "AsyncSessionMaker",
    "async_engine",
    "build_engine",
    "get_session",
    "is_foreign_key_violation",
    "is_unique_violation",
]
