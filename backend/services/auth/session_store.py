"""Login-session persistence: opened on login, resolved per request, revoked on logout."""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from core import settings
from models import LoginSession, User
from services.errors import PersistenceError

MAX_ACTIVE_LOGIN_SESSIONS = 10
SESSION_TOKEN_BYTES = 32


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


@dataclass(frozen=True)
class Principal:
    """Authenticated identity handed explicitly to every use-case call."""

    user_id: str
    display_name: str
    email: str | None = None
    profile_picture_url: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(
            user_id=user.id,
            display_name=user.display_name,
            email=user.email,
            profile_picture_url=user.profile_picture_url,
        )


def hash_session_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def ensure_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def session_ttl() -> timedelta:
    return timedelta(minutes=settings.session_expire_minutes)


async def enforce_login_session_limit(
    session: AsyncSession,
    user_id: str,
    *,
    max_active_sessions: int = MAX_ACTIVE_LOGIN_SESSIONS,
) -> None:
    revoked_column = cast(Any, LoginSession.revoked_at)
    issued_at_column = cast(Any, LoginSession.issued_at)
    id_column = cast(Any, LoginSession.id)

    result = await session.execute(
        select(LoginSession)
        .where(
            _eq(LoginSession.user_id, user_id),
            cast(ColumnElement[bool], revoked_column.is_(None)),
        )
        .order_by(issued_at_column.desc(), id_column.desc())
    )
    records = result.scalars().all()
    surplus = records[max_active_sessions:]
    for record in surplus:
        await session.delete(record)
    if surplus:
        await session.flush()


async def open_login_session(
    session: AsyncSession,
    user_id: str,
    *,
    max_active_sessions: int = MAX_ACTIVE_LOGIN_SESSIONS,
) -> str:
    """Persist a new session for ``user_id`` and return the raw cookie token."""
    token = secrets.token_urlsafe(SESSION_TOKEN_BYTES)
    issued_at = datetime.now(timezone.utc)
    record = LoginSession(
        user_id=user_id,
        token_hash=hash_session_token(token),
        issued_at=issued_at,
        expires_at=issued_at + session_ttl(),
    )
    session.add(record)
    try:
        await session.flush()
        await enforce_login_session_limit(
            session,
            user_id,
            max_active_sessions=max_active_sessions,
        )
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise PersistenceError("Failed to open login session") from exc
    return token


async def get_live_session(session: AsyncSession, token: str) -> LoginSession | None:
    """Return the session record unless it is unknown, revoked or expired."""
    result = await session.execute(
        select(LoginSession).where(_eq(LoginSession.token_hash, hash_session_token(token)))
    )
    record = result.scalar_one_or_none()
    if record is None or record.revoked_at is not None:
        return None
    if ensure_aware(record.expires_at) <= datetime.now(timezone.utc):
        return None
    return record


async def resolve_principal(session: AsyncSession, token: str | None) -> Principal | None:
    if not token:
        return None
    record = await get_live_session(session, token)
    if record is None:
        return None
    user = await session.get(User, record.user_id)
    if user is None:
        return None
    return Principal.from_user(user)


async def close_login_session(session: AsyncSession, token: str) -> None:
    """Revoke the session behind ``token``; unknown or revoked tokens are ignored."""
    result = await session.execute(
        select(LoginSession).where(_eq(LoginSession.token_hash, hash_session_token(token)))
    )
    record = result.scalar_one_or_none()
    if record is None or record.revoked_at is not None:
        return
    record.revoked_at = datetime.now(timezone.utc)
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise PersistenceError("Failed to close login session") from exc
