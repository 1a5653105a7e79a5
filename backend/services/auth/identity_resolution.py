"""Resolve a Google sign-in to a local user (create on first login, refresh afterwards)."""

from __future__ import annotations

import logging
from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from db.errors import is_unique_violation
from models import User
from services.errors import PersistenceError, UpstreamAuthError
from .oauth_client import GoogleOAuthClient, GoogleProfile

logger = logging.getLogger(__name__)

FALLBACK_DISPLAY_NAME = "Google user"


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def display_name_for(profile: GoogleProfile) -> str:
    for candidate in (profile.name, profile.email):
        if candidate and candidate.strip():
            return candidate.strip()
    return FALLBACK_DISPLAY_NAME


async def find_user_by_google_id(session: AsyncSession, google_id: str) -> User | None:
    result = await session.execute(
        select(User).where(_eq(User.google_id, google_id)).limit(1)
    )
    return result.scalar_one_or_none()


async def _apply_profile(session: AsyncSession, user: User, profile: GoogleProfile) -> User:
    # Every login overwrites name, picture and email with what Google reports.
    user.display_name = display_name_for(profile)
    user.profile_picture_url = profile.picture
    user.email = profile.email
    session.add(user)
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise PersistenceError("Failed to update user") from exc
    await session.refresh(user)
    return user


async def upsert_google_user(session: AsyncSession, profile: GoogleProfile) -> User:
    existing = await find_user_by_google_id(session, profile.id)
    if existing is not None:
        return await _apply_profile(session, existing, profile)

    user = User(
        google_id=profile.id,
        display_name=display_name_for(profile),
        email=profile.email,
        profile_picture_url=profile.picture,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if not is_unique_violation(exc):
            raise PersistenceError("Failed to create user") from exc
        # A concurrent first login created the row; refresh that one instead.
        winner = await find_user_by_google_id(session, profile.id)
        if winner is None:
            raise PersistenceError("Failed to create user") from exc
        return await _apply_profile(session, winner, profile)
    except SQLAlchemyError as exc:
        await session.rollback()
        raise PersistenceError("Failed to create user") from exc
    await session.refresh(user)
    logger.info("Created user from Google profile", extra={"user_id": user.id})
    return user


async def resolve_google_identity(
    session: AsyncSession,
    oauth_client: GoogleOAuthClient,
    code: str | None,
) -> User:
    """Exchange ``code`` with Google and return the matching local user."""
    if code is None or not code.strip():
        raise UpstreamAuthError("Missing authorization code")

    access_token = await oauth_client.exchange_code(code.strip())
    profile = await oauth_client.fetch_profile(access_token)
    return await upsert_google_user(session, profile)
