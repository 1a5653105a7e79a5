"""Request-scoped dependencies: db session, OAuth client and the session gate."""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core import settings
from db.session import get_session
from services.auth import SESSION_COOKIE, GoogleOAuthClient, Principal, resolve_principal
from services.errors import AuthenticationRequired


async def get_db() -> AsyncIterator[AsyncSession]:
    async for session in get_session():
        yield session


async def get_oauth_client() -> AsyncIterator[GoogleOAuthClient]:
    async with httpx.AsyncClient(timeout=settings.oauth_timeout_seconds) as http_client:
        yield GoogleOAuthClient.from_settings(http_client)


async def get_optional_principal(
    request: Request,
    session: AsyncSession = Depends(get_db),
) -> Principal | None:
    return await resolve_principal(session, request.cookies.get(SESSION_COOKIE))


async def get_current_principal(
    principal: Principal | None = Depends(get_optional_principal),
) -> Principal:
    """Admit the request only when its session cookie maps to a live session."""
    if principal is None:
        raise AuthenticationRequired()
    return principal
