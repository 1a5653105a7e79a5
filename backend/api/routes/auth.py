"""Google sign-in and logout endpoints."""

from __future__ import annotations

import logging
import secrets

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, get_oauth_client
from services.auth import (
    OAUTH_STATE_COOKIE,
    SESSION_COOKIE,
    GoogleOAuthClient,
    clear_oauth_state_cookie,
    clear_session_cookie,
    close_login_session,
    open_login_session,
    resolve_google_identity,
    set_oauth_state_cookie,
    set_session_cookie,
)
from services.errors import PersistenceError, UpstreamAuthError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

LANDING_PATH = "/"
DASHBOARD_PATH = "/dashboard"
OAUTH_STATE_BYTES = 24


def _state_matches(expected: str | None, received: str | None) -> bool:
    if not expected or not received:
        return False
    return secrets.compare_digest(expected, received)


@router.get("/auth/google")
async def google_login(
    oauth_client: GoogleOAuthClient = Depends(get_oauth_client),
) -> RedirectResponse:
    state = secrets.token_urlsafe(OAUTH_STATE_BYTES)
    response = RedirectResponse(
        oauth_client.authorization_url(state),
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    )
    set_oauth_state_cookie(response, state)
    return response


@router.get("/auth/google/callback")
async def google_callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    session: AsyncSession = Depends(get_db),
    oauth_client: GoogleOAuthClient = Depends(get_oauth_client),
) -> RedirectResponse:
    try:
        if error:
            raise UpstreamAuthError(f"Identity provider returned error: {error}")
        if not _state_matches(request.cookies.get(OAUTH_STATE_COOKIE), state):
            raise UpstreamAuthError("OAuth state mismatch")

        user = await resolve_google_identity(session, oauth_client, code)
        previous_token = request.cookies.get(SESSION_COOKIE)
        if previous_token:
            await close_login_session(session, previous_token)
        token = await open_login_session(session, user.id)
    except (UpstreamAuthError, PersistenceError) as exc:
        logger.warning("Google sign-in failed", extra={"reason": exc.detail})
        failure = RedirectResponse(LANDING_PATH, status_code=status.HTTP_303_SEE_OTHER)
        clear_oauth_state_cookie(failure)
        return failure

    response = RedirectResponse(DASHBOARD_PATH, status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, token)
    clear_oauth_state_cookie(response)
    return response


@router.get("/logout")
async def logout(
    request: Request,
    session: AsyncSession = Depends(get_db),
) -> RedirectResponse:
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        try:
            await close_login_session(session, token)
        except PersistenceError as exc:
            logger.warning("Logout failed", exc_info=exc)
            return RedirectResponse(DASHBOARD_PATH, status_code=status.HTTP_303_SEE_OTHER)

    response = RedirectResponse(LANDING_PATH, status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookie(response)
    return response
