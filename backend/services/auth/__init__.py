"""Authentication domain services."""

from .cookies import (
    OAUTH_STATE_COOKIE,
    SESSION_COOKIE,
    clear_oauth_state_cookie,
    clear_session_cookie,
    set_oauth_state_cookie,
    set_session_cookie,
)
from .identity_resolution import (
    display_name_for,
    resolve_google_identity,
    upsert_google_user,
)
from .oauth_client import GoogleOAuthClient, GoogleProfile
from .session_store import (
    Principal,
    close_login_session,
    open_login_session,
    resolve_principal,
)

__all__ = [
    "OAUTH_STATE_COOKIE",
    "SESSION_COOKIE",
    "clear_oauth_state_cookie",
    "clear_session_cookie",
    "set_oauth_state_cookie",
    "set_session_cookie",
    "display_name_for",
    "resolve_google_identity",
    "upsert_google_user",
    "GoogleOAuthClient",
    "GoogleProfile",
    "Principal",
    "close_login_session",
    "open_login_session",
    "resolve_principal",
]
