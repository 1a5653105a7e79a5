"""Google OAuth 2.0 authorization-code client."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core import settings
from services.errors import UpstreamAuthError

logger = logging.getLogger(__name__)


class GoogleProfile(BaseModel):
    """Subset of the userinfo payload the app stores."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    name: str | None = None
    email: str | None = None
    picture: str | None = None


class GoogleOAuthClient:
    """Builds the consent URL and performs the two back-channel calls."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        auth_url: str,
        token_url: str,
        userinfo_url: str,
        scope: str,
    ) -> None:
        self._http = http_client
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.auth_url = auth_url
        self.token_url = token_url
        self.userinfo_url = userinfo_url
        self.scope = scope

    @classmethod
    def from_settings(cls, http_client: httpx.AsyncClient) -> "GoogleOAuthClient":
        return cls(
            http_client,
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            redirect_uri=settings.google_redirect_uri,
            auth_url=settings.google_auth_url,
            token_url=settings.google_token_url,
            userinfo_url=settings.google_userinfo_url,
            scope=settings.oauth_scope,
        )

    def authorization_url(self, state: str) -> str:
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": self.scope,
                "state": state,
            }
        )
        return f"{self.auth_url}?{query}"

    def _json(self, response: httpx.Response, *, step: str) -> dict[str, Any]:
        try:
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPStatusError, ValueError) as exc:
            logger.warning(
                "Identity provider rejected request",
                extra={"step": step, "status_code": response.status_code},
            )
            raise UpstreamAuthError() from exc
        if not isinstance(payload, dict):
            raise UpstreamAuthError()
        return payload

    async def exchange_code(self, code: str) -> str:
        """Trade an authorization code for an access token."""
        try:
            response = await self._http.post(
                self.token_url,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "code": code,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                },
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            logger.warning("Token exchange request failed", exc_info=exc)
            raise UpstreamAuthError() from exc

        payload = self._json(response, step="token")
        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise UpstreamAuthError("Identity provider returned no access token")
        return access_token

    async def fetch_profile(self, access_token: str) -> GoogleProfile:
        try:
            response = await self._http.get(
                self.userinfo_url,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as exc:
            logger.warning("Profile request failed", exc_info=exc)
            raise UpstreamAuthError() from exc

        payload = self._json(response, step="userinfo")
        try:
            return GoogleProfile.model_validate(payload)
        except ValidationError as exc:
            raise UpstreamAuthError("Identity provider returned an invalid profile") from exc
