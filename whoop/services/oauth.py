"""
WHOOP OAuth Client
==================
Authorization-code flow helper for the WHOOP OAuth 2.0 endpoints.

Responsibilities:
- build_authorization_url(): the URL to send the member to for consent
- exchange_code_for_token(): trade the returned code for an access + refresh token
- refresh_token(): trade a refresh token for a fresh token pair

Tokens are returned to the caller and never stored here; deciding when to
refresh is the caller's job.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote, urlencode

import httpx

from whoop.config import Settings, get_settings
from whoop.models.oauth import OAuthTokenResponse
from whoop.services.http import BASE_URL, parse_response, require_text

logger = logging.getLogger(__name__)

AUTHORIZATION_URL = f"{BASE_URL}/oauth/oauth2/auth"
TOKEN_URL = f"{BASE_URL}/oauth/oauth2/token"


class WhoopOAuthClient:
    """Builds consent URLs and calls the WHOOP token endpoint."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        http_client: httpx.AsyncClient | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        self._client_id = require_text(client_id, "client_id")
        self._client_secret = require_text(client_secret, "client_secret")

        # An injected client belongs to the caller and is never closed here
        if http_client is not None:
            self._http = http_client
            self._owns_http_client = False
        else:
            settings = settings or get_settings()
            self._http = httpx.AsyncClient(timeout=settings.whoop_timeout_seconds)
            self._owns_http_client = True
        self._closed = False

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> "WhoopOAuthClient":
        """Build a client from the WHOOP_CLIENT_ID / WHOOP_CLIENT_SECRET settings."""
        settings = settings or get_settings()
        return cls(
            settings.whoop_client_id,
            settings.whoop_client_secret,
            http_client,
            settings=settings,
        )

    # ---- Authorization ---------------------------------------------------

    def build_authorization_url(
        self, redirect_uri: str, scope: str, state: Optional[str] = None
    ) -> str:
        """
        Return the consent URL for the authorization-code grant.

        ``scope`` is space-separated, e.g. "read:profile read:recovery".
        ``state`` is only appended when it is non-blank.
        """
        require_text(redirect_uri, "redirect_uri")
        require_text(scope, "scope")

        params = {
            "response_type": "code",
            "client_id": self._client_id,
            "redirect_uri": redirect_uri,
            "scope": scope,
        }
        if state is not None and state.strip():
            params["state"] = state

        # quote (not quote_plus) with no safe characters: spaces become %20, "/" becomes %2F
        return f"{AUTHORIZATION_URL}?{urlencode(params, quote_via=quote)}"

    # ---- Token endpoint --------------------------------------------------

    async def exchange_code_for_token(
        self, code: str, redirect_uri: str
    ) -> Optional[OAuthTokenResponse]:
        """Trade an authorization code for an access + refresh token."""
        require_text(code, "code")
        require_text(redirect_uri, "redirect_uri")

        return await self._post_token(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": redirect_uri,
                "client_id": self._client_id,
                "client_secret": self._client_secret,
            }
        )

    async def refresh_token(self, refresh_token: str) -> Optional[OAuthTokenResponse]:
        """Trade a refresh token for a new token pair."""
        require_text(refresh_token, "refresh_token")

        return await self._post_token(
            {
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
                "client_id": self._client_id,
                "client_secret": self._client_secret,
            }
        )

    async def _post_token(self, form: dict[str, str]) -> Optional[OAuthTokenResponse]:
        """Form-encoded POST to the token endpoint. Raises WhoopAPIError on non-2xx."""
        logger.debug("POST %s grant_type=%s", TOKEN_URL, form["grant_type"])
        response = await self._http.post(TOKEN_URL, data=form)
        return parse_response(response, OAuthTokenResponse)

    # ---- Lifecycle -------------------------------------------------------

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it. Safe to call twice."""
        if self._owns_http_client and not self._closed:
            await self._http.aclose()
        self._closed = True

    async def __aenter__(self) -> "WhoopOAuthClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
