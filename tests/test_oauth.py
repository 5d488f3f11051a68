"""
Tests for the WHOOP OAuth Client
================================
Covers:
- Construction: required client id/secret, settings factory, transport ownership
- build_authorization_url(): parameters, order, percent-encoding, optional state
- exchange_code_for_token() / refresh_token(): form body, parsing, errors
- Argument validation happens before any request

Run: pytest tests/test_oauth.py -v
"""

from __future__ import annotations

from datetime import datetime, timezone
from urllib.parse import parse_qsl

import httpx
import pytest
import respx
from httpx import Response
from pydantic import ValidationError

from whoop.config import Settings
from whoop.models.oauth import OAuthTokenResponse
from whoop.services.http import WhoopAPIError
from whoop.services.oauth import AUTHORIZATION_URL, TOKEN_URL, WhoopOAuthClient

# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

_CLIENT_ID = "test-client-id"
_CLIENT_SECRET = "test-client-secret"
_REDIRECT_URI = "https://example.com/callback"
_SCOPE = "read:profile read:recovery"

_TOKEN_RESPONSE = {
    "access_token": "new-access-token",
    "token_type": "bearer",
    "expires_in": 3600,
    "refresh_token": "new-refresh-token",
    "scope": "offline read:profile",
}

_BLANK = ["", "   ", None]


def _client(**kwargs) -> WhoopOAuthClient:
    return WhoopOAuthClient(_CLIENT_ID, _CLIENT_SECRET, **kwargs)


def _form(request: httpx.Request) -> list[tuple[str, str]]:
    return parse_qsl(request.content.decode())


# ---------------------------------------------------------------------------
# TestConstruction
# ---------------------------------------------------------------------------

class TestConstruction:

    @pytest.mark.parametrize("client_id", _BLANK)
    def test_rejects_blank_client_id(self, client_id):
        with pytest.raises(ValueError):
            WhoopOAuthClient(client_id, _CLIENT_SECRET)

    @pytest.mark.parametrize("client_secret", _BLANK)
    def test_rejects_blank_client_secret(self, client_secret):
        with pytest.raises(ValueError):
            WhoopOAuthClient(_CLIENT_ID, client_secret)

    def test_from_settings_reads_credentials(self):
        settings = Settings(whoop_client_id="cfg-id", whoop_client_secret="cfg-secret")
        client = WhoopOAuthClient.from_settings(settings)
        assert "client_id=cfg-id" in client.build_authorization_url(_REDIRECT_URI, _SCOPE)

    def test_from_settings_requires_credentials(self):
        with pytest.raises(ValueError):
            WhoopOAuthClient.from_settings(Settings(whoop_client_id="", whoop_client_secret=""))

    @pytest.mark.asyncio
    async def test_owned_client_uses_configured_timeout(self):
        settings = Settings(
            whoop_client_id="cfg-id",
            whoop_client_secret="cfg-secret",
            whoop_timeout_seconds=12.5,
        )
        client = WhoopOAuthClient.from_settings(settings)
        assert client._http.timeout.read == 12.5
        assert client._http.timeout.connect == 12.5
        await client.aclose()

    @pytest.mark.asyncio
    async def test_injected_client_keeps_its_own_timeout(self):
        async with httpx.AsyncClient(timeout=2.0) as http:
            client = _client(http_client=http, settings=Settings(whoop_timeout_seconds=60.0))
            assert client._http is http
            assert http.timeout.read == 2.0

    @pytest.mark.asyncio
    async def test_aclose_never_closes_caller_supplied_client(self):
        http = httpx.AsyncClient()
        async with _client(http_client=http):
            pass
        assert http.is_closed is False
        await http.aclose()

    @pytest.mark.asyncio
    async def test_aclose_closes_owned_client_and_is_idempotent(self):
        client = _client()
        await client.aclose()
        await client.aclose()
        assert client._http.is_closed is True


# ---------------------------------------------------------------------------
# TestAuthorizationUrl
# ---------------------------------------------------------------------------

class TestAuthorizationUrl:

    def test_url_without_state(self):
        url = _client().build_authorization_url(_REDIRECT_URI, _SCOPE)

        assert url.startswith("https://api.prod.whoop.com/oauth/oauth2/auth?")
        assert url == (
            f"{AUTHORIZATION_URL}?response_type=code"
            "&client_id=test-client-id"
            "&redirect_uri=https%3A%2F%2Fexample.com%2Fcallback"
            "&scope=read%3Aprofile%20read%3Arecovery"
        )
        assert "state=" not in url

    def test_state_appended_last(self):
        url = _client().build_authorization_url(_REDIRECT_URI, _SCOPE, state="xyz")
        assert url.endswith("&scope=read%3Aprofile%20read%3Arecovery&state=xyz")

    def test_state_is_percent_encoded(self):
        url = _client().build_authorization_url(_REDIRECT_URI, _SCOPE, state="a b/c")
        assert url.endswith("&state=a%20b%2Fc")

    def test_blank_state_is_omitted(self):
        url = _client().build_authorization_url(_REDIRECT_URI, _SCOPE, state="  ")
        assert "state=" not in url

    def test_client_id_is_percent_encoded(self):
        client = WhoopOAuthClient("id with space", _CLIENT_SECRET)
        url = client.build_authorization_url(_REDIRECT_URI, _SCOPE)
        assert "client_id=id%20with%20space" in url

    @pytest.mark.parametrize("redirect_uri", _BLANK)
    def test_rejects_blank_redirect_uri(self, redirect_uri):
        with pytest.raises(ValueError):
            _client().build_authorization_url(redirect_uri, _SCOPE)

    @pytest.mark.parametrize("scope", _BLANK)
    def test_rejects_blank_scope(self, scope):
        with pytest.raises(ValueError):
            _client().build_authorization_url(_REDIRECT_URI, scope)


# ---------------------------------------------------------------------------
# TestCodeExchange
# ---------------------------------------------------------------------------

class TestCodeExchange:

    @pytest.mark.asyncio
    @respx.mock
    async def test_posts_form_and_parses_token(self):
        route = respx.post(TOKEN_URL).mock(return_value=Response(200, json=_TOKEN_RESPONSE))
        async with _client() as client:
            token = await client.exchange_code_for_token("auth-code", _REDIRECT_URI)

        assert isinstance(token, OAuthTokenResponse)
        assert token.access_token == "new-access-token"
        assert token.token_type == "bearer"
        assert token.expires_in == 3600
        assert token.refresh_token == "new-refresh-token"
        assert token.scope == "offline read:profile"

        request = route.calls[0].request
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert _form(request) == [
            ("grant_type", "authorization_code"),
            ("code", "auth-code"),
            ("redirect_uri", _REDIRECT_URI),
            ("client_id", _CLIENT_ID),
            ("client_secret", _CLIENT_SECRET),
        ]

    @pytest.mark.asyncio
    @respx.mock
    async def test_uses_injected_client(self):
        route = respx.post(TOKEN_URL).mock(return_value=Response(200, json=_TOKEN_RESPONSE))
        async with httpx.AsyncClient(headers={"X-Trace": "1"}) as http:
            client = _client(http_client=http)
            await client.exchange_code_for_token("auth-code", _REDIRECT_URI)
            assert http.is_closed is False

        assert route.calls[0].request.headers["X-Trace"] == "1"

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_2xx_raises_WhoopAPIError(self):
        respx.post(TOKEN_URL).mock(return_value=Response(400, text='{"error":"invalid_grant"}'))
        async with _client() as client:
            with pytest.raises(WhoopAPIError) as exc_info:
                await client.exchange_code_for_token("bad-code", _REDIRECT_URI)

        assert exc_info.value.status_code == 400
        assert "invalid_grant" in exc_info.value.body

    @pytest.mark.parametrize(
        "code, redirect_uri",
        [("", _REDIRECT_URI), ("  ", _REDIRECT_URI), ("code", ""), ("code", " ")],
    )
    @pytest.mark.asyncio
    @respx.mock(assert_all_called=False)
    async def test_blank_arguments_rejected_before_request(self, code, redirect_uri):
        route = respx.post(TOKEN_URL).mock(return_value=Response(200, json=_TOKEN_RESPONSE))
        async with _client() as client:
            with pytest.raises(ValueError):
                await client.exchange_code_for_token(code, redirect_uri)

        assert not route.called


# ---------------------------------------------------------------------------
# TestRefresh
# ---------------------------------------------------------------------------

class TestRefresh:

    @pytest.mark.asyncio
    @respx.mock
    async def test_posts_refresh_form(self):
        route = respx.post(TOKEN_URL).mock(return_value=Response(200, json=_TOKEN_RESPONSE))
        async with _client() as client:
            token = await client.refresh_token("old-refresh-token")

        assert token.access_token == "new-access-token"
        assert _form(route.calls[0].request) == [
            ("grant_type", "refresh_token"),
            ("refresh_token", "old-refresh-token"),
            ("client_id", _CLIENT_ID),
            ("client_secret", _CLIENT_SECRET),
        ]

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_2xx_raises_WhoopAPIError(self):
        respx.post(TOKEN_URL).mock(return_value=Response(401, text="Unauthorized"))
        async with _client() as client:
            with pytest.raises(WhoopAPIError) as exc_info:
                await client.refresh_token("revoked")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_success_body_returns_none(self):
        respx.post(TOKEN_URL).mock(return_value=Response(200))
        async with _client() as client:
            assert await client.refresh_token("old-refresh-token") is None

    @pytest.mark.asyncio
    @respx.mock(assert_all_called=False)
    async def test_blank_refresh_token_rejected_before_request(self):
        route = respx.post(TOKEN_URL).mock(return_value=Response(200, json=_TOKEN_RESPONSE))
        async with _client() as client:
            with pytest.raises(ValueError):
                await client.refresh_token("   ")

        assert not route.called


# ---------------------------------------------------------------------------
# TestTokenModel
# ---------------------------------------------------------------------------

class TestTokenModel:

    def test_expires_at_adds_lifetime(self):
        token = OAuthTokenResponse(**_TOKEN_RESPONSE)
        issued = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert token.expires_at(issued) == datetime(2024, 1, 1, 13, 0, tzinfo=timezone.utc)

    def test_expires_at_none_without_lifetime(self):
        token = OAuthTokenResponse(access_token="abc")
        assert token.expires_at(datetime.now(timezone.utc)) is None

    def test_token_is_immutable(self):
        token = OAuthTokenResponse(**_TOKEN_RESPONSE)
        with pytest.raises(ValidationError):
            token.access_token = "changed"
