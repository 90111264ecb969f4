"""Tests for the auth service: disabled mode, Google OAuth flow and sessions.

Handlers are called directly with a Starlette Request; Google's token and
userinfo endpoints are served by httpx.MockTransport.
"""

from __future__ import annotations

import json
import re
from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest
from starlette.requests import Request

from src.constellation.auth.allowlist import AllowlistDecision, AuthOutcome
from src.constellation.auth.service import (
    GOOGLE_TOKEN_URL,
    GOOGLE_USERINFO_URL,
    DisabledAuth,
    GoogleAuth,
    create_auth,
    safe_callback_url,
)
from src.constellation.config import Settings
from src.constellation.core.security import (
    SESSION_COOKIE_NAME,
    STATE_COOKIE_NAME,
    create_session_token,
    create_state_token,
    verify_token,
)


def _settings(**overrides) -> Settings:
    values = {
        "AUTH_SECRET": "test-secret",
        "AUTH_GOOGLE_ID": "client-id",
        "AUTH_GOOGLE_SECRET": "client-secret",
        "AUTH_URL": "https://constellation.example",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_request(
    path: str,
    *,
    method: str = "GET",
    query: str = "",
    cookies: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> Request:
    raw_headers = [(b"host", b"constellation.example")]
    if cookies:
        cookie = "; ".join(f"{k}={v}" for k, v in cookies.items())
        raw_headers.append((b"cookie", cookie.encode()))
    for key, value in (headers or {}).items():
        raw_headers.append((key.lower().encode(), value.encode()))
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": method,
        "scheme": "https",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": query.encode(),
        "headers": raw_headers,
        "client": ("198.51.100.7", 50000),
        "server": ("constellation.example", 443),
    }
    return Request(scope)


def _cookie_value(response, name: str) -> str | None:
    for header in response.headers.getlist("set-cookie"):
        match = re.match(rf"{re.escape(name)}=([^;]*)", header)
        if match:
            return match.group(1)
    return None


def _google_transport(profile: dict, token_status: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == GOOGLE_TOKEN_URL:
            if token_status != 200:
                return httpx.Response(token_status, json={"error": "invalid_grant"})
            return httpx.Response(200, json={"access_token": "ya29.token", "token_type": "Bearer"})
        if str(request.url) == GOOGLE_USERINFO_URL:
            assert request.headers["authorization"] == "Bearer ya29.token"
            return httpx.Response(200, json=profile)
        return httpx.Response(404)

    return httpx.MockTransport(handler)


def _google_auth(settings: Settings, decision: AllowlistDecision, profile: dict | None = None, token_status: int = 200):
    allowlist = AsyncMock()
    allowlist.authorize.return_value = decision
    profile = profile or {
        "sub": "1234",
        "email": "Analyst@Example.com",
        "name": "Analyst",
        "picture": "https://example.com/a.png",
    }
    transport = _google_transport(profile, token_status)
    auth = GoogleAuth(
        settings,
        allowlist,
        http_client_factory=lambda: httpx.AsyncClient(transport=transport),
    )
    return auth, allowlist


# ── Factory ──────────────────────────────────────────────────────────────────


def test_create_auth_without_secret_is_disabled():
    auth = create_auth(_settings(AUTH_SECRET=""), session_factory=AsyncMock())
    assert isinstance(auth, DisabledAuth)
    assert auth.is_configured is False


def test_create_auth_with_secret_is_google():
    auth = create_auth(_settings(), session_factory=AsyncMock())
    assert isinstance(auth, GoogleAuth)
    assert auth.is_configured is True


# ── Disabled mode ────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_disabled_get_session_is_none():
    auth = DisabledAuth()
    assert await auth.get_session(make_request("/deals")) is None


@pytest.mark.asyncio
async def test_disabled_post_is_503():
    response = await DisabledAuth().handlers.POST(make_request("/api/auth/session", method="POST"))
    assert response.status_code == 503


# ── Sign-in ──────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_signin_redirects_to_google_with_state_cookie():
    settings = _settings()
    auth, _ = _google_auth(settings, AllowlistDecision(AuthOutcome.ALLOWED, "member"))

    response = await auth.handlers.GET(
        make_request("/api/auth/signin/google", query="callbackUrl=%2Flga%2Fmap")
    )

    assert response.status_code == 303
    location = urlsplit(response.headers["location"])
    assert f"{location.scheme}://{location.netloc}{location.path}" == (
        "https://accounts.google.com/o/oauth2/v2/auth"
    )
    params = parse_qs(location.query)
    assert params["client_id"] == ["client-id"]
    assert params["redirect_uri"] == ["https://constellation.example/api/auth/callback/google"]

    state_token = _cookie_value(response, STATE_COOKIE_NAME)
    payload = verify_token(settings, state_token, "oauth_state")
    assert payload["state"] == params["state"][0]
    assert payload["callback_url"] == "/lga/map"


@pytest.mark.asyncio
async def test_signin_without_google_client_is_503():
    auth, _ = _google_auth(
        _settings(AUTH_GOOGLE_ID="", AUTH_GOOGLE_SECRET=""),
        AllowlistDecision(AuthOutcome.ALLOWED),
    )
    response = await auth.handlers.POST(make_request("/api/auth/signin", method="POST"))
    assert response.status_code == 503


@pytest.mark.parametrize(
    ("value", "expected"),
    [("/deals", "/deals"), ("//evil.example", "/"), ("https://evil.example", "/"), (None, "/")],
)
def test_safe_callback_url(value, expected):
    assert safe_callback_url(value) == expected


# ── Callback ─────────────────────────────────────────────────────────────────


def _callback_request(settings: Settings, state: str = "abc", returned_state: str = "abc", callback_url: str = "/deals"):
    token = create_state_token(settings, state, callback_url)
    return make_request(
        "/api/auth/callback/google",
        query=f"code=auth-code&state={returned_state}",
        cookies={STATE_COOKIE_NAME: token},
        headers={"x-forwarded-for": "203.0.113.9, 10.0.0.1"},
    )


@pytest.mark.asyncio
async def test_callback_allowed_sets_session_and_redirects():
    settings = _settings()
    auth, allowlist = _google_auth(settings, AllowlistDecision(AuthOutcome.ALLOWED, "admin"))

    response = await auth.handlers.GET(_callback_request(settings))

    assert response.status_code == 303
    assert response.headers["location"] == "/deals"
    allowlist.authorize.assert_awaited_once_with("Analyst@Example.com", "203.0.113.9")

    payload = verify_token(settings, _cookie_value(response, SESSION_COOKIE_NAME), "session")
    assert payload["email"] == "analyst@example.com"
    assert payload["role"] == "admin"
    assert any(
        h.startswith(SESSION_COOKIE_NAME) and "HttpOnly" in h and "Secure" in h
        for h in response.headers.getlist("set-cookie")
    )


@pytest.mark.asyncio
async def test_callback_denied_redirects_to_signin_error():
    settings = _settings()
    auth, _ = _google_auth(settings, AllowlistDecision(AuthOutcome.DENIED_NOT_ALLOWLISTED))

    response = await auth.handlers.GET(_callback_request(settings))

    assert response.headers["location"] == "/auth/signin?error=AccessDenied"
    assert _cookie_value(response, SESSION_COOKIE_NAME) is None


@pytest.mark.asyncio
async def test_callback_state_mismatch_is_rejected_before_exchange():
    settings = _settings()
    auth, allowlist = _google_auth(settings, AllowlistDecision(AuthOutcome.ALLOWED))

    response = await auth.handlers.GET(_callback_request(settings, returned_state="forged"))

    assert response.headers["location"] == "/auth/signin?error=OAuthCallback"
    allowlist.authorize.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("returned_state", ["%C3%A9", "abc%E2%9C%93"])
async def test_callback_non_ascii_state_is_a_mismatch_not_an_error(returned_state):
    settings = _settings()
    auth, allowlist = _google_auth(settings, AllowlistDecision(AuthOutcome.ALLOWED))

    response = await auth.handlers.GET(_callback_request(settings, returned_state=returned_state))

    assert response.status_code == 303
    assert response.headers["location"] == "/auth/signin?error=OAuthCallback"
    allowlist.authorize.assert_not_awaited()


@pytest.mark.asyncio
async def test_callback_matching_non_ascii_state_is_accepted():
    settings = _settings()
    auth, allowlist = _google_auth(settings, AllowlistDecision(AuthOutcome.ALLOWED))

    response = await auth.handlers.GET(
        _callback_request(settings, state="\u00e9t\u00e9", returned_state="%C3%A9t%C3%A9")
    )

    assert response.headers["location"] == "/deals"
    allowlist.authorize.assert_awaited_once()


@pytest.mark.asyncio
async def test_callback_token_exchange_failure():
    settings = _settings()
    auth, allowlist = _google_auth(settings, AllowlistDecision(AuthOutcome.ALLOWED), token_status=400)

    response = await auth.handlers.GET(_callback_request(settings))

    assert response.headers["location"] == "/auth/signin?error=OAuthCallback"
    allowlist.authorize.assert_not_awaited()


@pytest.mark.asyncio
async def test_callback_provider_access_denied():
    auth, _ = _google_auth(_settings(), AllowlistDecision(AuthOutcome.ALLOWED))

    response = await auth.handlers.GET(
        make_request("/api/auth/callback/google", query="error=access_denied")
    )

    assert response.headers["location"] == "/auth/signin?error=AccessDenied"


# ── Session and sign-out ─────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_session_endpoint_returns_user():
    settings = _settings()
    auth, _ = _google_auth(settings, AllowlistDecision(AuthOutcome.ALLOWED))
    token = create_session_token(settings, {"sub": "1", "email": "a@example.com", "role": "member"})

    response = await auth.handlers.GET(
        make_request("/api/auth/session", cookies={SESSION_COOKIE_NAME: token})
    )
    user = await auth.get_session(make_request("/deals", cookies={SESSION_COOKIE_NAME: token}))

    body = json.loads(response.body)
    assert body["user"]["email"] == "a@example.com"
    assert body["expires"]
    assert user.email == "a@example.com"
    assert user.role == "member"


@pytest.mark.asyncio
async def test_session_endpoint_without_cookie():
    auth, _ = _google_auth(_settings(), AllowlistDecision(AuthOutcome.ALLOWED))
    response = await auth.handlers.GET(make_request("/api/auth/session"))
    assert response.body == b'{"session":null}'


@pytest.mark.asyncio
async def test_tampered_session_cookie_is_ignored():
    settings = _settings()
    auth, _ = _google_auth(settings, AllowlistDecision(AuthOutcome.ALLOWED))
    token = create_session_token(_settings(AUTH_SECRET="other-secret"), {"sub": "1", "email": "a@example.com"})

    assert await auth.get_session(make_request("/", cookies={SESSION_COOKIE_NAME: token})) is None


@pytest.mark.asyncio
async def test_signout_clears_session_cookie():
    auth, _ = _google_auth(_settings(), AllowlistDecision(AuthOutcome.ALLOWED))

    response = await auth.handlers.POST(make_request("/api/auth/signout", method="POST"))

    assert response.headers["location"] == "/"
    cleared = [h for h in response.headers.getlist("set-cookie") if h.startswith(SESSION_COOKIE_NAME)]
    assert cleared and "Max-Age=0" in cleared[0]


@pytest.mark.asyncio
async def test_unknown_action_is_404():
    auth, _ = _google_auth(_settings(), AllowlistDecision(AuthOutcome.ALLOWED))
    response = await auth.handlers.GET(make_request("/api/auth/csrf"))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_providers_lists_google():
    auth, _ = _google_auth(_settings(), AllowlistDecision(AuthOutcome.ALLOWED))
    response = await auth.handlers.GET(make_request("/api/auth/providers"))
    assert b'"google"' in response.body
