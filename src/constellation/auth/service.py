"""Authentication service behind the /api/auth/* catch-all route.

create_auth() builds one AuthService per process:
- DisabledAuth when AUTH_SECRET is unset (local dev): no route is protected,
  the session endpoint reports no session, everything else answers 503.
- GoogleAuth otherwise: Google OAuth sign-in, allowlist enforcement, and a
  signed JWT session cookie.

The service exposes its request handlers as ``handlers.GET`` / ``handlers.POST``;
the route layer calls them without wrapping.
"""

from __future__ import annotations

import secrets
from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlencode

import httpx
import structlog
from fastapi import status
from fastapi.requests import Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.constellation.auth.allowlist import Allowlist
from src.constellation.config import Settings
from src.constellation.core.security import (
    SESSION_COOKIE_NAME,
    STATE_COOKIE_NAME,
    STATE_TOKEN_TTL,
    client_ip,
    create_session_token,
    create_state_token,
    verify_token,
)

logger = structlog.get_logger(__name__)

AUTH_BASE_PATH = "/api/auth"
SIGNIN_PAGE = "/auth/signin"

NOT_CONFIGURED_MESSAGE = (
    "Auth is not configured. Set AUTH_SECRET, AUTH_GOOGLE_ID, and AUTH_GOOGLE_SECRET in .env."
)

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"

Handler = Callable[[Request], Awaitable[Response]]


@dataclass(frozen=True)
class AuthHandlers:
    """Request handlers keyed by HTTP method name."""

    GET: Handler
    POST: Handler


@dataclass(frozen=True)
class SessionUser:
    email: str
    name: str | None = None
    image: str | None = None
    role: str = "member"


def auth_action(request: Request) -> str:
    """The part of the path after /api/auth/, e.g. "session" or "callback/google"."""
    path = request.url.path
    prefix = AUTH_BASE_PATH + "/"
    if path.startswith(prefix):
        return path[len(prefix):].strip("/")
    return ""


def safe_callback_url(value: str | None) -> str:
    """Only same-site relative paths are accepted as post-login destinations."""
    if value and value.startswith("/") and not value.startswith("//"):
        return value
    return "/"


class AuthService:
    """Base class: one instance per process, read-only after construction."""

    is_configured: bool = False

    @property
    def handlers(self) -> AuthHandlers:
        return self._handlers

    async def get_session(self, request: Request) -> SessionUser | None:
        return None


# ── Disabled mode ───────────────────────────────────────────────────────────


class DisabledAuth(AuthService):
    """Stand-in used when AUTH_SECRET is not set."""

    is_configured = False

    def __init__(self) -> None:
        self._handlers = AuthHandlers(GET=self._handle_get, POST=self._handle_post)

    async def _handle_get(self, request: Request) -> Response:
        if auth_action(request) == "session":
            return JSONResponse({"session": None})
        return JSONResponse(
            {"error": NOT_CONFIGURED_MESSAGE},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    async def _handle_post(self, request: Request) -> Response:
        return JSONResponse(
            {"error": NOT_CONFIGURED_MESSAGE},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


# ── Google OAuth mode ───────────────────────────────────────────────────────


class GoogleAuth(AuthService):
    """Google OAuth sign-in with allowlist enforcement and JWT session cookies.

    Args:
        settings: Application settings (AUTH_* values).
        allowlist: Allowlist consulted on every OAuth callback.
        http_client_factory: Builds the httpx client used for the token
            exchange and userinfo call. Tests pass a MockTransport-backed one.
    """

    is_configured = True

    def __init__(
        self,
        settings: Settings,
        allowlist: Allowlist,
        http_client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._settings = settings
        self._allowlist = allowlist
        self._http_client_factory = http_client_factory or (
            lambda: httpx.AsyncClient(timeout=10.0)
        )
        self._handlers = AuthHandlers(GET=self._handle_get, POST=self._handle_post)

    @property
    def redirect_uri(self) -> str:
        return f"{self._settings.AUTH_URL.rstrip('/')}{AUTH_BASE_PATH}/callback/google"

    @property
    def _secure_cookies(self) -> bool:
        return self._settings.AUTH_URL.startswith("https://")

    # ── Session ─────────────────────────────────────────────────────────────

    async def get_session(self, request: Request) -> SessionUser | None:
        payload = verify_token(
            self._settings, request.cookies.get(SESSION_COOKIE_NAME), "session"
        )
        if payload is None or not payload.get("email"):
            return None
        return SessionUser(
            email=payload["email"],
            name=payload.get("name"),
            image=payload.get("picture"),
            role=payload.get("role") or "member",
        )

    async def _session_response(self, request: Request) -> Response:
        payload = verify_token(
            self._settings, request.cookies.get(SESSION_COOKIE_NAME), "session"
        )
        if payload is None or not payload.get("email"):
            return JSONResponse({"session": None})
        expires = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        return JSONResponse({
            "user": {
                "email": payload["email"],
                "name": payload.get("name"),
                "image": payload.get("picture"),
                "role": payload.get("role") or "member",
            },
            "expires": expires.isoformat(),
        })

    # ── Dispatch ────────────────────────────────────────────────────────────

    async def _handle_get(self, request: Request) -> Response:
        action = auth_action(request)
        if action == "session":
            return await self._session_response(request)
        if action == "providers":
            return JSONResponse(self._providers())
        if action in ("signin", "signin/google"):
            return self._begin_signin(request)
        if action == "callback/google":
            return await self._handle_callback(request)
        if action == "signout":
            return self._signout()
        return self._unknown_action(action)

    async def _handle_post(self, request: Request) -> Response:
        action = auth_action(request)
        if action in ("signin", "signin/google"):
            return self._begin_signin(request)
        if action == "signout":
            return self._signout()
        return self._unknown_action(action)

    def _unknown_action(self, action: str) -> Response:
        return JSONResponse(
            {"error": f"Unknown auth action: {action}"},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    def _providers(self) -> dict[str, Any]:
        if not self._settings.is_google_configured:
            return {}
        return {
            "google": {
                "id": "google",
                "name": "Google",
                "type": "oauth",
                "signinUrl": f"{AUTH_BASE_PATH}/signin/google",
                "callbackUrl": self.redirect_uri,
            }
        }

    # ── Sign-in flow ────────────────────────────────────────────────────────

    def _begin_signin(self, request: Request) -> Response:
        if not self._settings.is_google_configured:
            return JSONResponse(
                {"error": "Google sign-in is not configured"},
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        state = secrets.token_urlsafe(32)
        callback_url = safe_callback_url(request.query_params.get("callbackUrl"))
        query = urlencode({
            "client_id": self._settings.AUTH_GOOGLE_ID,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
            "state": state,
            "prompt": "select_account",
        })

        # 303 so a POST sign-in form is followed with a GET to Google
        response = RedirectResponse(
            f"{GOOGLE_AUTHORIZE_URL}?{query}", status_code=status.HTTP_303_SEE_OTHER
        )
        response.set_cookie(
            STATE_COOKIE_NAME,
            create_state_token(self._settings, state, callback_url),
            max_age=int(STATE_TOKEN_TTL.total_seconds()),
            httponly=True,
            secure=self._secure_cookies,
            samesite="lax",
            path=AUTH_BASE_PATH,
        )
        return response

    def _signin_error(self, error: str) -> Response:
        response = RedirectResponse(
            f"{SIGNIN_PAGE}?error={error}", status_code=status.HTTP_303_SEE_OTHER
        )
        response.delete_cookie(STATE_COOKIE_NAME, path=AUTH_BASE_PATH)
        return response

    async def _handle_callback(self, request: Request) -> Response:
        params = request.query_params
        if params.get("error"):
            logger.info("auth.oauth_error", error=params.get("error"))
            return self._signin_error(
                "AccessDenied" if params.get("error") == "access_denied" else "OAuthCallback"
            )

        state_payload = verify_token(
            self._settings, request.cookies.get(STATE_COOKIE_NAME), "oauth_state"
        )
        returned_state = params.get("state") or ""
        if state_payload is None or not secrets.compare_digest(
            str(state_payload.get("state", "")).encode(), returned_state.encode()
        ):
            logger.warning("auth.oauth_state_mismatch")
            return self._signin_error("OAuthCallback")

        code = params.get("code")
        if not code:
            return self._signin_error("OAuthCallback")

        try:
            profile = await self._fetch_profile(code)
        except httpx.HTTPError as exc:
            logger.error("auth.oauth_exchange_failed", error=str(exc))
            return self._signin_error("OAuthCallback")

        ip = client_ip(request.headers, request.client.host if request.client else None)
        decision = await self._allowlist.authorize(profile.get("email"), ip)
        if not decision.allowed:
            return self._signin_error("AccessDenied")

        token = create_session_token(
            self._settings,
            {
                "sub": str(profile.get("sub") or profile["email"]),
                "email": profile["email"].lower(),
                "name": profile.get("name"),
                "picture": profile.get("picture"),
                "role": decision.role or "member",
            },
        )
        response = RedirectResponse(
            safe_callback_url(state_payload.get("callback_url")),
            status_code=status.HTTP_303_SEE_OTHER,
        )
        response.delete_cookie(STATE_COOKIE_NAME, path=AUTH_BASE_PATH)
        response.set_cookie(
            SESSION_COOKIE_NAME,
            token,
            max_age=self._settings.AUTH_SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
            httponly=True,
            secure=self._secure_cookies,
            samesite="lax",
            path="/",
        )
        return response

    async def _fetch_profile(self, code: str) -> dict[str, Any]:
        """Exchange the authorization code and return the Google userinfo document."""
        async with self._http_client_factory() as client:
            token_response = await client.post(
                GOOGLE_TOKEN_URL,
                data={
                    "code": code,
                    "client_id": self._settings.AUTH_GOOGLE_ID,
                    "client_secret": self._settings.AUTH_GOOGLE_SECRET,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                },
            )
            token_response.raise_for_status()
            access_token = token_response.json()["access_token"]

            userinfo_response = await client.get(
                GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            userinfo_response.raise_for_status()
            return userinfo_response.json()

    def _signout(self) -> Response:
        response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
        response.delete_cookie(SESSION_COOKIE_NAME, path="/")
        return response


# ── Factory ─────────────────────────────────────────────────────────────────


def create_auth(
    settings: Settings,
    session_factory: Callable[..., AsyncGenerator[AsyncSession, None]],
) -> AuthService:
    """Build the process-wide auth service from settings."""
    if not settings.is_auth_configured:
        logger.warning("auth.disabled", reason="AUTH_SECRET not set")
        return DisabledAuth()
    if not settings.is_google_configured:
        logger.warning("auth.google_not_configured")
    return GoogleAuth(settings, Allowlist(session_factory))
