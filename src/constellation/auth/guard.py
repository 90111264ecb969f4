"""Request guard that keeps pages and API routes behind sign-in.

Runs as middleware so every route is covered without per-route dependencies.
When the auth service is disabled (AUTH_SECRET unset) all requests pass.
"""

from __future__ import annotations

from urllib.parse import urlencode

import structlog
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.constellation.auth.service import SIGNIN_PAGE

logger = structlog.get_logger(__name__)

PUBLIC_PREFIXES = (
    "/api/auth",
    "/api/health",
    "/about",
    "/auth/signin",
    "/static",
    "/images",
    "/favicon.ico",
    "/metrics",
)


def is_public_path(path: str) -> bool:
    for prefix in PUBLIC_PREFIXES:
        if path == prefix or path.startswith(prefix + "/") or path.startswith(prefix + "?"):
            return True
    return False


class AuthGuardMiddleware(BaseHTTPMiddleware):
    """Rejects unauthenticated requests.

    API requests get a 401 JSON body; page requests are redirected to the
    sign-in page with the requested path as callbackUrl. The signed-in user is
    exposed to handlers and the logging middleware as ``request.state.user``.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.user = None
        auth = getattr(request.app.state, "auth", None)
        if auth is None or not auth.is_configured:
            return await call_next(request)

        path = request.url.path
        user = await auth.get_session(request)
        request.state.user = user
        if user is not None or is_public_path(path):
            return await call_next(request)

        if path.startswith("/api/"):
            return JSONResponse(
                {"error": "Unauthorized"},
                status_code=status.HTTP_401_UNAUTHORIZED,
            )

        callback = path
        if request.url.query:
            callback = f"{path}?{request.url.query}"
        logger.debug("auth.redirect_to_signin", path=path)
        return RedirectResponse(
            f"{SIGNIN_PAGE}?{urlencode({'callbackUrl': callback})}",
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
        )
