"""Auth bridge: /api/auth/* is answered by the auth service's own handlers.

The route adds nothing of its own. It looks up the handler for the request
method and returns whatever that handler returns; exceptions propagate.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from src.constellation.api.deps import get_auth
from src.constellation.auth.service import AuthHandlers, AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


def bridge_handlers(auth: AuthService) -> AuthHandlers:
    """The GET/POST handlers exposed at /api/auth/*, as constructed by the service."""
    return auth.handlers


@router.api_route("/{action:path}", methods=["GET", "POST"], include_in_schema=False)
async def auth_bridge(
    action: str,
    request: Request,
    auth: AuthService = Depends(get_auth),
) -> Response:
    handler = getattr(bridge_handlers(auth), request.method)
    return await handler(request)
