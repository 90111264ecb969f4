"""FastAPI dependencies for the collaborators built at startup.

The loader bundle and the auth service live on app.state (constructed once
in the lifespan, or injected through create_app()). A missing collaborator
means startup did not complete, which is reported as 503.
"""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from src.constellation.auth.service import AuthService
from src.constellation.data.loaders import Loaders


def get_loaders(request: Request) -> Loaders:
    """Retrieve the Loaders bundle from app.state, 503 if not available."""
    loaders = getattr(request.app.state, "loaders", None)
    if loaders is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Data loaders not initialized",
        )
    return loaders


def get_auth(request: Request) -> AuthService:
    """Retrieve the AuthService from app.state, 503 if not available."""
    auth = getattr(request.app.state, "auth", None)
    if auth is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Auth not initialized",
        )
    return auth
