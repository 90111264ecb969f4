"""FastAPI application factory.

Creates the app with the auth guard, logging middleware, metrics middleware,
CORS, Sentry, lifespan events for database initialization, and the page,
auth and JSON API routers.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import Response

from src.constellation.api.middleware.logging import LoggingMiddleware, configure_structlog
from src.constellation.api.routes.router import router
from src.constellation.auth.guard import AuthGuardMiddleware
from src.constellation.auth.service import AuthService, create_auth
from src.constellation.config import get_settings
from src.constellation.core.database import close_db, get_session, init_db
from src.constellation.core.monitoring import MetricsMiddleware, get_metrics_response, init_sentry
from src.constellation.data.boundaries import BoundarySource
from src.constellation.data.loaders import Loaders
from src.constellation.data.queries import DataRepository


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: init DB, Sentry and collaborators on startup, close on shutdown."""
    log = structlog.get_logger(__name__)
    settings = get_settings()
    configure_structlog()
    await init_db()

    # Initialize Sentry if DSN is configured
    if settings.SENTRY_DSN:
        init_sentry(dsn=settings.SENTRY_DSN, environment=settings.ENVIRONMENT.value)

    # Collaborators passed to create_app() win over the ones built here
    if getattr(app.state, "loaders", None) is None:
        boundaries = BoundarySource(Path(settings.BOUNDARIES_PATH))
        app.state.loaders = Loaders.from_sources(DataRepository(get_session), boundaries)
        log.info("startup.loaders_initialized", boundaries_path=str(boundaries.path))

    if getattr(app.state, "auth", None) is None:
        app.state.auth = create_auth(settings, get_session)
    log.info("startup.auth_initialized", configured=app.state.auth.is_configured)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    await close_db()


def create_app(*, loaders: Loaders | None = None, auth: AuthService | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        loaders: Data loader bundle; built from the database in the lifespan when omitted.
        auth: Auth service; built from settings in the lifespan when omitted.
    """
    settings = get_settings()

    app = FastAPI(
        title="Constellation",
        version="0.1.0",
        description="Deals, LGAs and sector development strategies",
        lifespan=lifespan,
    )
    app.state.loaders = loaders
    app.state.auth = auth

    # Middleware is added in reverse order (last added = outermost)

    # Auth guard (inner -- resolves the session and rejects anonymous requests)
    app.add_middleware(AuthGuardMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Logging middleware (logs every request with timing)
    app.add_middleware(LoggingMiddleware)

    # Metrics middleware (outermost -- records Prometheus metrics for all requests)
    app.add_middleware(MetricsMiddleware)

    app.include_router(router)

    # Prometheus metrics endpoint (infrastructure route, outside the page router)
    @app.get("/metrics", include_in_schema=False)
    async def metrics(request: Request) -> Response:
        """Prometheus metrics endpoint."""
        return get_metrics_response()

    return app


# Module-level app for uvicorn
app = create_app()
