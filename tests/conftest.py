"""Shared fixtures: an app wired to in-memory loaders and an HTTP client for it.

No database is involved. The app is built with create_app(loaders=..., auth=...)
so the lifespan, which would connect to Postgres, is never needed;
ASGITransport does not run it.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.constellation.auth.service import DisabledAuth
from src.constellation.data.loaders import Loaders
from src.constellation.main import create_app
from tests.factories import make_loaders


@pytest.fixture
def loaders() -> Loaders:
    return make_loaders()


@pytest.fixture
def app(loaders):
    return create_app(loaders=loaders, auth=DisabledAuth())


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for the app. Redirects are not followed."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
