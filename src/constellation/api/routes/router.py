"""Top-level router -- aggregates page, auth and JSON API routers."""

from __future__ import annotations

from fastapi import APIRouter

from src.constellation.api.routes import auth, health, pages, reference

router = APIRouter()

router.include_router(health.router)
router.include_router(auth.router)
router.include_router(reference.router)
router.include_router(pages.router)
