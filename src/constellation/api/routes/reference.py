"""Read-only JSON API for client-side components.

Boundaries, opportunity types and sector opportunities, each fetched through
the same Loaders bundle the pages use. Failures are logged and answered with
a 500 carrying a short error message.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from src.constellation.api.deps import get_loaders
from src.constellation.data.loaders import Loaders

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["reference"])

BOUNDARIES_CACHE_CONTROL = "public, max-age=3600, stale-while-revalidate=86400"
SECTORS_CACHE_CONTROL = "public, max-age=300, stale-while-revalidate=3600"


def _error(message: str) -> JSONResponse:
    return JSONResponse(
        {"error": message},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@router.get("/boundaries")
async def get_boundaries(loaders: Loaders = Depends(get_loaders)):
    """QLD LGA boundaries as a GeoJSON FeatureCollection."""
    try:
        features = await loaders.load_qld_lga_boundaries()
    except Exception as e:
        logger.error("api.boundaries_failed", error=str(e))
        return _error("Failed to load boundaries")

    return JSONResponse(
        {"type": "FeatureCollection", "features": jsonable_encoder(features)},
        headers={"Cache-Control": BOUNDARIES_CACHE_CONTROL},
    )


@router.get("/opportunity-types")
async def get_opportunity_types(loaders: Loaders = Depends(get_loaders)):
    try:
        opportunity_types = await loaders.load_opportunity_types()
    except Exception as e:
        logger.error("api.opportunity_types_failed", error=str(e))
        return _error("Failed to fetch opportunity types")

    return JSONResponse(jsonable_encoder(opportunity_types))


@router.get("/sectors")
async def get_sectors(loaders: Loaders = Depends(get_loaders)):
    try:
        sectors = await loaders.load_sector_opportunities()
    except Exception as e:
        logger.error("api.sectors_failed", error=str(e))
        return _error("Failed to load sectors")

    return JSONResponse(
        jsonable_encoder(sectors),
        headers={"Cache-Control": SECTORS_CACHE_CONTROL},
    )
