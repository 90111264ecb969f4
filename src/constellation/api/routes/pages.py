"""Server-rendered pages and legacy redirects.

Each route resolves its collaborators, calls one page handler from
src.constellation.pages and renders the result. Fixed paths are registered
before the parameterized path they would otherwise be captured by.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from src.constellation.api.deps import get_auth, get_loaders
from src.constellation.auth.service import AuthService
from src.constellation.data.loaders import Loaders
from src.constellation.pages import composers, redirects
from src.constellation.pages.rendering import render

router = APIRouter(tags=["pages"], include_in_schema=False)


# ── Home & state ────────────────────────────────────────────────────────────


@router.get("/")
async def home(request: Request, loaders: Loaders = Depends(get_loaders)) -> Response:
    return render(request, await composers.home_page(loaders))


@router.get("/state")
async def state(request: Request, loaders: Loaders = Depends(get_loaders)) -> Response:
    return render(request, await composers.state_page(loaders))


@router.get("/opportunities")
async def opportunities(request: Request, loaders: Loaders = Depends(get_loaders)) -> Response:
    return render(request, await composers.opportunities_page(loaders))


# ── Deals ───────────────────────────────────────────────────────────────────


@router.get("/deals")
async def deals(request: Request, loaders: Loaders = Depends(get_loaders)) -> Response:
    return render(request, await composers.deals_page(loaders))


@router.get("/deals/{deal_id}")
async def deal_detail(
    deal_id: str, request: Request, loaders: Loaders = Depends(get_loaders)
) -> Response:
    return render(request, await composers.deal_detail_page(loaders, deal_id))


# ── LGA ─────────────────────────────────────────────────────────────────────


@router.get("/lga/list")
async def lga_list(request: Request, loaders: Loaders = Depends(get_loaders)) -> Response:
    return render(request, await composers.lga_list_page(loaders))


@router.get("/lga/map")
async def lga_map(request: Request, loaders: Loaders = Depends(get_loaders)) -> Response:
    return render(request, await composers.lga_map_page(loaders))


@router.get("/lga/strategies")
async def lga_strategies(request: Request, loaders: Loaders = Depends(get_loaders)) -> Response:
    return render(request, await composers.lga_strategies_page(loaders))


@router.get("/lga/strategies/upload")
async def lga_strategy_upload(request: Request) -> Response:
    return render(request, composers.strategy_upload_page())


@router.get("/lga/strategies/{strategy_id}")
async def lga_strategy_detail(
    strategy_id: str, request: Request, loaders: Loaders = Depends(get_loaders)
) -> Response:
    return render(request, await composers.strategy_detail_page(loaders, strategy_id))


@router.get("/lga/{lga_id}")
async def lga_detail(
    lga_id: str, request: Request, loaders: Loaders = Depends(get_loaders)
) -> Response:
    return render(request, await composers.lga_detail_page(loaders, lga_id))


@router.get("/map")
async def full_map(request: Request, loaders: Loaders = Depends(get_loaders)) -> Response:
    return render(request, await composers.map_page(loaders))


# ── Sectors ─────────────────────────────────────────────────────────────────


@router.get("/sectors")
async def sectors(request: Request) -> Response:
    return render(request, redirects.sectors_page())


@router.get("/sectors/list")
async def sectors_list(request: Request, loaders: Loaders = Depends(get_loaders)) -> Response:
    return render(request, await composers.sectors_list_page(loaders))


@router.get("/sectors/{sector_id}")
async def sector_detail(
    sector_id: str, request: Request, loaders: Loaders = Depends(get_loaders)
) -> Response:
    return render(request, await composers.sector_detail_page(loaders, sector_id))


# ── Legacy strategy URLs ────────────────────────────────────────────────────


@router.get("/strategies/upload")
async def legacy_strategy_upload(request: Request) -> Response:
    return render(request, redirects.legacy_strategy_upload_redirect())


@router.get("/strategies/{strategy_id}")
async def legacy_strategy(strategy_id: str, request: Request) -> Response:
    return render(request, redirects.legacy_strategy_redirect(strategy_id))


# ── Sign-in ─────────────────────────────────────────────────────────────────


@router.get("/auth/signin")
async def signin(
    request: Request,
    error: str | None = None,
    auth: AuthService = Depends(get_auth),
) -> Response:
    return render(request, composers.signin_page(error, auth.is_configured))
