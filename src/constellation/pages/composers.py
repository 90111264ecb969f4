"""Page handlers: fan out to the loaders a page needs, then hand the results to its component.

Every handler takes the injected Loaders bundle (plus any route parameter),
runs its loaders concurrently through gather_or_cancel, and returns a
ComponentView whose props are the loader results exactly as returned.
Detail pages also pick out the records linked to the one being shown. A
failing loader fails the page; nothing is substituted, retried or logged
here.
"""

from __future__ import annotations

from src.constellation.core.concurrency import gather_or_cancel
from src.constellation.data.loaders import Loaders
from src.constellation.data.page_data import load_page_data
from src.constellation.pages.sector_stats import OPPORTUNITY_TYPE_TO_SECTOR, build_sector_stats
from src.constellation.pages.views import ComponentView, NotFoundResult, PageResult


# ── Home & state ────────────────────────────────────────────────────────────


async def home_page(loaders: Loaders) -> ComponentView:
    deals = await loaders.load_deals()
    return ComponentView("HomeView", {"deals": deals}, title="Home")


async def state_page(loaders: Loaders) -> ComponentView:
    lgas, deals, opportunity_types = await gather_or_cancel(
        loaders.load_lgas(),
        loaders.load_deals(),
        loaders.load_opportunity_types(),
    )
    return ComponentView(
        "StateView",
        {"opportunity_types": opportunity_types, "deals": deals, "lgas": lgas},
        title="Queensland",
    )


# ── Deals ───────────────────────────────────────────────────────────────────


async def deals_page(loaders: Loaders) -> ComponentView:
    lgas, deals, opportunity_types = await gather_or_cancel(
        loaders.load_lgas(),
        loaders.load_deals(),
        loaders.load_opportunity_types(),
    )
    return ComponentView(
        "DealsSearch",
        {"deals": deals, "opportunity_types": opportunity_types, "lgas": lgas},
        title="Deals",
    )


async def deal_detail_page(loaders: Loaders, deal_id: str) -> ComponentView:
    """Deal detail. A deal id with no stored record still renders, with deal=None."""
    data = await load_page_data(loaders, "deal detail")
    deal = next((d for d in data.deals if d.id == deal_id), None)
    return ComponentView(
        "DealDetail",
        {
            "deal": deal,
            "deal_id": deal_id,
            "opportunity_types": data.opportunity_types,
            "lgas": data.lgas,
            "all_deals": data.deals,
        },
        title=deal.name if deal else "Deal",
    )


async def opportunities_page(loaders: Loaders) -> ComponentView:
    data = await load_page_data(loaders, "opportunities")
    return ComponentView(
        "OpportunitiesIndex",
        {
            "opportunity_types": data.opportunity_types,
            "deals": data.deals,
            "lgas": data.lgas,
        },
        title="Opportunities",
    )


# ── LGA views ───────────────────────────────────────────────────────────────


async def lga_list_page(loaders: Loaders) -> ComponentView:
    data = await load_page_data(loaders, "lga list")
    return ComponentView(
        "LgaList",
        {
            "lgas": data.lgas,
            "deals": data.deals,
            "opportunity_types": data.opportunity_types,
            "sector_count": len(data.sector_opportunities),
        },
        title="LGAs",
    )


async def lga_map_page(loaders: Loaders) -> ComponentView:
    lgas, deals, opportunity_types = await gather_or_cancel(
        loaders.load_lgas(),
        loaders.load_deals(),
        loaders.load_opportunity_types(),
    )
    return ComponentView(
        "MapPageView",
        {"lgas": lgas, "deals": deals, "opportunity_types": opportunity_types},
        title="LGA map",
    )


async def map_page(loaders: Loaders) -> ComponentView:
    lgas, deals, opportunity_types, boundaries = await gather_or_cancel(
        loaders.load_lgas(),
        loaders.load_deals(),
        loaders.load_opportunity_types(),
        loaders.load_qld_lga_boundaries(),
    )
    return ComponentView(
        "MapView",
        {
            "lgas": lgas,
            "deals": deals,
            "opportunity_types": opportunity_types,
            "boundaries": boundaries,
        },
        title="Map",
    )


async def lga_detail_page(loaders: Loaders, lga_id: str) -> PageResult:
    """One LGA with the deals located in it and the strategies that target their sectors."""
    lga, deals, sector_opportunities, strategies = await gather_or_cancel(
        loaders.load_lga_by_id(lga_id),
        loaders.load_deals(),
        loaders.load_sector_opportunities(),
        loaders.load_strategies(),
    )
    if lga is None:
        return NotFoundResult(f"LGA not found: {lga_id}")

    linked_deals = [d for d in deals if lga_id in d.lga_ids]
    active_sector_ids = {
        OPPORTUNITY_TYPE_TO_SECTOR[d.opportunity_type_id]
        for d in linked_deals
        if d.opportunity_type_id in OPPORTUNITY_TYPE_TO_SECTOR
    }
    linked_strategies = [
        s for s in strategies if active_sector_ids.intersection(s.priority_sector_ids)
    ]
    return ComponentView(
        "LgaDetail",
        {
            "lga": lga,
            "linked_deals": linked_deals,
            "sector_opportunities": sector_opportunities,
            "linked_strategies": linked_strategies,
        },
        title=lga.name,
    )


# ── Strategies ──────────────────────────────────────────────────────────────


async def lga_strategies_page(loaders: Loaders) -> ComponentView:
    strategies, strategy_grades, sector_opportunities = await gather_or_cancel(
        loaders.load_strategies(),
        loaders.load_strategy_grades(),
        loaders.load_sector_opportunities(),
    )
    return ComponentView(
        "StrategiesIndex",
        {
            "strategies": strategies,
            "strategy_grades": strategy_grades,
            "sector_opportunities": sector_opportunities,
        },
        title="Strategies",
    )


async def strategy_detail_page(loaders: Loaders, strategy_id: str) -> PageResult:
    strategy, grade, sector_opportunities = await gather_or_cancel(
        loaders.load_strategy_by_id(strategy_id),
        loaders.load_strategy_grade(strategy_id),
        loaders.load_sector_opportunities(),
    )
    if strategy is None:
        return NotFoundResult(f"Strategy not found: {strategy_id}")

    return ComponentView(
        "StrategyDetail",
        {
            "strategy": strategy,
            "grade": grade,
            "sector_opportunities": sector_opportunities,
        },
        title="Strategy details",
    )


def strategy_upload_page() -> ComponentView:
    """Upload form; needs no data."""
    return ComponentView("StrategyUpload", {}, title="Upload strategy")


# ── Sectors ─────────────────────────────────────────────────────────────────


async def sectors_list_page(loaders: Loaders) -> ComponentView:
    sector_opportunities, deals, strategies = await gather_or_cancel(
        loaders.load_sector_opportunities(),
        loaders.load_deals(),
        loaders.load_strategies(),
    )
    return ComponentView(
        "SectorOpportunitiesIndex",
        {
            "sector_opportunities": sector_opportunities,
            "sector_stats": build_sector_stats(deals, strategies),
            "total_deals": len(deals),
            "total_strategies": len(strategies),
        },
        title="Sector opportunities",
    )


async def sector_detail_page(loaders: Loaders, sector_id: str) -> PageResult:
    sector, strategies, deals, lgas = await gather_or_cancel(
        loaders.load_sector_opportunity_by_id(sector_id),
        loaders.load_strategies(),
        loaders.load_deals(),
        loaders.load_lgas(),
    )
    if sector is None:
        return NotFoundResult(f"Sector opportunity not found: {sector_id}")

    linked_strategies = [s for s in strategies if sector.id in s.priority_sector_ids]
    linked_deals = [
        d for d in deals if OPPORTUNITY_TYPE_TO_SECTOR.get(d.opportunity_type_id) == sector.id
    ]
    linked_lga_ids = {lga_id for d in linked_deals for lga_id in d.lga_ids}
    linked_lgas = [lga for lga in lgas if lga.id in linked_lga_ids]
    return ComponentView(
        "SectorOpportunityDetail",
        {
            "sector": sector,
            "linked_strategies": linked_strategies,
            "linked_deals": linked_deals,
            "linked_lgas": linked_lgas,
        },
        title=sector.name,
    )


# ── Auth ────────────────────────────────────────────────────────────────────


def signin_page(error: str | None, auth_configured: bool) -> ComponentView:
    return ComponentView(
        "SignIn",
        {"error": error, "auth_configured": auth_configured},
        title="Sign in",
    )
