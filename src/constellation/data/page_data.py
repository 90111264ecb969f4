"""Shared loader for pages that need the core place/deal/taxonomy data."""

from __future__ import annotations

from dataclasses import dataclass

from src.constellation.core.concurrency import gather_or_cancel
from src.constellation.data.loaders import Loaders
from src.constellation.schemas.records import (
    Deal,
    Lga,
    OpportunityType,
    SectorOpportunity,
)


class PageDataError(RuntimeError):
    """A loader failed while assembling data for a named page."""


@dataclass(frozen=True)
class PageData:
    lgas: list[Lga]
    deals: list[Deal]
    opportunity_types: list[OpportunityType]
    sector_opportunities: list[SectorOpportunity]


async def load_page_data(loaders: Loaders, page_name: str) -> PageData:
    """Load LGAs, deals, opportunity types and sector opportunities concurrently.

    Raises:
        PageDataError: naming the page, chained to the loader's exception.
    """
    try:
        lgas, deals, opportunity_types, sector_opportunities = await gather_or_cancel(
            loaders.load_lgas(),
            loaders.load_deals(),
            loaders.load_opportunity_types(),
            loaders.load_sector_opportunities(),
        )
    except Exception as exc:
        raise PageDataError(f"Failed to load {page_name} data: {exc}") from exc

    return PageData(
        lgas=lgas,
        deals=deals,
        opportunity_types=opportunity_types,
        sector_opportunities=sector_opportunities,
    )
