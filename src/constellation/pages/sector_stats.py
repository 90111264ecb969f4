"""Per-sector rollups shown on the sectors list."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel

from src.constellation.schemas.records import Deal, Strategy

# Opportunity type id -> sector opportunity id
OPPORTUNITY_TYPE_TO_SECTOR: dict[str, str] = {
    "critical-minerals": "sector_opportunity_critical_minerals_value_chain",
    "renewable-energy": "sector_opportunity_renewable_energy_services",
    "bioenergy": "sector_opportunity_bioenergy_biofuels",
    "biomanufacturing": "sector_opportunity_biomanufacturing",
    "circular-economy": "sector_opportunity_circular_economy_mining_industrial",
    "space": "sector_opportunity_space_industrial_support",
    "post-mining-land-use": "sector_opportunity_post_mining_land_use",
}


class SectorStats(BaseModel):
    deal_count: int = 0
    total_investment: float = 0.0
    total_economic_impact: float = 0.0
    total_jobs: int = 0
    strategy_count: int = 0


def build_sector_stats(
    deals: Iterable[Deal], strategies: Iterable[Strategy]
) -> dict[str, SectorStats]:
    """Roll deals up by their sector and count strategies prioritising each sector.

    Deals whose opportunity type has no sector are skipped.
    """
    stats: dict[str, SectorStats] = {}

    for deal in deals:
        sector_id = OPPORTUNITY_TYPE_TO_SECTOR.get(deal.opportunity_type_id)
        if sector_id is None:
            continue
        entry = stats.setdefault(sector_id, SectorStats())
        entry.deal_count += 1
        entry.total_investment += deal.investment_value_amount or 0.0
        entry.total_economic_impact += deal.economic_impact_amount or 0.0
        entry.total_jobs += deal.economic_impact_jobs or 0

    for strategy in strategies:
        for sector_id in strategy.priority_sector_ids:
            stats.setdefault(sector_id, SectorStats()).strategy_count += 1

    return stats
