"""Sample records and an in-memory Loaders bundle used across the test suite."""

from __future__ import annotations

from datetime import datetime, timezone

from src.constellation.data.loaders import Loaders
from src.constellation.schemas.records import (
    BoundaryFeature,
    Deal,
    Lga,
    OpportunityType,
    SectorOpportunity,
    Strategy,
    StrategyGrade,
)


# ── Sample Records ───────────────────────────────────────────────────────────


def make_lga(id: str = "lga-brisbane", name: str = "Brisbane") -> Lga:
    return Lga(id=id, name=name, geometry_ref=id)


def make_deal(
    id: str = "deal-1",
    name: str = "Mount Isa Copper Refinery",
    opportunity_type_id: str = "critical-minerals",
    **kwargs,
) -> Deal:
    fields = {
        "stage": "definition",
        "readiness_state": "conceptual-interest",
        "dominant_constraint": "capital-partner-gap",
        "summary": "Refine concentrate locally",
        "lga_ids": ["lga-mount-isa"],
        "updated_at": datetime(2025, 3, 1, tzinfo=timezone.utc),
    }
    fields.update(kwargs)
    return Deal(id=id, name=name, opportunity_type_id=opportunity_type_id, **fields)


def make_opportunity_type(id: str = "critical-minerals", name: str = "Mining") -> OpportunityType:
    return OpportunityType(id=id, name=name)


def make_sector(id: str = "sector_opportunity_biomanufacturing", name: str = "Biomanufacturing") -> SectorOpportunity:
    return SectorOpportunity(id=id, name=name, sections={"1": "Definition"})


def make_strategy(id: str = "strategy-1", title: str = "Central West Strategy", **kwargs) -> Strategy:
    return Strategy(id=id, title=title, **kwargs)


def make_grade(strategy_id: str = "strategy-1", grade_letter: str = "B-") -> StrategyGrade:
    return StrategyGrade(id=f"grade-{strategy_id}", strategy_id=strategy_id, grade_letter=grade_letter)


def make_boundary(id: str = "lga-brisbane") -> BoundaryFeature:
    return BoundaryFeature(
        id=id,
        properties={"name": "Brisbane"},
        geometry={"type": "Polygon", "coordinates": [[[153.0, -27.4], [153.1, -27.4], [153.0, -27.5], [153.0, -27.4]]]},
    )


# ── In-Memory Loaders ────────────────────────────────────────────────────────


def _returning(value):
    async def loader(*args):
        return value

    return loader


def make_loaders(
    *,
    lgas=None,
    deals=None,
    opportunity_types=None,
    boundaries=None,
    strategies=None,
    strategy_grades=None,
    sector_opportunities=None,
    **overrides,
) -> Loaders:
    """Loaders bundle returning fixed collections. Keyword overrides replace single loaders."""
    lgas = [make_lga()] if lgas is None else lgas
    deals = [make_deal()] if deals is None else deals
    opportunity_types = [make_opportunity_type()] if opportunity_types is None else opportunity_types
    boundaries = [make_boundary()] if boundaries is None else boundaries
    strategies = [make_strategy()] if strategies is None else strategies
    strategy_grades = [make_grade()] if strategy_grades is None else strategy_grades
    sector_opportunities = [make_sector()] if sector_opportunities is None else sector_opportunities

    async def load_lga_by_id(lga_id: str):
        return next((lga for lga in lgas if lga.id == lga_id), None)

    async def load_sector_opportunity_by_id(sector_id: str):
        return next((s for s in sector_opportunities if s.id == sector_id), None)

    async def load_strategy_by_id(strategy_id: str):
        return next((s for s in strategies if s.id == strategy_id), None)

    async def load_strategy_grade(strategy_id: str):
        return next((g for g in strategy_grades if g.strategy_id == strategy_id), None)

    loaders = {
        "load_lgas": _returning(lgas),
        "load_lga_by_id": load_lga_by_id,
        "load_deals": _returning(deals),
        "load_opportunity_types": _returning(opportunity_types),
        "load_qld_lga_boundaries": _returning(boundaries),
        "load_strategies": _returning(strategies),
        "load_strategy_grades": _returning(strategy_grades),
        "load_sector_opportunities": _returning(sector_opportunities),
        "load_sector_opportunity_by_id": load_sector_opportunity_by_id,
        "load_strategy_by_id": load_strategy_by_id,
        "load_strategy_grade": load_strategy_grade,
    }
    loaders.update(overrides)
    return Loaders(**loaders)
