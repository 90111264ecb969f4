"""The loader bundle injected into the page layer.

Pages never import the repository or the boundary file directly; they
receive a Loaders instance (built once at startup, read-only afterwards)
and call the loaders they need. Tests substitute plain async functions.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from src.constellation.data.boundaries import BoundarySource
from src.constellation.data.queries import DataRepository
from src.constellation.schemas.records import (
    BoundaryFeature,
    Deal,
    Lga,
    OpportunityType,
    SectorOpportunity,
    Strategy,
    StrategyGrade,
)


@dataclass(frozen=True)
class Loaders:
    """Async data loaders, one per record collection."""

    load_lgas: Callable[[], Awaitable[list[Lga]]]
    load_lga_by_id: Callable[[str], Awaitable[Lga | None]]
    load_deals: Callable[[], Awaitable[list[Deal]]]
    load_opportunity_types: Callable[[], Awaitable[list[OpportunityType]]]
    load_qld_lga_boundaries: Callable[[], Awaitable[list[BoundaryFeature]]]
    load_strategies: Callable[[], Awaitable[list[Strategy]]]
    load_strategy_grades: Callable[[], Awaitable[list[StrategyGrade]]]
    load_sector_opportunities: Callable[[], Awaitable[list[SectorOpportunity]]]
    load_sector_opportunity_by_id: Callable[[str], Awaitable[SectorOpportunity | None]]
    load_strategy_by_id: Callable[[str], Awaitable[Strategy | None]]
    load_strategy_grade: Callable[[str], Awaitable[StrategyGrade | None]]

    @classmethod
    def from_sources(cls, repository: DataRepository, boundaries: BoundarySource) -> Loaders:
        return cls(
            load_lgas=repository.load_lgas,
            load_lga_by_id=repository.load_lga_by_id,
            load_deals=repository.load_deals,
            load_opportunity_types=repository.load_opportunity_types,
            load_qld_lga_boundaries=boundaries.load_qld_lga_boundaries,
            load_strategies=repository.load_strategies,
            load_strategy_grades=repository.load_strategy_grades,
            load_sector_opportunities=repository.load_sector_opportunities,
            load_sector_opportunity_by_id=repository.load_sector_opportunity_by_id,
            load_strategy_by_id=repository.load_strategy_by_id,
            load_strategy_grade=repository.load_strategy_grade,
        )
