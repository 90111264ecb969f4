"""Read-side data access -- loads every record type the pages render.

Provides DataRepository with the session_factory callable pattern. Each
method opens its own session, so the page layer can run several loaders
concurrently within one request. Rows are converted to the immutable
records in schemas/records.py; enum-like values are mapped to their
kebab-case display form on the way out.
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator, Callable

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.constellation.data.enum_maps import (
    constraint_from_db,
    constraints_from_db,
    grade_letter_from_db,
    readiness_from_db,
    stage_from_db,
)
from src.constellation.models.places import (
    DealModel,
    LgaModel,
    OpportunityTypeModel,
)
from src.constellation.models.strategies import (
    SectorDevelopmentStrategyModel,
    SectorOpportunityModel,
    StrategyGradeModel,
)
from src.constellation.schemas.records import (
    Deal,
    EvidenceRef,
    Lga,
    LgaOpportunityHypothesis,
    Note,
    OpportunityType,
    SectorOpportunity,
    SelectionLogic,
    Strategy,
    StrategyGrade,
    StrategyGradeMissingElement,
)

logger = structlog.get_logger(__name__)

SECTION_IDS = tuple(str(i) for i in range(1, 11))
COMPONENT_IDS = tuple(str(i) for i in range(1, 7))

_DEAL_OPTIONS = (
    selectinload(DealModel.lgas),
    selectinload(DealModel.evidence),
    selectinload(DealModel.notes),
)

_LGA_OPTIONS = (
    selectinload(LgaModel.evidence),
    selectinload(LgaModel.opportunity_hypotheses),
    selectinload(LgaModel.deals),
)


# ── Serialization Helpers ───────────────────────────────────────────────────


def _evidence(rows) -> list[EvidenceRef]:
    return [EvidenceRef(label=e.label, url=e.url, page_ref=e.page_ref) for e in rows]


def _model_to_deal(model: DealModel) -> Deal:
    """Convert DealModel (with lgas, evidence, notes loaded) to a Deal record."""
    notes = sorted(model.notes, key=lambda n: n.created_at, reverse=True)
    return Deal(
        id=model.id,
        name=model.name,
        opportunity_type_id=model.opportunity_type_id,
        lga_ids=[link.lga_id for link in model.lgas],
        lat=model.lat,
        lng=model.lng,
        stage=stage_from_db(model.stage),
        readiness_state=readiness_from_db(model.readiness_state),
        dominant_constraint=constraint_from_db(model.dominant_constraint),
        summary=model.summary,
        next_step=model.next_step or "",
        evidence=_evidence(model.evidence),
        notes=[Note(id=n.id, content=n.content, created_at=n.created_at) for n in notes],
        updated_at=model.updated_at,
        description=model.description,
        investment_value_amount=model.investment_value_amount or 0.0,
        investment_value_description=model.investment_value_description or "",
        economic_impact_amount=model.economic_impact_amount or 0.0,
        economic_impact_description=model.economic_impact_description or "",
        economic_impact_jobs=model.economic_impact_jobs,
        key_stakeholders=list(model.key_stakeholders or []),
        risks=list(model.risks or []),
        strategic_actions=list(model.strategic_actions or []),
        infrastructure_needs=list(model.infrastructure_needs or []),
    )


def _model_to_lga(model: LgaModel) -> Lga:
    """Convert LgaModel (with evidence, hypotheses, deal links loaded) to an Lga record."""
    return Lga(
        id=model.id,
        name=model.name,
        geometry_ref=model.geometry_ref,
        summary=model.summary,
        notes=list(model.notes or []),
        repeated_constraints=constraints_from_db(model.repeated_constraints),
        opportunity_hypotheses=[
            LgaOpportunityHypothesis(
                id=h.id,
                name=h.name,
                summary=h.summary,
                dominant_constraint=(
                    constraint_from_db(h.dominant_constraint) if h.dominant_constraint else None
                ),
            )
            for h in model.opportunity_hypotheses
        ],
        active_deal_ids=[link.deal_id for link in model.deals],
        evidence=_evidence(model.evidence),
    )


def _model_to_opportunity_type(model: OpportunityTypeModel) -> OpportunityType:
    return OpportunityType(
        id=model.id,
        name=model.name,
        definition=model.definition or "",
        economic_function=model.economic_function or "",
        typical_capital_stack=model.typical_capital_stack or "",
        typical_risks=model.typical_risks or "",
    )


def _model_to_sector_opportunity(model: SectorOpportunityModel) -> SectorOpportunity:
    return SectorOpportunity(
        id=model.id,
        name=model.name,
        version=model.version,
        tags=list(model.tags or []),
        sections={sid: getattr(model, f"section_{sid}") or "" for sid in SECTION_IDS},
        sources=list(model.sources or []),
    )


def _model_to_strategy(model: SectorDevelopmentStrategyModel) -> Strategy:
    """Convert a strategy row; selection logic is omitted when none of its parts is set."""
    selection_logic = None
    if (
        model.selection_logic_adjacent_def
        or model.selection_logic_growth_def
        or model.selection_criteria
    ):
        selection_logic = SelectionLogic(
            adjacent_definition=model.selection_logic_adjacent_def,
            growth_definition=model.selection_logic_growth_def,
            criteria=list(model.selection_criteria or []),
        )

    return Strategy(
        id=model.id,
        title=model.title,
        type=model.type,
        status=model.status,
        source_document=model.source_document,
        summary=model.summary or "",
        extracted_text=model.extracted_text,
        components={cid: getattr(model, f"component_{cid}") or "" for cid in COMPONENT_IDS},
        selection_logic=selection_logic,
        cross_cutting_themes=list(model.cross_cutting_themes or []),
        stakeholder_categories=list(model.stakeholder_categories or []),
        priority_sector_ids=[ps.sector_opportunity_id for ps in model.priority_sectors],
    )


def _parse_missing_elements(raw: str | None) -> list[StrategyGradeMissingElement]:
    """Decode the JSON-encoded missing elements column; malformed data yields []."""
    try:
        items = json.loads(raw or "[]")
    except ValueError:
        logger.warning("strategy_grade.missing_elements_invalid_json")
        return []
    if not isinstance(items, list):
        return []

    elements = []
    for item in items:
        if not isinstance(item, dict):
            continue
        component_id = item.get("componentId", item.get("component_id"))
        reason = item.get("reason")
        if isinstance(component_id, str) and isinstance(reason, str):
            elements.append(StrategyGradeMissingElement(component_id=component_id, reason=reason))
    return elements


def _model_to_strategy_grade(model: StrategyGradeModel) -> StrategyGrade:
    evidence_notes = {}
    for cid in COMPONENT_IDS:
        note = getattr(model, f"evidence_comp_{cid}")
        if note:
            evidence_notes[cid] = note

    return StrategyGrade(
        id=model.id,
        strategy_id=model.strategy_id,
        grade_letter=grade_letter_from_db(model.grade_letter),
        grade_rationale_short=model.grade_rationale_short or "",
        evidence_notes_by_component=evidence_notes,
        missing_elements=_parse_missing_elements(model.missing_elements),
        scope_discipline_notes=model.scope_discipline_notes,
    )


# ── Repository ──────────────────────────────────────────────────────────────


class DataRepository:
    """Async read operations for places, deals, taxonomy and strategies.

    Args:
        session_factory: Async callable that yields AsyncSession instances.
    """

    def __init__(
        self, session_factory: Callable[..., AsyncGenerator[AsyncSession, None]]
    ) -> None:
        self._session_factory = session_factory

    # ── Places & Deals ──────────────────────────────────────────────────────

    async def load_lgas(self) -> list[Lga]:
        """Load all LGAs ordered by name."""
        async for session in self._session_factory():
            stmt = select(LgaModel).options(*_LGA_OPTIONS).order_by(LgaModel.name)
            result = await session.execute(stmt)
            return [_model_to_lga(m) for m in result.scalars().all()]

    async def load_lga_by_id(self, lga_id: str) -> Lga | None:
        async for session in self._session_factory():
            stmt = select(LgaModel).options(*_LGA_OPTIONS).where(LgaModel.id == lga_id)
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return _model_to_lga(model) if model is not None else None

    async def load_deals(self) -> list[Deal]:
        """Load all deals, most recently updated first."""
        async for session in self._session_factory():
            stmt = (
                select(DealModel)
                .options(*_DEAL_OPTIONS)
                .order_by(DealModel.updated_at.desc())
            )
            result = await session.execute(stmt)
            return [_model_to_deal(m) for m in result.scalars().all()]

    async def load_opportunity_types(self) -> list[OpportunityType]:
        """Load the opportunity taxonomy ordered by name."""
        async for session in self._session_factory():
            stmt = select(OpportunityTypeModel).order_by(OpportunityTypeModel.name)
            result = await session.execute(stmt)
            return [_model_to_opportunity_type(m) for m in result.scalars().all()]

    # ── Sector Opportunities ────────────────────────────────────────────────

    async def load_sector_opportunities(self) -> list[SectorOpportunity]:
        async for session in self._session_factory():
            stmt = select(SectorOpportunityModel).order_by(SectorOpportunityModel.name)
            result = await session.execute(stmt)
            return [_model_to_sector_opportunity(m) for m in result.scalars().all()]

    async def load_sector_opportunity_by_id(self, sector_id: str) -> SectorOpportunity | None:
        async for session in self._session_factory():
            stmt = select(SectorOpportunityModel).where(SectorOpportunityModel.id == sector_id)
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return _model_to_sector_opportunity(model) if model is not None else None

    # ── Strategies ──────────────────────────────────────────────────────────

    async def load_strategies(self) -> list[Strategy]:
        """Load all strategies ordered by title, with priority sectors."""
        async for session in self._session_factory():
            stmt = (
                select(SectorDevelopmentStrategyModel)
                .options(selectinload(SectorDevelopmentStrategyModel.priority_sectors))
                .order_by(SectorDevelopmentStrategyModel.title)
            )
            result = await session.execute(stmt)
            return [_model_to_strategy(m) for m in result.scalars().all()]

    async def load_strategy_by_id(self, strategy_id: str) -> Strategy | None:
        async for session in self._session_factory():
            stmt = (
                select(SectorDevelopmentStrategyModel)
                .options(selectinload(SectorDevelopmentStrategyModel.priority_sectors))
                .where(SectorDevelopmentStrategyModel.id == strategy_id)
            )
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return _model_to_strategy(model) if model is not None else None

    async def load_strategy_grades(self) -> list[StrategyGrade]:
        async for session in self._session_factory():
            result = await session.execute(select(StrategyGradeModel))
            return [_model_to_strategy_grade(m) for m in result.scalars().all()]

    async def load_strategy_grade(self, strategy_id: str) -> StrategyGrade | None:
        """Load the grade for one strategy, or None if it has not been graded."""
        async for session in self._session_factory():
            stmt = select(StrategyGradeModel).where(
                StrategyGradeModel.strategy_id == strategy_id
            )
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return _model_to_strategy_grade(model) if model is not None else None
