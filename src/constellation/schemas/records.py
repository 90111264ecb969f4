"""Pydantic read records handed from the data layer to the page layer.

These are the values the pages pass through to their components untouched:
- Places: Lga, LgaOpportunityHypothesis, EvidenceRef
- Deals: Deal, Note, OpportunityType
- Map: BoundaryFeature (one GeoJSON feature per LGA)
- Strategies: SectorOpportunity, Strategy, SelectionLogic, StrategyGrade

Enum-like values (stage, readiness, constraint, grade letter) use the
kebab-case display form; the DB form is mapped in data/enum_maps.py.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    """Immutable record base."""

    model_config = ConfigDict(frozen=True)


# ── Places ──────────────────────────────────────────────────────────────────


class EvidenceRef(_Record):
    label: str | None = None
    url: str | None = None
    page_ref: str | None = None


class LgaOpportunityHypothesis(_Record):
    id: str
    name: str
    summary: str | None = None
    dominant_constraint: str | None = None


class Lga(_Record):
    """Local Government Area with its panel content."""

    id: str
    name: str
    geometry_ref: str
    summary: str | None = None
    notes: list[str] = Field(default_factory=list)
    opportunity_hypotheses: list[LgaOpportunityHypothesis] = Field(default_factory=list)
    active_deal_ids: list[str] = Field(default_factory=list)
    repeated_constraints: list[str] = Field(default_factory=list)
    evidence: list[EvidenceRef] = Field(default_factory=list)


# ── Deals ───────────────────────────────────────────────────────────────────


class OpportunityType(_Record):
    id: str
    name: str
    definition: str = ""
    economic_function: str = ""
    typical_capital_stack: str = ""
    typical_risks: str = ""


class Note(_Record):
    id: str
    content: str
    created_at: datetime


class Deal(_Record):
    """Deal (project instance) as shown on search, map and detail views."""

    id: str
    name: str
    opportunity_type_id: str
    lga_ids: list[str] = Field(default_factory=list)
    lat: float | None = None
    lng: float | None = None
    stage: str
    readiness_state: str
    dominant_constraint: str
    summary: str
    next_step: str = ""
    evidence: list[EvidenceRef] = Field(default_factory=list)
    notes: list[Note] = Field(default_factory=list)
    updated_at: datetime | None = None
    description: str | None = None
    investment_value_amount: float = 0.0
    investment_value_description: str = ""
    economic_impact_amount: float = 0.0
    economic_impact_description: str = ""
    economic_impact_jobs: int | None = None
    key_stakeholders: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    strategic_actions: list[str] = Field(default_factory=list)
    infrastructure_needs: list[str] = Field(default_factory=list)


# ── Map ─────────────────────────────────────────────────────────────────────


class BoundaryFeature(_Record):
    """GeoJSON feature holding one LGA polygon."""

    type: Literal["Feature"] = "Feature"
    id: str | int | None = None
    properties: dict[str, Any] = Field(default_factory=dict)
    geometry: dict[str, Any]


# ── Strategies ──────────────────────────────────────────────────────────────


class SectorOpportunity(_Record):
    """Sector opportunity with its ten narrative sections keyed "1".."10"."""

    id: str
    name: str
    version: str = "1"
    tags: list[str] = Field(default_factory=list)
    sections: dict[str, str] = Field(default_factory=dict)
    sources: list[str] = Field(default_factory=list)


class SelectionLogic(_Record):
    adjacent_definition: str | None = None
    growth_definition: str | None = None
    criteria: list[str] = Field(default_factory=list)


class Strategy(_Record):
    """Sector development strategy with its six components keyed "1".."6"."""

    id: str
    title: str
    type: str = "sector_development_strategy"
    status: str = "published"
    source_document: str | None = None
    summary: str = ""
    extracted_text: str | None = None
    components: dict[str, str] = Field(default_factory=dict)
    selection_logic: SelectionLogic | None = None
    cross_cutting_themes: list[str] = Field(default_factory=list)
    stakeholder_categories: list[str] = Field(default_factory=list)
    priority_sector_ids: list[str] = Field(default_factory=list)


class StrategyGradeMissingElement(_Record):
    component_id: str
    reason: str


class StrategyGrade(_Record):
    id: str
    strategy_id: str
    grade_letter: str
    grade_rationale_short: str = ""
    evidence_notes_by_component: dict[str, str] = Field(default_factory=dict)
    missing_elements: list[StrategyGradeMissingElement] = Field(default_factory=list)
    scope_discipline_notes: str | None = None
