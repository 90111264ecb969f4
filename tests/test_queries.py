"""Tests for the row -> record mappers in data/queries.py and the enum maps.

Rows are SimpleNamespace stand-ins for the ORM models, so no database is needed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

from src.constellation.data.enum_maps import constraint_from_db, grade_letter_from_db, stage_from_db
from src.constellation.data.queries import (
    _model_to_deal,
    _model_to_lga,
    _model_to_sector_opportunity,
    _model_to_strategy,
    _model_to_strategy_grade,
    _parse_missing_elements,
)


def _deal_row(**overrides) -> SimpleNamespace:
    values = dict(
        id="deal-1",
        name="Gladstone Hydrogen Hub",
        opportunity_type_id="renewable-energy",
        lgas=[SimpleNamespace(lga_id="lga-gladstone"), SimpleNamespace(lga_id="lga-banana")],
        lat=-23.84,
        lng=151.25,
        stage="pre_feasibility",
        readiness_state="feasibility_underway",
        dominant_constraint="revenue_certainty",
        summary="Export-scale electrolysis",
        next_step=None,
        evidence=[SimpleNamespace(label="Prospectus", url="https://example.com", page_ref="p4")],
        notes=[
            SimpleNamespace(id="n1", content="older", created_at=datetime(2025, 1, 1, tzinfo=timezone.utc)),
            SimpleNamespace(id="n2", content="newer", created_at=datetime(2025, 2, 1, tzinfo=timezone.utc)),
        ],
        updated_at=datetime(2025, 2, 2, tzinfo=timezone.utc),
        description=None,
        investment_value_amount=None,
        investment_value_description=None,
        economic_impact_amount=12.5,
        economic_impact_description="GRP uplift",
        economic_impact_jobs=300,
        key_stakeholders=None,
        risks=["Water supply"],
        strategic_actions=None,
        infrastructure_needs=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def _strategy_row(**overrides) -> SimpleNamespace:
    values = dict(
        id="strategy-1",
        title="Central West Strategy",
        type="sector_development_strategy",
        status="published",
        source_document=None,
        summary=None,
        extracted_text=None,
        selection_logic_adjacent_def=None,
        selection_logic_growth_def=None,
        selection_criteria=None,
        cross_cutting_themes=None,
        stakeholder_categories=None,
        priority_sectors=[SimpleNamespace(sector_opportunity_id="sector-b"), SimpleNamespace(sector_opportunity_id="sector-a")],
    )
    values.update({f"component_{i}": None for i in range(1, 7)})
    values.update(overrides)
    return SimpleNamespace(**values)


def _grade_row(**overrides) -> SimpleNamespace:
    values = dict(
        id="grade-1",
        strategy_id="strategy-1",
        grade_letter="A_minus",
        grade_rationale_short=None,
        missing_elements=None,
        scope_discipline_notes=None,
    )
    values.update({f"evidence_comp_{i}": None for i in range(1, 7)})
    values.update(overrides)
    return SimpleNamespace(**values)


# ── Deals ────────────────────────────────────────────────────────────────────


def test_deal_maps_enums_and_links():
    deal = _model_to_deal(_deal_row())

    assert deal.stage == "pre-feasibility"
    assert deal.readiness_state == "feasibility-underway"
    assert deal.dominant_constraint == "revenue-certainty"
    assert deal.lga_ids == ["lga-gladstone", "lga-banana"]
    assert deal.evidence[0].page_ref == "p4"


def test_deal_notes_newest_first_and_defaults():
    deal = _model_to_deal(_deal_row())

    assert [n.content for n in deal.notes] == ["newer", "older"]
    assert deal.next_step == ""
    assert deal.investment_value_amount == 0.0
    assert deal.key_stakeholders == []
    assert deal.economic_impact_jobs == 300


# ── LGAs ─────────────────────────────────────────────────────────────────────


def test_lga_maps_constraints_and_deal_ids():
    row = SimpleNamespace(
        id="lga-longreach",
        name="Longreach",
        geometry_ref="longreach",
        summary=None,
        notes=None,
        repeated_constraints=["coordination_failure", "something_new"],
        opportunity_hypotheses=[
            SimpleNamespace(id="h1", name="Solar", summary=None, dominant_constraint="technology_risk"),
            SimpleNamespace(id="h2", name="Beef", summary="x", dominant_constraint=None),
        ],
        deals=[SimpleNamespace(deal_id="deal-9")],
        evidence=[],
    )

    lga = _model_to_lga(row)

    assert lga.repeated_constraints == ["coordination-failure", "something_new"]
    assert lga.opportunity_hypotheses[0].dominant_constraint == "technology-risk"
    assert lga.opportunity_hypotheses[1].dominant_constraint is None
    assert lga.active_deal_ids == ["deal-9"]
    assert lga.notes == []


# ── Sectors and strategies ───────────────────────────────────────────────────


def test_sector_opportunity_sections_keyed_one_to_ten():
    row = SimpleNamespace(id="s", name="Space", version="2", tags=None, sources=None)
    for i in range(1, 11):
        setattr(row, f"section_{i}", f"text {i}" if i % 2 else None)

    sector = _model_to_sector_opportunity(row)

    assert list(sector.sections) == [str(i) for i in range(1, 11)]
    assert sector.sections["1"] == "text 1"
    assert sector.sections["2"] == ""


def test_strategy_without_selection_logic():
    strategy = _model_to_strategy(_strategy_row())

    assert strategy.selection_logic is None
    assert strategy.components == {str(i): "" for i in range(1, 7)}
    assert strategy.priority_sector_ids == ["sector-b", "sector-a"]


def test_strategy_with_partial_selection_logic():
    strategy = _model_to_strategy(_strategy_row(selection_criteria=["Export growth"]))

    assert strategy.selection_logic is not None
    assert strategy.selection_logic.criteria == ["Export growth"]
    assert strategy.selection_logic.adjacent_definition is None


def test_grade_letter_and_evidence_notes():
    grade = _model_to_strategy_grade(
        _grade_row(evidence_comp_2="Clear targets", evidence_comp_5="", missing_elements='[{"componentId": "3", "reason": "No budget"}]')
    )

    assert grade.grade_letter == "A-"
    assert grade.evidence_notes_by_component == {"2": "Clear targets"}
    assert grade.missing_elements[0].component_id == "3"
    assert grade.missing_elements[0].reason == "No budget"


def test_missing_elements_tolerates_bad_data():
    assert _parse_missing_elements(None) == []
    assert _parse_missing_elements("{not json") == []
    assert _parse_missing_elements('{"componentId": "1"}') == []
    parsed = _parse_missing_elements('[{"component_id": "4", "reason": "r"}, {"reason": "no id"}, 5]')
    assert [(m.component_id, m.reason) for m in parsed] == [("4", "r")]


# ── Enum maps ────────────────────────────────────────────────────────────────


def test_unknown_enum_values_pass_through():
    assert stage_from_db("transaction_close") == "transaction-close"
    assert stage_from_db("mystery_stage") == "mystery_stage"
    assert constraint_from_db("brand_new") == "brand_new"
    assert grade_letter_from_db("B_minus") == "B-"
    assert grade_letter_from_db("C") == "C"
