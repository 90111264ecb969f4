"""Maps between DB enum values (underscore_case) and display values (kebab-case).

Unknown values pass through unchanged.
"""

from __future__ import annotations

STAGE_FROM_DB: dict[str, str] = {
    "definition": "definition",
    "pre_feasibility": "pre-feasibility",
    "feasibility": "feasibility",
    "structuring": "structuring",
    "transaction_close": "transaction-close",
}

READINESS_FROM_DB: dict[str, str] = {
    "no_viable_projects": "no-viable-projects",
    "conceptual_interest": "conceptual-interest",
    "feasibility_underway": "feasibility-underway",
    "structurable_but_stalled": "structurable-but-stalled",
    "investable_with_minor_intervention": "investable-with-minor-intervention",
    "scaled_and_replicable": "scaled-and-replicable",
}

CONSTRAINT_FROM_DB: dict[str, str] = {
    "revenue_certainty": "revenue-certainty",
    "offtake_demand_aggregation": "offtake-demand-aggregation",
    "planning_and_approvals": "planning-and-approvals",
    "sponsor_capability": "sponsor-capability",
    "early_risk_capital": "early-risk-capital",
    "balance_sheet_constraints": "balance-sheet-constraints",
    "technology_risk": "technology-risk",
    "coordination_failure": "coordination-failure",
    "skills_and_workforce_constraint": "skills-and-workforce-constraint",
    "common_user_infrastructure_gap": "common-user-infrastructure-gap",
}

GRADE_FROM_DB: dict[str, str] = {
    "A": "A",
    "A_minus": "A-",
    "B": "B",
    "B_minus": "B-",
    "C": "C",
    "D": "D",
    "F": "F",
}


def stage_from_db(value: str) -> str:
    return STAGE_FROM_DB.get(value, value)


def readiness_from_db(value: str) -> str:
    return READINESS_FROM_DB.get(value, value)


def constraint_from_db(value: str) -> str:
    return CONSTRAINT_FROM_DB.get(value, value)


def constraints_from_db(values: list[str] | None) -> list[str]:
    return [constraint_from_db(v) for v in (values or [])]


def grade_letter_from_db(value: str) -> str:
    return GRADE_FROM_DB.get(value, value)
