"""Persistence models for sector opportunities and development strategies.

Sector opportunities carry ten fixed narrative sections; strategies carry six
fixed components. Both are stored as numbered columns and reshaped into
keyed dicts by the repository.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.constellation.core.database import Base


class SectorOpportunityModel(Base):
    __tablename__ = "sector_opportunities"

    id: Mapped[str] = mapped_column(String(150), primary_key=True)
    name: Mapped[str] = mapped_column(String(300), nullable=False)
    version: Mapped[str] = mapped_column(String(20), default="1", server_default="1")
    tags: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    section_1: Mapped[str] = mapped_column(Text, default="", server_default="")
    section_2: Mapped[str] = mapped_column(Text, default="", server_default="")
    section_3: Mapped[str] = mapped_column(Text, default="", server_default="")
    section_4: Mapped[str] = mapped_column(Text, default="", server_default="")
    section_5: Mapped[str] = mapped_column(Text, default="", server_default="")
    section_6: Mapped[str] = mapped_column(Text, default="", server_default="")
    section_7: Mapped[str] = mapped_column(Text, default="", server_default="")
    section_8: Mapped[str] = mapped_column(Text, default="", server_default="")
    section_9: Mapped[str] = mapped_column(Text, default="", server_default="")
    section_10: Mapped[str] = mapped_column(Text, default="", server_default="")
    sources: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class SectorDevelopmentStrategyModel(Base):
    """An LGA's sector development strategy document, decomposed."""

    __tablename__ = "sector_development_strategies"

    id: Mapped[str] = mapped_column(String(150), primary_key=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    type: Mapped[str] = mapped_column(
        String(100),
        default="sector_development_strategy",
        server_default="sector_development_strategy",
    )
    status: Mapped[str] = mapped_column(String(32), default="published", server_default="published")
    source_document: Mapped[str | None] = mapped_column(Text, nullable=True)
    summary: Mapped[str] = mapped_column(Text, default="", server_default="")
    extracted_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    component_1: Mapped[str] = mapped_column(Text, default="", server_default="")
    component_2: Mapped[str] = mapped_column(Text, default="", server_default="")
    component_3: Mapped[str] = mapped_column(Text, default="", server_default="")
    component_4: Mapped[str] = mapped_column(Text, default="", server_default="")
    component_5: Mapped[str] = mapped_column(Text, default="", server_default="")
    component_6: Mapped[str] = mapped_column(Text, default="", server_default="")
    selection_logic_adjacent_def: Mapped[str | None] = mapped_column(Text, nullable=True)
    selection_logic_growth_def: Mapped[str | None] = mapped_column(Text, nullable=True)
    selection_criteria: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    cross_cutting_themes: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    stakeholder_categories: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    priority_sectors: Mapped[list[StrategySectorOpportunityModel]] = relationship(
        back_populates="strategy",
        cascade="all, delete-orphan",
        order_by="StrategySectorOpportunityModel.sort_order",
    )


class StrategySectorOpportunityModel(Base):
    __tablename__ = "strategy_sector_opportunities"

    strategy_id: Mapped[str] = mapped_column(
        ForeignKey("sector_development_strategies.id", ondelete="CASCADE"), primary_key=True
    )
    sector_opportunity_id: Mapped[str] = mapped_column(
        ForeignKey("sector_opportunities.id", ondelete="CASCADE"), primary_key=True
    )
    sort_order: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    strategy: Mapped[SectorDevelopmentStrategyModel] = relationship(
        back_populates="priority_sectors"
    )


class StrategyGradeModel(Base):
    """Quality grade assigned to a strategy (one per strategy)."""

    __tablename__ = "strategy_grades"

    id: Mapped[str] = mapped_column(String(150), primary_key=True)
    strategy_id: Mapped[str] = mapped_column(
        ForeignKey("sector_development_strategies.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    grade_letter: Mapped[str] = mapped_column(String(10), nullable=False)
    grade_rationale_short: Mapped[str] = mapped_column(Text, default="", server_default="")
    evidence_comp_1: Mapped[str | None] = mapped_column(Text, nullable=True)
    evidence_comp_2: Mapped[str | None] = mapped_column(Text, nullable=True)
    evidence_comp_3: Mapped[str | None] = mapped_column(Text, nullable=True)
    evidence_comp_4: Mapped[str | None] = mapped_column(Text, nullable=True)
    evidence_comp_5: Mapped[str | None] = mapped_column(Text, nullable=True)
    evidence_comp_6: Mapped[str | None] = mapped_column(Text, nullable=True)
    missing_elements: Mapped[str] = mapped_column(Text, default="[]", server_default="[]")
    scope_discipline_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
