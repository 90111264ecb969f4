"""Persistence models for places, deals, and the opportunity taxonomy.

- LgaModel: Local Government Area with evidence and opportunity hypotheses
- OpportunityTypeModel: taxonomy item classifying deals
- DealModel: project instance, linked to one or more LGAs via deal_lgas

Enum-like columns (stage, readiness_state, constraints) are stored in their
underscore DB form and mapped to kebab-case by the repository.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.constellation.core.database import Base


class LgaModel(Base):
    """Local Government Area (a place on the map)."""

    __tablename__ = "lgas"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    geometry_ref: Mapped[str] = mapped_column(String(200), nullable=False)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    repeated_constraints: Mapped[list[str]] = mapped_column(ARRAY(String(64)), default=list)

    evidence: Mapped[list[LgaEvidenceModel]] = relationship(
        back_populates="lga", cascade="all, delete-orphan"
    )
    opportunity_hypotheses: Mapped[list[LgaOpportunityHypothesisModel]] = relationship(
        back_populates="lga", cascade="all, delete-orphan"
    )
    deals: Mapped[list[DealLgaModel]] = relationship(back_populates="lga")


class LgaEvidenceModel(Base):
    __tablename__ = "lga_evidence"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    label: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    page_ref: Mapped[str | None] = mapped_column(String(100), nullable=True)
    lga_id: Mapped[str] = mapped_column(
        ForeignKey("lgas.id", ondelete="CASCADE"), nullable=False, index=True
    )

    lga: Mapped[LgaModel] = relationship(back_populates="evidence")


class LgaOpportunityHypothesisModel(Base):
    __tablename__ = "lga_opportunity_hypotheses"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(300), nullable=False)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    dominant_constraint: Mapped[str | None] = mapped_column(String(64), nullable=True)
    lga_id: Mapped[str] = mapped_column(
        ForeignKey("lgas.id", ondelete="CASCADE"), nullable=False, index=True
    )

    lga: Mapped[LgaModel] = relationship(back_populates="opportunity_hypotheses")


class OpportunityTypeModel(Base):
    """Opportunity taxonomy item (e.g. critical minerals, bioenergy)."""

    __tablename__ = "opportunity_types"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    definition: Mapped[str] = mapped_column(Text, default="", server_default="")
    economic_function: Mapped[str] = mapped_column(Text, default="", server_default="")
    typical_capital_stack: Mapped[str] = mapped_column(Text, default="", server_default="")
    typical_risks: Mapped[str] = mapped_column(Text, default="", server_default="")


class DealLgaModel(Base):
    """Association between a deal and the LGAs it sits in."""

    __tablename__ = "deal_lgas"

    deal_id: Mapped[str] = mapped_column(
        ForeignKey("deals.id", ondelete="CASCADE"), primary_key=True
    )
    lga_id: Mapped[str] = mapped_column(
        ForeignKey("lgas.id", ondelete="CASCADE"), primary_key=True, index=True
    )

    deal: Mapped[DealModel] = relationship(back_populates="lgas")
    lga: Mapped[LgaModel] = relationship(back_populates="deals")


class DealModel(Base):
    """Deal (project instance) tracked through the investment pathway."""

    __tablename__ = "deals"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(300), nullable=False)
    opportunity_type_id: Mapped[str] = mapped_column(
        ForeignKey("opportunity_types.id"), nullable=False, index=True
    )
    lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    stage: Mapped[str] = mapped_column(String(64), nullable=False)
    readiness_state: Mapped[str] = mapped_column(String(64), nullable=False)
    dominant_constraint: Mapped[str] = mapped_column(String(64), nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    next_step: Mapped[str] = mapped_column(Text, default="", server_default="")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    investment_value_amount: Mapped[float] = mapped_column(Float, default=0, server_default="0")
    investment_value_description: Mapped[str] = mapped_column(Text, default="", server_default="")
    economic_impact_amount: Mapped[float] = mapped_column(Float, default=0, server_default="0")
    economic_impact_description: Mapped[str] = mapped_column(Text, default="", server_default="")
    economic_impact_jobs: Mapped[int | None] = mapped_column(Integer, nullable=True)
    key_stakeholders: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    risks: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    strategic_actions: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    infrastructure_needs: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    lgas: Mapped[list[DealLgaModel]] = relationship(
        back_populates="deal", cascade="all, delete-orphan"
    )
    evidence: Mapped[list[DealEvidenceModel]] = relationship(
        back_populates="deal", cascade="all, delete-orphan"
    )
    notes: Mapped[list[DealNoteModel]] = relationship(
        back_populates="deal", cascade="all, delete-orphan"
    )


class DealEvidenceModel(Base):
    __tablename__ = "deal_evidence"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    label: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    page_ref: Mapped[str | None] = mapped_column(String(100), nullable=True)
    deal_id: Mapped[str] = mapped_column(
        ForeignKey("deals.id", ondelete="CASCADE"), nullable=False, index=True
    )

    deal: Mapped[DealModel] = relationship(back_populates="evidence")


class DealNoteModel(Base):
    __tablename__ = "deal_notes"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    deal_id: Mapped[str] = mapped_column(
        ForeignKey("deals.id", ondelete="CASCADE"), nullable=False, index=True
    )

    deal: Mapped[DealModel] = relationship(back_populates="notes")
