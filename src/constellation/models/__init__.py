"""SQLAlchemy models. Importing this package registers every table on Base.metadata."""

from src.constellation.models.access import AllowedEmailModel, AuthAuditEventModel
from src.constellation.models.places import (
    DealEvidenceModel,
    DealLgaModel,
    DealModel,
    DealNoteModel,
    LgaEvidenceModel,
    LgaModel,
    LgaOpportunityHypothesisModel,
    OpportunityTypeModel,
)
from src.constellation.models.strategies import (
    SectorDevelopmentStrategyModel,
    SectorOpportunityModel,
    StrategyGradeModel,
    StrategySectorOpportunityModel,
)

__all__ = [
    "AllowedEmailModel",
    "AuthAuditEventModel",
    "DealEvidenceModel",
    "DealLgaModel",
    "DealModel",
    "DealNoteModel",
    "LgaEvidenceModel",
    "LgaModel",
    "LgaOpportunityHypothesisModel",
    "OpportunityTypeModel",
    "SectorDevelopmentStrategyModel",
    "SectorOpportunityModel",
    "StrategyGradeModel",
    "StrategySectorOpportunityModel",
]
