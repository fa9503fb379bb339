"""
Pydantic Schemas for the LCD Compliance Engine.

Inbound clinical records and outbound compliance results.
"""

from lcd_compliance.schemas.clinical import (
    ConservativeCare,
    DocumentedException,
    Encounter,
    Episode,
    Intervention,
    InterventionMedicareCompliance,
    WoundDetails,
    WoundMeasurement,
)
from lcd_compliance.schemas.compliance import (
    MedicareComplianceResult,
    StandardOfCareSummary,
    WeeklyAssessmentSummary,
    WoundClassification,
    WoundReductionSummary,
)

__all__ = [
    # Clinical inputs
    "ConservativeCare",
    "DocumentedException",
    "Encounter",
    "Episode",
    "Intervention",
    "InterventionMedicareCompliance",
    "WoundDetails",
    "WoundMeasurement",
    # Results
    "MedicareComplianceResult",
    "StandardOfCareSummary",
    "WeeklyAssessmentSummary",
    "WoundClassification",
    "WoundReductionSummary",
]
