"""
Pydantic Schemas for Compliance Results.

Outbound records serialize with camelCase keys via
``model_dump(by_alias=True)``.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lcd_compliance.core.enums import (
    ComplianceStatus,
    EvidenceSource,
    TrafficLight,
    WoundCategory,
)
from lcd_compliance.schemas.clinical import DocumentedException


class ResultModel(BaseModel):
    """Base for outbound result records."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WoundClassification(ResultModel):
    """Derived wound classification. Flags are not mutually exclusive."""

    is_dfu: bool = Field(default=False, alias="isDFU")
    is_vlu: bool = Field(default=False, alias="isVLU")
    is_pu: bool = Field(default=False, alias="isPU")
    is_arterial: bool = False
    category: WoundCategory = WoundCategory.OTHER
    requires_offloading: bool = False
    requires_compression: bool = False
    icd10_codes: list[str] = Field(default_factory=list, alias="icd10Codes")
    evidence_source: EvidenceSource = EvidenceSource.CLINICAL_ASSESSMENT


class WeeklyAssessmentSummary(ResultModel):
    """Weekly documentation counts reported in the result."""

    required: int = 0
    documented: int = 0
    missing: int = 0  # Missing weeks not covered by an accepted exception
    coverage: float = 100.0  # Effective coverage, exceptions included
    missing_weeks: list[str] = Field(default_factory=list)
    exceptions: list[DocumentedException] = Field(default_factory=list)
    status_with_exceptions: ComplianceStatus = ComplianceStatus.COMPLIANT


class WoundReductionSummary(ResultModel):
    """Baseline vs. current wound area, square centimetres."""

    baseline: float = 0.0
    current: float = 0.0
    percentage: float = 0.0
    meets_threshold: bool = False
    days_since_baseline: int = 0
    is_in_28_day_window: bool = Field(default=True, alias="isIn28DayWindow")


class StandardOfCareSummary(ResultModel):
    """Care elements found in conservative-care documentation.

    ``offloading`` and ``compression`` are None when the wound
    classification does not require them.
    """

    offloading: Optional[bool] = None
    compression: Optional[bool] = None
    infection_control: bool = False
    patient_education: bool = False


class MedicareComplianceResult(ResultModel):
    """Composite Medicare LCD compliance determination for one episode."""

    overall_status: ComplianceStatus
    traffic_light: TrafficLight
    score: int = Field(..., ge=0, le=100)
    conservative_care_days: int
    evaluated_on: date
    wound_classification: WoundClassification
    weekly_assessments: WeeklyAssessmentSummary
    wound_reduction: WoundReductionSummary
    standard_of_care: StandardOfCareSummary
    critical_gaps: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    days_to_deadline: int = 0
    rules_version: str = "builtin"
