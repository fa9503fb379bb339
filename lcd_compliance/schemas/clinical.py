"""
Clinical Input Schemas.

Episode, encounter and documented-exception records handed to the
compliance engine. Field names follow Python conventions; the upstream
camelCase JSON keys are accepted as aliases.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from lcd_compliance.core.enums import ExceptionType


def _coerce_date(value: Any) -> Any:
    """Accept dates, datetimes and ISO strings (with or without time)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return value


class ClinicalModel(BaseModel):
    """Base for inbound clinical records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Nested Encounter Payloads
# =============================================================================


class WoundMeasurement(ClinicalModel):
    """Single wound measurement, centimetres."""

    length: Optional[float] = None
    width: Optional[float] = None
    depth: Optional[float] = None
    area: Optional[float] = None


class WoundDetails(ClinicalModel):
    """Parsed wound-details payload of an encounter."""

    measurements: Optional[WoundMeasurement] = None
    current_measurement: Optional[WoundMeasurement] = None
    location: Optional[str] = None
    wound_type: Optional[str] = None

    @property
    def has_measurement(self) -> bool:
        return self.measurements is not None or self.current_measurement is not None


class InterventionMedicareCompliance(ClinicalModel):
    """Medicare compliance sub-record of an intervention."""

    compliant: Optional[bool] = None
    notes: Optional[str] = None


class Intervention(ClinicalModel):
    """Conservative-care intervention."""

    id: Optional[str] = None
    type: Optional[str] = None
    name: Optional[str] = None
    start_date: Optional[date] = None
    medicare: Optional[InterventionMedicareCompliance] = None

    normalize_start_date = field_validator("start_date", mode="before")(_coerce_date)


class ConservativeCare(ClinicalModel):
    """Parsed conservative-care payload of an encounter."""

    interventions: list[Intervention] = Field(default_factory=list)


# =============================================================================
# Records
# =============================================================================


class Episode(ClinicalModel):
    """Wound-care treatment episode."""

    id: Optional[str] = None
    patient_id: Optional[str] = None
    wound_type: Optional[str] = None
    wound_location: Optional[str] = None
    primary_diagnosis: Optional[str] = None
    secondary_diagnoses: list[str] = Field(default_factory=list)
    episode_start_date: date
    episode_end_date: Optional[date] = None
    status: Optional[str] = None

    normalize_dates = field_validator(
        "episode_start_date", "episode_end_date", mode="before"
    )(_coerce_date)

    @field_validator("secondary_diagnoses", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class Encounter(ClinicalModel):
    """
    Clinical visit belonging to an episode.

    The nested payloads are kept raw; the compliance parsing helpers
    validate them so one malformed payload cannot abort an assessment.
    """

    id: Optional[str] = None
    episode_id: Optional[str] = None
    date: date
    wound_details: Any = None
    conservative_care: Any = None
    infection_status: Optional[str] = None
    comorbidities: list[str] = Field(default_factory=list)

    normalize_date = field_validator("date", mode="before")(_coerce_date)

    @field_validator("comorbidities", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class DocumentedException(ClinicalModel):
    """Clinician-asserted justification for a missing weekly assessment."""

    id: Optional[str] = None
    week: str = Field(..., description="ISO week identifier, e.g. '2024-W02'")
    type: ExceptionType
    reason: str = ""
    documented_by: Optional[str] = None
    documented_date: Optional[date] = None
    is_valid_exception: bool = False

    normalize_documented_date = field_validator("documented_date", mode="before")(_coerce_date)
