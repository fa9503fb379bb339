"""
Core Enumerations for the LCD Compliance Engine.

Status, signal and classification vocabularies shared by the assessors
and the compliance result schemas.
"""

from enum import Enum


# =============================================================================
# Compliance Outcome Enums
# =============================================================================


class ComplianceStatus(str, Enum):
    """Compliance determination status.

    Ordered from best to worst:
    COMPLIANT -> COMPLIANT_WITH_EXCEPTION -> AT_RISK -> NON_COMPLIANT
    """

    COMPLIANT = "compliant"
    COMPLIANT_WITH_EXCEPTION = "compliant-with-exception"
    AT_RISK = "at-risk"
    NON_COMPLIANT = "non-compliant"


class TrafficLight(str, Enum):
    """Summary signal rendered by dashboards."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


# =============================================================================
# Wound Classification Enums
# =============================================================================


class WoundCategory(str, Enum):
    """Single-label wound category."""

    DIABETIC_FOOT = "diabetic-foot"
    VENOUS_LEG = "venous-leg"
    PRESSURE = "pressure"
    ARTERIAL = "arterial"
    CHRONIC_WOUND = "chronic_wound"  # Recognized as a wound, uncategorized
    OTHER = "other"  # Unrecognized


class EvidenceSource(str, Enum):
    """Where a wound classification came from."""

    ICD10_PRIMARY = "icd10-primary"
    ICD10_SECONDARY = "icd10-secondary"
    WOUND_TYPE_FIELD = "wound-type-field"
    CLINICAL_ASSESSMENT = "clinical-assessment"  # Unclassified fallback


# =============================================================================
# Documentation Enums
# =============================================================================


class ExceptionType(str, Enum):
    """Clinician-asserted reason for a missing weekly assessment."""

    HOLIDAY = "holiday"
    INPATIENT_STAY = "inpatient-stay"
    MEDICAL_EMERGENCY = "medical-emergency"
    PATIENT_UNAVAILABLE = "patient-unavailable"
    OTHER = "other"


# Exception types that may excuse a missing week; OTHER never does.
ACCEPTED_EXCEPTION_TYPES = frozenset(
    {
        ExceptionType.HOLIDAY,
        ExceptionType.INPATIENT_STAY,
        ExceptionType.MEDICAL_EMERGENCY,
        ExceptionType.PATIENT_UNAVAILABLE,
    }
)


class InterventionType(str, Enum):
    """Well-known intervention type tags in conservative-care records.

    Upstream documentation is free to use other tags; offloading and
    debridement match as substrings, the rest exactly, ignoring case.
    """

    OFFLOADING = "offloading"
    COMPRESSION_THERAPY = "compression_therapy"
    INFECTION_MANAGEMENT = "infection_management"
    DEBRIDEMENT = "debridement"
    EDUCATION = "education"
    NUTRITION_COUNSELING = "nutrition_counseling"
