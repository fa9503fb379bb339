"""
Standard-of-Care Assessor.

Checks conservative-care documentation for the care elements the LCD
expects. Offloading (diabetic foot) and compression (venous leg) are only
assessed when the wound classification requires them.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from lcd_compliance.core.enums import InterventionType
from lcd_compliance.schemas.clinical import Intervention
from lcd_compliance.schemas.compliance import StandardOfCareSummary, WoundClassification
from lcd_compliance.services.compliance.parsing import coerce_encounters, parse_conservative_care

OFFLOADING_NAME_TERMS = ("offloading", "tcc", "total contact cast", "boot")
COMPRESSION_NAME_TERMS = ("compression", "wrap", "bandage")
INFECTION_NAME_TERMS = ("antibiotic", "antiseptic")
EDUCATION_NAME_TERMS = ("education", "teaching")


@dataclass
class StandardOfCareResult:
    """Care elements found; None means not required."""

    offloading: Optional[bool] = None
    compression: Optional[bool] = None
    infection_control: bool = False
    patient_education: bool = False

    @property
    def elements_required(self) -> int:
        # Infection control and patient education always count
        return 2 + (self.offloading is not None) + (self.compression is not None)

    @property
    def elements_met(self) -> int:
        return sum(
            1
            for element in (
                self.offloading,
                self.compression,
                self.infection_control,
                self.patient_education,
            )
            if element is True
        )

    def to_summary(self) -> StandardOfCareSummary:
        return StandardOfCareSummary(
            offloading=self.offloading,
            compression=self.compression,
            infection_control=self.infection_control,
            patient_education=self.patient_education,
        )


def _type_of(intervention: Intervention) -> str:
    return (intervention.type or "").lower()


def _name_has(intervention: Intervention, terms: Iterable[str]) -> bool:
    name = (intervention.name or "").lower()
    return any(term in name for term in terms)


def is_offloading(intervention: Intervention) -> bool:
    return InterventionType.OFFLOADING.value in _type_of(intervention) or _name_has(
        intervention, OFFLOADING_NAME_TERMS
    )


def is_compression(intervention: Intervention) -> bool:
    return _type_of(intervention) == InterventionType.COMPRESSION_THERAPY.value or _name_has(
        intervention, COMPRESSION_NAME_TERMS
    )


def is_infection_control(intervention: Intervention) -> bool:
    kind = _type_of(intervention)
    return (
        kind == InterventionType.INFECTION_MANAGEMENT.value
        or InterventionType.DEBRIDEMENT.value in kind
        or _name_has(intervention, INFECTION_NAME_TERMS)
    )


def is_patient_education(intervention: Intervention) -> bool:
    return _type_of(intervention) in (
        InterventionType.EDUCATION.value,
        InterventionType.NUTRITION_COUNSELING.value,
    ) or _name_has(intervention, EDUCATION_NAME_TERMS)


def collect_interventions(encounters: Iterable[Any]) -> list[Intervention]:
    """Flatten interventions across all encounters' conservative care."""
    interventions: list[Intervention] = []
    for encounter in coerce_encounters(encounters):
        care = parse_conservative_care(encounter.conservative_care)
        if care is not None:
            interventions.extend(care.interventions)
    return interventions


def assess_standard_of_care(
    encounters: Iterable[Any],
    classification: WoundClassification,
) -> StandardOfCareResult:
    """
    Evaluate documented care elements for a classified wound.

    Args:
        encounters: Encounter models or raw dicts
        classification: Wound classification deciding which elements apply

    Returns:
        StandardOfCareResult
    """
    interventions = collect_interventions(encounters)

    offloading: Optional[bool] = None
    if classification.requires_offloading:
        offloading = any(is_offloading(i) for i in interventions)

    compression: Optional[bool] = None
    if classification.requires_compression:
        compression = any(is_compression(i) for i in interventions)

    return StandardOfCareResult(
        offloading=offloading,
        compression=compression,
        infection_control=any(is_infection_control(i) for i in interventions),
        patient_education=any(is_patient_education(i) for i in interventions),
    )
