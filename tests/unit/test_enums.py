"""
Unit tests for shared enumerations.
"""

import pytest

from lcd_compliance.core.enums import (
    ACCEPTED_EXCEPTION_TYPES,
    ComplianceStatus,
    EvidenceSource,
    ExceptionType,
    InterventionType,
    TrafficLight,
    WoundCategory,
)


@pytest.mark.unit
class TestEnums:
    """Tests for enum values used in serialized results."""

    def test_compliance_status_values(self):
        """Test status wire values."""
        assert [s.value for s in ComplianceStatus] == [
            "compliant",
            "compliant-with-exception",
            "at-risk",
            "non-compliant",
        ]

    def test_traffic_light_values(self):
        """Test signal wire values."""
        assert {t.value for t in TrafficLight} == {"green", "yellow", "red"}

    def test_wound_category_values(self):
        """Test category wire values."""
        assert WoundCategory("diabetic-foot") is WoundCategory.DIABETIC_FOOT
        assert WoundCategory("chronic_wound") is WoundCategory.CHRONIC_WOUND

    def test_evidence_source_values(self):
        """Test evidence wire values."""
        assert EvidenceSource("icd10-secondary") is EvidenceSource.ICD10_SECONDARY

    def test_other_exception_never_accepted(self):
        """Test OTHER is excluded from the accepted exception types."""
        assert ExceptionType.OTHER not in ACCEPTED_EXCEPTION_TYPES
        assert len(ACCEPTED_EXCEPTION_TYPES) == 4
        assert "inpatient-stay" in ACCEPTED_EXCEPTION_TYPES

    def test_intervention_type_tags(self):
        """Test the intervention tags the care matchers rely on."""
        assert {t.value for t in InterventionType} == {
            "offloading",
            "compression_therapy",
            "infection_management",
            "debridement",
            "education",
            "nutrition_counseling",
        }
