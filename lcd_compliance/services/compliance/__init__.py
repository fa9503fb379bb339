"""
Medicare LCD compliance assessment.

Wound classification plus the weekly documentation, wound reduction and
standard-of-care assessors, combined by MedicareComplianceService.
"""

from lcd_compliance.services.compliance.classifier import (
    ClassificationRule,
    WoundClassifier,
    classify_wound,
)
from lcd_compliance.services.compliance.parsing import (
    parse_conservative_care,
    parse_wound_details,
)
from lcd_compliance.services.compliance.reduction import (
    WoundReductionResult,
    assess_wound_reduction,
    calculate_wound_area,
)
from lcd_compliance.services.compliance.service import (
    MedicareComplianceService,
    assess_medicare_compliance,
    calculate_compliance_score,
    get_compliance_service,
    status_to_traffic_light,
)
from lcd_compliance.services.compliance.standard_of_care import (
    StandardOfCareResult,
    assess_standard_of_care,
)
from lcd_compliance.services.compliance.weekly import (
    WeeklyComplianceResult,
    assess_weekly_compliance,
)

__all__ = [
    # Classification
    "ClassificationRule",
    "WoundClassifier",
    "classify_wound",
    # Parsing
    "parse_conservative_care",
    "parse_wound_details",
    # Assessors
    "WeeklyComplianceResult",
    "assess_weekly_compliance",
    "WoundReductionResult",
    "assess_wound_reduction",
    "calculate_wound_area",
    "StandardOfCareResult",
    "assess_standard_of_care",
    # Aggregation
    "MedicareComplianceService",
    "assess_medicare_compliance",
    "calculate_compliance_score",
    "get_compliance_service",
    "status_to_traffic_light",
]
