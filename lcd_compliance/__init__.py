"""
Medicare LCD Compliance Assessment Engine.

Determines whether a wound-care episode meets Medicare Local Coverage
Determination requirements for conservative care, weekly documentation,
wound area reduction and standard of care.
"""

from lcd_compliance.core.config import CompliancePolicy, load_policy_from_file
from lcd_compliance.core.enums import ComplianceStatus, TrafficLight, WoundCategory
from lcd_compliance.services.compliance import (
    MedicareComplianceService,
    assess_medicare_compliance,
    classify_wound,
    status_to_traffic_light,
)

__version__ = "1.0.0"

__all__ = [
    "CompliancePolicy",
    "ComplianceStatus",
    "MedicareComplianceService",
    "TrafficLight",
    "WoundCategory",
    "assess_medicare_compliance",
    "classify_wound",
    "load_policy_from_file",
    "status_to_traffic_light",
]
