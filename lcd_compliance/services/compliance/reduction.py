"""
Wound Reduction Assessor.

Medicare expects at least 20% wound area reduction within 28 days of
conservative care before advanced therapy is considered.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional

from lcd_compliance.core.config import CompliancePolicy
from lcd_compliance.schemas.clinical import WoundDetails, WoundMeasurement
from lcd_compliance.schemas.compliance import WoundReductionSummary
from lcd_compliance.services.compliance.parsing import coerce_encounters, parse_wound_details
from lcd_compliance.utils.iso_weeks import days_between
from lcd_compliance.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class WoundReductionResult:
    """Baseline vs. current wound area."""

    baseline: float = 0.0
    current: float = 0.0
    percentage: float = 0.0
    meets_threshold: bool = False
    days_since_baseline: int = 0
    is_in_window: bool = True

    def to_summary(self) -> WoundReductionSummary:
        return WoundReductionSummary(
            baseline=self.baseline,
            current=self.current,
            percentage=self.percentage,
            meets_threshold=self.meets_threshold,
            days_since_baseline=self.days_since_baseline,
            is_in_28_day_window=self.is_in_window,
        )


def calculate_wound_area(measurement: Optional[WoundMeasurement]) -> float:
    """
    Wound area in square centimetres.

    Uses the recorded area when positive, otherwise length x width when
    both are positive, otherwise 0.
    """
    if measurement is None:
        return 0.0
    if measurement.area is not None and measurement.area > 0:
        return measurement.area
    if measurement.length and measurement.width and measurement.length > 0 and measurement.width > 0:
        return measurement.length * measurement.width
    return 0.0


def encounter_area(details: Optional[WoundDetails]) -> float:
    """Area for one encounter; historical record first, then current."""
    if details is None:
        return 0.0
    area = calculate_wound_area(details.measurements)
    if area > 0:
        return area
    return calculate_wound_area(details.current_measurement)


def assess_wound_reduction(
    encounters: Iterable[Any],
    episode_start: date,
    as_of: date,
    policy: Optional[CompliancePolicy] = None,
) -> WoundReductionResult:
    """
    Compare the earliest and latest measured wound areas.

    Args:
        encounters: Encounter models or raw dicts, any order
        episode_start: First day of the episode
        as_of: Evaluation date
        policy: Policy constants (Medicare defaults when omitted)

    Returns:
        WoundReductionResult
    """
    policy = policy or CompliancePolicy()
    cutoff = as_of.date() if isinstance(as_of, datetime) else as_of
    days_since_baseline = days_between(episode_start, as_of)

    # Visits after the evaluation date are not part of this assessment
    areas = [
        area
        for area in (
            encounter_area(parse_wound_details(encounter.wound_details))
            for encounter in coerce_encounters(encounters)
            if encounter.date <= cutoff
        )
        if area > 0
    ]

    if not areas:
        # Unmeasured: window stays open, progress still expected
        return WoundReductionResult(days_since_baseline=days_since_baseline)

    baseline, current = areas[0], areas[-1]
    percentage = max(0.0, (baseline - current) * 100 / baseline)

    logger.debug(
        f"Wound reduction: baseline={baseline} current={current} "
        f"reduction={percentage:.1f}% over {days_since_baseline} days"
    )

    return WoundReductionResult(
        baseline=baseline,
        current=current,
        percentage=percentage,
        meets_threshold=percentage >= policy.reduction_threshold_percent,
        days_since_baseline=days_since_baseline,
        is_in_window=days_since_baseline <= policy.reduction_window_days,
    )
