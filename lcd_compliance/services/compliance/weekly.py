"""
Weekly Compliance Assessor.

Medicare expects a documented wound assessment (with measurements) in
every ISO week of the episode. Weeks without one may be excused by a
valid clinician-documented exception.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Optional

from lcd_compliance.core.config import CompliancePolicy
from lcd_compliance.core.enums import (
    ACCEPTED_EXCEPTION_TYPES,
    ComplianceStatus,
    TrafficLight,
)
from lcd_compliance.schemas.clinical import DocumentedException
from lcd_compliance.schemas.compliance import WeeklyAssessmentSummary
from lcd_compliance.services.compliance.parsing import (
    coerce_encounters,
    coerce_exceptions,
    parse_wound_details,
)
from lcd_compliance.utils.iso_weeks import expected_weeks, week_identifier
from lcd_compliance.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class WeeklyComplianceResult:
    """Weekly documentation assessment."""

    required_weeks: list[str] = field(default_factory=list)
    documented_weeks: list[str] = field(default_factory=list)
    missing_weeks: list[str] = field(default_factory=list)  # Before exceptions
    missing_without_exceptions: list[str] = field(default_factory=list)
    valid_exceptions: list[DocumentedException] = field(default_factory=list)

    coverage: float = 100.0  # Documented weeks only
    effective_coverage: float = 100.0  # Documented weeks plus accepted exceptions

    status: ComplianceStatus = ComplianceStatus.COMPLIANT
    traffic_light: TrafficLight = TrafficLight.GREEN

    def to_summary(self) -> WeeklyAssessmentSummary:
        return WeeklyAssessmentSummary(
            required=len(self.required_weeks),
            documented=len(self.documented_weeks),
            missing=len(self.missing_without_exceptions),
            coverage=self.effective_coverage,
            missing_weeks=list(self.missing_without_exceptions),
            exceptions=list(self.valid_exceptions),
            status_with_exceptions=self.status,
        )


def select_valid_exceptions(
    exceptions: Iterable[DocumentedException],
    missing_weeks: Iterable[str],
) -> list[DocumentedException]:
    """
    Exceptions that excuse a missing week.

    An exception counts when it is flagged valid, targets a missing week and
    has an accepted type. At most one exception is honored per week; the
    first one wins.
    """
    missing = set(missing_weeks)
    accepted: dict[str, DocumentedException] = {}

    for exception in exceptions:
        if exception.is_valid_exception is not True:
            logger.debug(f"Exception for {exception.week} not flagged valid")
            continue
        if exception.type not in ACCEPTED_EXCEPTION_TYPES:
            logger.debug(f"Exception type {exception.type.value} does not excuse {exception.week}")
            continue
        if exception.week not in missing or exception.week in accepted:
            continue
        accepted[exception.week] = exception

    return list(accepted.values())


def assess_weekly_compliance(
    encounters: Iterable[Any],
    episode_start: date,
    as_of: date,
    documented_exceptions: Optional[Iterable[Any]] = None,
    policy: Optional[CompliancePolicy] = None,
) -> WeeklyComplianceResult:
    """
    Reconcile required ISO weeks against documented ones.

    Args:
        encounters: Encounter models or raw dicts
        episode_start: First day of the episode
        as_of: Evaluation date
        documented_exceptions: DocumentedException models or raw dicts
        policy: Policy constants (Medicare defaults when omitted)

    Returns:
        WeeklyComplianceResult
    """
    policy = policy or CompliancePolicy()

    required = expected_weeks(episode_start, as_of)
    required_set = set(required)

    documented: set[str] = set()
    for encounter in coerce_encounters(encounters):
        details = parse_wound_details(encounter.wound_details)
        if details is not None and details.has_measurement:
            documented.add(week_identifier(encounter.date))

    documented_required = sorted(documented & required_set)
    missing = [week for week in required if week not in documented]

    valid_exceptions = select_valid_exceptions(
        coerce_exceptions(documented_exceptions or []), missing
    )
    excepted = {exception.week for exception in valid_exceptions}
    missing_without_exceptions = [week for week in missing if week not in excepted]

    if required:
        coverage = len(documented_required) / len(required) * 100
        effective_coverage = min(
            100.0, (len(documented_required) + len(valid_exceptions)) / len(required) * 100
        )
    else:
        coverage = effective_coverage = 100.0

    if not missing_without_exceptions:
        if not valid_exceptions:
            status, light = ComplianceStatus.COMPLIANT, TrafficLight.GREEN
        else:
            status, light = ComplianceStatus.COMPLIANT_WITH_EXCEPTION, TrafficLight.YELLOW
    elif effective_coverage >= policy.weekly_at_risk_coverage_percent:
        status, light = ComplianceStatus.AT_RISK, TrafficLight.YELLOW
    else:
        status, light = ComplianceStatus.NON_COMPLIANT, TrafficLight.RED

    logger.debug(
        f"Weekly compliance: {len(documented_required)}/{len(required)} weeks documented, "
        f"{len(valid_exceptions)} excepted, status={status.value}"
    )

    return WeeklyComplianceResult(
        required_weeks=required,
        documented_weeks=documented_required,
        missing_weeks=missing,
        missing_without_exceptions=missing_without_exceptions,
        valid_exceptions=valid_exceptions,
        coverage=coverage,
        effective_coverage=effective_coverage,
        status=status,
        traffic_light=light,
    )
