"""
Medicare LCD Compliance Service.

Combines the wound classifier and the weekly, reduction and
standard-of-care assessors into one compliance determination:
- Overall status and traffic light
- Weighted 0-100 compliance score
- Critical gaps with matching recommendations
- Days remaining to the conservative-care deadline

The assessment is a pure function of the episode, its encounters, the
documented exceptions, the evaluation date and one rules snapshot.
"""

import math
from datetime import date, datetime
from typing import Any, Iterable, Optional, Union

from lcd_compliance.config.rules_loader import RulesConfigProvider, RulesSnapshot, get_rules_provider
from lcd_compliance.core.config import CompliancePolicy
from lcd_compliance.core.enums import ComplianceStatus, TrafficLight
from lcd_compliance.schemas.clinical import Episode
from lcd_compliance.schemas.compliance import MedicareComplianceResult, WoundClassification
from lcd_compliance.services.compliance.classifier import classify_wound
from lcd_compliance.services.compliance.parsing import coerce_encounters, coerce_exceptions
from lcd_compliance.services.compliance.reduction import WoundReductionResult, assess_wound_reduction
from lcd_compliance.services.compliance.standard_of_care import (
    StandardOfCareResult,
    assess_standard_of_care,
)
from lcd_compliance.services.compliance.weekly import WeeklyComplianceResult, assess_weekly_compliance
from lcd_compliance.utils.errors import RulesConfigError
from lcd_compliance.utils.iso_weeks import days_between
from lcd_compliance.utils.logging import get_logger

logger = get_logger(__name__)


_TRAFFIC_LIGHTS = {
    ComplianceStatus.COMPLIANT: TrafficLight.GREEN,
    ComplianceStatus.COMPLIANT_WITH_EXCEPTION: TrafficLight.YELLOW,
    ComplianceStatus.AT_RISK: TrafficLight.YELLOW,
    ComplianceStatus.NON_COMPLIANT: TrafficLight.RED,
}


def status_to_traffic_light(status: Union[ComplianceStatus, str]) -> TrafficLight:
    """
    Map a compliance status to its dashboard signal.

    Unknown statuses map to red.
    """
    try:
        return _TRAFFIC_LIGHTS[ComplianceStatus(status)]
    except ValueError:
        return TrafficLight.RED


# =============================================================================
# Gap Analysis
# =============================================================================


def _gaps_and_recommendations(
    days: int,
    classification: WoundClassification,
    weekly: WeeklyComplianceResult,
    reduction: WoundReductionResult,
    care: StandardOfCareResult,
    policy: CompliancePolicy,
) -> tuple[list[str], list[str]]:
    gaps: list[str] = []
    recommendations: list[str] = []

    if days < policy.conservative_care_days:
        gaps.append(
            f"Conservative care insufficient: {days} days ({policy.conservative_care_days} required)"
        )
        recommendations.append(
            f"Continue conservative care to meet Medicare {policy.conservative_care_days}-day requirement"
        )

    if weekly.status == ComplianceStatus.NON_COMPLIANT:
        gaps.append(f"Missing {len(weekly.missing_without_exceptions)} weeks of measurements")
        recommendations.append("Document wound assessments for all missing weeks")
    elif weekly.status == ComplianceStatus.COMPLIANT_WITH_EXCEPTION:
        recommendations.append("Review documented exceptions to ensure they meet Medicare guidelines")

    if classification.requires_offloading and care.offloading is False:
        gaps.append("CRITICAL: Offloading not documented for diabetic foot ulcer")
        recommendations.append("IMMEDIATE: Implement appropriate offloading strategy")

    if classification.requires_compression and care.compression is False:
        gaps.append("CRITICAL: Compression therapy not documented for venous leg ulcer")
        recommendations.append("IMMEDIATE: Initiate compression therapy per ABI results")

    if not reduction.is_in_window and not reduction.meets_threshold:
        gaps.append(
            f"Failed to achieve {policy.reduction_threshold_percent:g}% reduction "
            f"by {policy.reduction_window_days} days"
        )
        recommendations.append("Consider advanced therapy options per Medicare LCD")

    return gaps, recommendations


# =============================================================================
# Scoring
# =============================================================================


def calculate_compliance_score(
    days: int,
    weekly: WeeklyComplianceResult,
    reduction: WoundReductionResult,
    care: StandardOfCareResult,
    policy: Optional[CompliancePolicy] = None,
) -> int:
    """
    Four equally weighted components, rounded half up to 0-100.

    - Conservative care days, linear up to the required days
    - Effective weekly coverage
    - Standard-of-care elements met out of those required
    - Wound reduction against expected progress inside the window,
      against the threshold after it
    """
    policy = policy or CompliancePolicy()
    weight = policy.component_weight

    if days >= policy.conservative_care_days:
        days_component = weight
    else:
        days_component = max(0, days) / policy.conservative_care_days * weight

    weekly_component = weekly.effective_coverage / 100 * weight

    care_component = care.elements_met / care.elements_required * weight

    if reduction.is_in_window:
        expected_progress = (
            max(0, reduction.days_since_baseline)
            / policy.reduction_window_days
            * policy.reduction_threshold_percent
        )
        if expected_progress <= 0:
            reduction_component = weight
        else:
            reduction_component = min(weight, reduction.percentage / expected_progress * weight)
    elif reduction.meets_threshold:
        reduction_component = weight
    else:
        reduction_component = reduction.percentage / policy.reduction_threshold_percent * weight

    total = days_component + weekly_component + care_component + reduction_component
    return max(0, min(100, math.floor(total + 0.5)))


def _overall_status(gaps: list[str], weekly: WeeklyComplianceResult) -> ComplianceStatus:
    if not gaps and weekly.status == ComplianceStatus.COMPLIANT:
        return ComplianceStatus.COMPLIANT
    if weekly.status == ComplianceStatus.COMPLIANT_WITH_EXCEPTION:
        return ComplianceStatus.COMPLIANT_WITH_EXCEPTION
    if not gaps:
        return ComplianceStatus.AT_RISK
    return ComplianceStatus.NON_COMPLIANT


# =============================================================================
# Service
# =============================================================================


class MedicareComplianceService:
    """
    Medicare LCD compliance assessment.

    Usage:
        service = MedicareComplianceService()
        result = service.assess(episode, encounters, exceptions, as_of=date(2024, 1, 31))
        print(result.overall_status, result.score)
    """

    def __init__(
        self,
        rules_provider: Optional[RulesConfigProvider] = None,
        policy: Optional[CompliancePolicy] = None,
    ):
        """
        Initialize service.

        Args:
            rules_provider: Source of rules snapshots (shared provider when omitted)
            policy: Policy constants (from settings when omitted)
        """
        self.rules_provider = rules_provider or get_rules_provider()
        self.policy = policy or CompliancePolicy.from_settings()

    def rules_snapshot(self) -> RulesSnapshot:
        """Current rules snapshot; empty when the configuration is unavailable."""
        try:
            return self.rules_provider.snapshot()
        except RulesConfigError as e:
            logger.warning(f"Rules configuration unavailable, using built-in rules only: {e}")
            return RulesSnapshot.empty()

    def assess(
        self,
        episode: Union[Episode, dict[str, Any]],
        encounters: Iterable[Any],
        documented_exceptions: Optional[Iterable[Any]] = None,
        as_of: Optional[Union[date, datetime]] = None,
        rules: Optional[RulesSnapshot] = None,
    ) -> MedicareComplianceResult:
        """
        Assess an episode's Medicare LCD compliance.

        Args:
            episode: Episode model or raw dict
            encounters: Encounter models or raw dicts, any order
            documented_exceptions: DocumentedException models or raw dicts
            as_of: Evaluation date (today when omitted)
            rules: Rules snapshot (taken from the provider when omitted)

        Returns:
            MedicareComplianceResult
        """
        if not isinstance(episode, Episode):
            episode = Episode.model_validate(episode)
        if as_of is None:
            as_of = date.today()
        if rules is None:
            rules = self.rules_snapshot()

        policy = self.policy
        start = episode.episode_start_date
        encounter_list = coerce_encounters(encounters)
        exception_list = coerce_exceptions(documented_exceptions or [])

        days = days_between(start, as_of)

        classification = classify_wound(episode, rules)
        weekly = assess_weekly_compliance(encounter_list, start, as_of, exception_list, policy)
        reduction = assess_wound_reduction(encounter_list, start, as_of, policy)
        care = assess_standard_of_care(encounter_list, classification)

        gaps, recommendations = _gaps_and_recommendations(
            days, classification, weekly, reduction, care, policy
        )
        score = calculate_compliance_score(days, weekly, reduction, care, policy)
        status = _overall_status(gaps, weekly)

        logger.info(
            f"Compliance assessed for episode {episode.id}: status={status.value}, "
            f"score={score}, gaps={len(gaps)}, rules={rules.version}"
        )

        return MedicareComplianceResult(
            overall_status=status,
            traffic_light=status_to_traffic_light(status),
            score=score,
            conservative_care_days=days,
            evaluated_on=as_of.date() if isinstance(as_of, datetime) else as_of,
            wound_classification=classification,
            weekly_assessments=weekly.to_summary(),
            wound_reduction=reduction.to_summary(),
            standard_of_care=care.to_summary(),
            critical_gaps=gaps,
            recommendations=recommendations,
            days_to_deadline=max(0, policy.conservative_care_days - days),
            rules_version=rules.version,
        )


def assess_medicare_compliance(
    episode: Union[Episode, dict[str, Any]],
    encounters: Iterable[Any],
    documented_exceptions: Optional[Iterable[Any]] = None,
    as_of: Optional[Union[date, datetime]] = None,
    rules: Optional[RulesSnapshot] = None,
    policy: Optional[CompliancePolicy] = None,
) -> MedicareComplianceResult:
    """
    Assess an episode with the shared service, or a one-off service when
    a policy is given.
    """
    service = MedicareComplianceService(policy=policy) if policy is not None else get_compliance_service()
    return service.assess(episode, encounters, documented_exceptions, as_of=as_of, rules=rules)


# =============================================================================
# Factory Function
# =============================================================================


_compliance_service: Optional[MedicareComplianceService] = None


def get_compliance_service() -> MedicareComplianceService:
    """
    Get or create the shared compliance service.

    Returns:
        MedicareComplianceService instance
    """
    global _compliance_service

    if _compliance_service is None:
        _compliance_service = MedicareComplianceService()

    return _compliance_service
