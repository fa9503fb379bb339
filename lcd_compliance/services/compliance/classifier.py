"""
Wound Classifier.

Infers a WoundClassification from an episode's diagnosis codes and its
free-text wound type and location. Classification runs as an ordered
cascade of rules; the first rule that matches decides the category and
later steps run only while the wound is still unclassified:

1. Primary ICD-10 code (hard-coded prefix rules, then the rules snapshot)
2. Secondary ICD-10 codes, same rules, first match wins
3. Free-text wound type (full-thickness phrasing, pattern groups,
   configured synonym groups), defaulting to chronic_wound
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from lcd_compliance.config.rules_loader import RulesSnapshot
from lcd_compliance.core.enums import EvidenceSource, WoundCategory
from lcd_compliance.schemas.clinical import Episode
from lcd_compliance.schemas.compliance import WoundClassification
from lcd_compliance.utils.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Vocabulary
# =============================================================================


FOOT_KEYWORDS = ("foot", "toe", "heel")
LEG_KEYWORDS = ("leg", "ankle", "calf")

# Category keys used by the rules configuration files
CONFIG_CATEGORY_KEYS: dict[str, WoundCategory] = {
    "diabetic_foot_ulcer": WoundCategory.DIABETIC_FOOT,
    "venous_leg_ulcer": WoundCategory.VENOUS_LEG,
    "pressure_ulcer": WoundCategory.PRESSURE,
    "arterial_ulcer": WoundCategory.ARTERIAL,
    "chronic_wound": WoundCategory.CHRONIC_WOUND,
}

DFU_PATTERNS = tuple(
    re.compile(p)
    for p in (
        r"\bdfu\b",
        r"diabetic.*foot",
        r"foot.*diabetic",
        r"diabetic.*ulcer.*foot",
        r"plantar.*ulcer",
        r"toe.*ulcer.*diabet",
        r"heel.*ulcer.*diabet",
        r"diabetic.*ulcer",
        r"neuropathic.*ulcer",
    )
)

VLU_PATTERNS = tuple(
    re.compile(p)
    for p in (
        r"\bvlu\b",
        r"venous.*leg",
        r"leg.*venous",
        r"venous.*ulcer.*leg",
        r"stasis.*ulcer",
        r"chronic.*venous",
        r"lower.*leg.*ulcer",
        r"venous.*insufficiency",
        r"venous.*stasis",
    )
)

PRESSURE_PATTERNS = tuple(
    re.compile(p)
    for p in (
        r"pressure.*ulcer",
        r"decubitus",
        r"bed.*sore",
        r"pressure.*sore",
        r"stage.*[1-4]",
        r"sacral.*ulcer",
        r"heel.*pressure",
    )
)

ARTERIAL_PATTERNS = tuple(
    re.compile(p)
    for p in (
        r"arterial.*ulcer",
        r"ischemic.*ulcer",
        r"\bpad\b.*ulcer",
        r"peripheral.*arterial",
        r"arterial.*insufficiency",
    )
)

MIXED_ETIOLOGY_PATTERN = re.compile(r"\bmixed\b.*(arterial.*venous|venous.*arterial)")
FULL_THICKNESS_PATTERN = re.compile(r"full[- ]thickness")


# =============================================================================
# Rule Model
# =============================================================================


@dataclass(frozen=True)
class ClassificationInput:
    """Normalized classifier inputs for one rule evaluation."""

    code: str = ""  # Upper-cased ICD-10 code
    location: str = ""  # Lower-cased wound location
    wound_type: str = ""  # Lower-cased wound type


@dataclass(frozen=True)
class ClassificationRule:
    """One step of the cascade: a predicate and the category it yields."""

    name: str
    matches: Callable[[ClassificationInput], bool]
    outcome: Callable[[ClassificationInput], WoundCategory]


def _always(category: WoundCategory) -> Callable[[ClassificationInput], WoundCategory]:
    return lambda _: category


def _code_prefix(*prefixes: str) -> Callable[[ClassificationInput], bool]:
    return lambda ctx: ctx.code.startswith(prefixes)


def _any_pattern(patterns: Sequence[re.Pattern]) -> Callable[[ClassificationInput], bool]:
    return lambda ctx: any(p.search(ctx.wound_type) for p in patterns)


def _category_by_location(text: str) -> WoundCategory:
    """Foot sites suggest diabetic foot, leg sites venous leg."""
    if any(k in text for k in FOOT_KEYWORDS):
        return WoundCategory.DIABETIC_FOOT
    if any(k in text for k in LEG_KEYWORDS):
        return WoundCategory.VENOUS_LEG
    return WoundCategory.CHRONIC_WOUND


def _is_full_thickness(ctx: ClassificationInput) -> bool:
    return bool(FULL_THICKNESS_PATTERN.search(ctx.wound_type)) and (
        "ulcer" in ctx.wound_type or "wound" in ctx.wound_type
    )


# Hard-coded ICD-10 rules; L97 (non-pressure chronic ulcer) is resolved by site
ICD10_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        "diabetic-foot-code",
        _code_prefix("E10.6", "E11.6", "E13.6"),
        _always(WoundCategory.DIABETIC_FOOT),
    ),
    ClassificationRule(
        "venous-code",
        _code_prefix("I83.0", "I83.2", "I87"),
        _always(WoundCategory.VENOUS_LEG),
    ),
    ClassificationRule(
        "pressure-code",
        _code_prefix("L89"),
        _always(WoundCategory.PRESSURE),
    ),
    ClassificationRule(
        "non-pressure-chronic-ulcer-code",
        _code_prefix("L97"),
        lambda ctx: _category_by_location(ctx.location),
    ),
    ClassificationRule(
        "non-healing-surgical-wound-code",
        _code_prefix("L98.4"),
        _always(WoundCategory.CHRONIC_WOUND),
    ),
)

WOUND_TYPE_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        "full-thickness",
        _is_full_thickness,
        lambda ctx: _category_by_location(f"{ctx.location} {ctx.wound_type}"),
    ),
    ClassificationRule("diabetic-foot-text", _any_pattern(DFU_PATTERNS), _always(WoundCategory.DIABETIC_FOOT)),
    ClassificationRule("venous-text", _any_pattern(VLU_PATTERNS), _always(WoundCategory.VENOUS_LEG)),
    ClassificationRule("pressure-text", _any_pattern(PRESSURE_PATTERNS), _always(WoundCategory.PRESSURE)),
    ClassificationRule("arterial-text", _any_pattern(ARTERIAL_PATTERNS), _always(WoundCategory.ARTERIAL)),
)


def _first_match(
    rules: Sequence[ClassificationRule],
    ctx: ClassificationInput,
) -> Optional[WoundCategory]:
    for rule in rules:
        if rule.matches(ctx):
            logger.debug(f"Wound classification rule matched: {rule.name}")
            return rule.outcome(ctx)
    return None


# =============================================================================
# Classifier
# =============================================================================


class WoundClassifier:
    """
    Wound classification cascade bound to one rules snapshot.

    Usage:
        classifier = WoundClassifier(rules)
        classification = classifier.classify(episode)
    """

    def __init__(self, rules: Optional[RulesSnapshot] = None):
        self.rules = rules if rules is not None else RulesSnapshot.empty()

    def classify(
        self,
        episode: Episode,
        diagnosis_code: Optional[str] = None,
    ) -> WoundClassification:
        """
        Classify the episode's wound.

        Args:
            episode: Treatment episode
            diagnosis_code: Overrides the episode's primary diagnosis

        Returns:
            WoundClassification
        """
        location = (episode.wound_location or "").lower()
        wound_type = (episode.wound_type or "").lower()

        icd10_codes: list[str] = []
        category = WoundCategory.OTHER
        evidence = EvidenceSource.CLINICAL_ASSESSMENT

        primary = self.resolve_code(diagnosis_code or episode.primary_diagnosis or "")
        if primary:
            icd10_codes.append(primary)
            matched = self.classify_code(primary, location)
            if matched is not None:
                category, evidence = matched, EvidenceSource.ICD10_PRIMARY

        if category == WoundCategory.OTHER:
            for code in episode.secondary_diagnoses:
                code = self.resolve_code(code or "")
                if not code or code in icd10_codes:
                    continue
                icd10_codes.append(code)
                matched = self.classify_code(code, location)
                if matched is not None:
                    category, evidence = matched, EvidenceSource.ICD10_SECONDARY
                    break

        if category == WoundCategory.OTHER and wound_type:
            category = self.classify_text(wound_type, location)
            evidence = EvidenceSource.WOUND_TYPE_FIELD

        classification = _classification_for(category, evidence, icd10_codes)

        if MIXED_ETIOLOGY_PATTERN.search(wound_type):
            classification.is_vlu = True
            classification.is_arterial = True

        return classification

    def resolve_code(self, value: str) -> str:
        """Diagnosis recorded as a problem description maps to its ICD-10 code."""
        value = value.strip()
        if not value:
            return ""
        return self.rules.problem_code(value) or value

    def classify_code(self, code: str, location: str = "") -> Optional[WoundCategory]:
        """Category for one ICD-10 code, or None when no rule knows it."""
        ctx = ClassificationInput(code=code.strip().upper(), location=location.lower())
        category = _first_match(ICD10_RULES, ctx)
        if category is not None:
            return category

        key = self.rules.wound_category_for_code(ctx.code)
        if key is None:
            return None
        category = CONFIG_CATEGORY_KEYS.get(key)
        if category is None:
            logger.warning(f"Unknown wound category key in ICD-10 mappings: {key}")
        return category

    def classify_text(self, wound_type: str, location: str = "") -> WoundCategory:
        """Category from free-text wound type; never returns OTHER."""
        ctx = ClassificationInput(location=location.lower(), wound_type=wound_type.lower())
        category = _first_match(WOUND_TYPE_RULES, ctx)
        if category is not None:
            return category

        group = self.rules.synonym_group_for(ctx.wound_type)
        if group is not None and group in CONFIG_CATEGORY_KEYS:
            return CONFIG_CATEGORY_KEYS[group]

        return WoundCategory.CHRONIC_WOUND


def _classification_for(
    category: WoundCategory,
    evidence: EvidenceSource,
    icd10_codes: list[str],
) -> WoundClassification:
    return WoundClassification(
        is_dfu=category == WoundCategory.DIABETIC_FOOT,
        is_vlu=category == WoundCategory.VENOUS_LEG,
        is_pu=category == WoundCategory.PRESSURE,
        is_arterial=category == WoundCategory.ARTERIAL,
        category=category,
        requires_offloading=category == WoundCategory.DIABETIC_FOOT,
        requires_compression=category == WoundCategory.VENOUS_LEG,
        icd10_codes=icd10_codes,
        evidence_source=evidence,
    )


def classify_wound(
    episode: Episode,
    rules: Optional[RulesSnapshot] = None,
    diagnosis_code: Optional[str] = None,
) -> WoundClassification:
    """
    Classify an episode's wound.

    Args:
        episode: Treatment episode
        rules: Rules snapshot; hard-coded rules only when omitted
        diagnosis_code: Overrides the episode's primary diagnosis

    Returns:
        WoundClassification
    """
    return WoundClassifier(rules).classify(episode, diagnosis_code)
