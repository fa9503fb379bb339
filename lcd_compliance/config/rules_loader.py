"""
Rules Configuration Provider.

Loads the versioned terminology dictionaries consumed by the wound
classifier:
- ICD-10 problem map (problem description -> ICD-10 code)
- Wound-type synonym groups
- ICD-10 code/prefix -> wound category
- LCD-specific terminology

Files are re-read when their modification time changes. Every call to
``snapshot()`` returns an immutable RulesSnapshot so an assessment never
observes a mix of old and new dictionary values.
"""

import hashlib
import json
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Annotated, Any, Mapping, Optional

from pydantic import BaseModel, Field, PositiveInt, StringConstraints, ValidationError

from lcd_compliance.core.config import get_compliance_settings
from lcd_compliance.utils.errors import (
    RulesConfigError,
    RulesConfigMissingError,
    RulesConfigParseError,
    RulesConfigValidationError,
)
from lcd_compliance.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_ROOT = Path(__file__).parent / "rules"

PROBLEM_MAP_VERSION = 1
WOUND_SYNONYM_VERSION = 1
ICD10_WOUND_VERSION = 1
LCD_TERMS_VERSION = 1

PROBLEM_MAP_FILE = f"icd10-problem-map.v{PROBLEM_MAP_VERSION}.json"
WOUND_SYNONYM_FILE = f"wound-type-synonyms.v{WOUND_SYNONYM_VERSION}.json"
ICD10_WOUND_FILE = f"icd10-wound-mappings.v{ICD10_WOUND_VERSION}.json"
LCD_TERMS_FILE = f"lcd-specific-terms.v{LCD_TERMS_VERSION}.json"

NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]


# =============================================================================
# File Schemas
# =============================================================================


class ProblemMapConfig(BaseModel):
    """icd10-problem-map file."""

    version: PositiveInt
    mappings: dict[str, str]


class WoundSynonymConfig(BaseModel):
    """wound-type-synonyms file."""

    version: PositiveInt
    synonyms: dict[str, Annotated[list[NonEmptyStr], Field(min_length=1)]]


class Icd10WoundConfig(BaseModel):
    """icd10-wound-mappings file."""

    version: PositiveInt
    mappings: dict[str, str]


class LcdTermsConfig(BaseModel):
    """lcd-specific-terms file."""

    version: PositiveInt
    terms: Annotated[list[NonEmptyStr], Field(min_length=1)]


# =============================================================================
# Snapshot
# =============================================================================


@dataclass(frozen=True)
class RulesSnapshot:
    """Immutable view of the rules dictionaries at one point in time."""

    version: str
    problem_icd10_mappings: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    wound_type_synonyms: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    icd10_wound_mappings: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    lcd_specific_terms: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> "RulesSnapshot":
        """Snapshot used when the provider is unavailable; hard-coded rules only."""
        return cls(version="builtin")

    @property
    def is_empty(self) -> bool:
        return not (
            self.problem_icd10_mappings
            or self.wound_type_synonyms
            or self.icd10_wound_mappings
            or self.lcd_specific_terms
        )

    def wound_category_for_code(self, code: str) -> Optional[str]:
        """
        Look up the wound category key for an ICD-10 code.

        Exact code first, then the longest configured prefix.
        """
        code = code.strip().upper()
        if not code:
            return None
        if code in self.icd10_wound_mappings:
            return self.icd10_wound_mappings[code]

        best: Optional[str] = None
        for prefix in self.icd10_wound_mappings:
            if code.startswith(prefix.upper()) and (best is None or len(prefix) > len(best)):
                best = prefix
        return self.icd10_wound_mappings[best] if best is not None else None

    def synonym_group_for(self, text: str) -> Optional[str]:
        """Return the first synonym group whose terms occur in ``text``."""
        text = text.lower()
        for group, terms in self.wound_type_synonyms.items():
            if any(term.lower() in text for term in terms):
                return group
        return None

    def problem_code(self, description: str) -> Optional[str]:
        """ICD-10 code for a problem description, case-insensitive."""
        return self.problem_icd10_mappings.get(description.strip().lower())

    def is_lcd_term(self, text: str) -> bool:
        """Whether ``text`` contains any LCD-specific term."""
        text = text.lower()
        return any(term.lower() in text for term in self.lcd_specific_terms)


# =============================================================================
# Provider
# =============================================================================


@dataclass
class _CacheEntry:
    data: Any
    stamp: tuple[int, int]  # (mtime_ns, size)
    digest: str


class RulesConfigProvider:
    """
    File-backed rules dictionary provider.

    Usage:
        provider = RulesConfigProvider()
        rules = provider.snapshot()
        rules.wound_category_for_code("I70.25")
    """

    def __init__(self, config_root: Optional[Path | str] = None):
        """
        Initialize provider.

        Args:
            config_root: Directory holding the rules files. Falls back to
                COMPLIANCE_RULES_CONFIG_ROOT, then the bundled defaults.
        """
        self._config_root = Path(config_root) if config_root is not None else None
        self._cache: dict[Path, _CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def config_root(self) -> Path:
        if self._config_root is not None:
            return self._config_root.resolve()
        override = get_compliance_settings().RULES_CONFIG_ROOT
        if override is not None and str(override).strip():
            return Path(override).resolve()
        return DEFAULT_CONFIG_ROOT

    def clear_cache(self) -> None:
        """Forget every cached file."""
        with self._lock:
            self._cache.clear()

    def get_problem_icd10_mappings(self) -> Mapping[str, str]:
        config = self._load(PROBLEM_MAP_FILE, ProblemMapConfig, PROBLEM_MAP_VERSION)
        return config.mappings

    def get_wound_type_synonyms(self) -> Mapping[str, tuple[str, ...]]:
        config = self._load(WOUND_SYNONYM_FILE, WoundSynonymConfig, WOUND_SYNONYM_VERSION)
        return config.synonyms

    def get_icd10_wound_mappings(self) -> Mapping[str, str]:
        config = self._load(ICD10_WOUND_FILE, Icd10WoundConfig, ICD10_WOUND_VERSION)
        return config.mappings

    def get_lcd_specific_terms(self) -> tuple[str, ...]:
        config = self._load(LCD_TERMS_FILE, LcdTermsConfig, LCD_TERMS_VERSION)
        return config.terms

    def snapshot(self) -> RulesSnapshot:
        """
        Build an immutable snapshot of all four dictionaries.

        Raises:
            RulesConfigError: If any file is missing, unparseable or invalid
        """
        root = self.config_root
        with self._lock:
            problem_map = self._load_locked(root, PROBLEM_MAP_FILE, ProblemMapConfig, PROBLEM_MAP_VERSION)
            synonyms = self._load_locked(root, WOUND_SYNONYM_FILE, WoundSynonymConfig, WOUND_SYNONYM_VERSION)
            icd10_wound = self._load_locked(root, ICD10_WOUND_FILE, Icd10WoundConfig, ICD10_WOUND_VERSION)
            lcd_terms = self._load_locked(root, LCD_TERMS_FILE, LcdTermsConfig, LCD_TERMS_VERSION)
            digests = [
                self._cache[root / name].digest
                for name in (PROBLEM_MAP_FILE, WOUND_SYNONYM_FILE, ICD10_WOUND_FILE, LCD_TERMS_FILE)
            ]

        version = "v1:" + hashlib.sha256("".join(digests).encode()).hexdigest()[:12]
        return RulesSnapshot(
            version=version,
            problem_icd10_mappings=problem_map.mappings,
            wound_type_synonyms=synonyms.synonyms,
            icd10_wound_mappings=icd10_wound.mappings,
            lcd_specific_terms=lcd_terms.terms,
        )

    def _load(self, filename: str, schema: type[BaseModel], expected_version: int) -> Any:
        with self._lock:
            return self._load_locked(self.config_root, filename, schema, expected_version)

    def _load_locked(
        self,
        root: Path,
        filename: str,
        schema: type[BaseModel],
        expected_version: int,
    ) -> Any:
        file_path = root / filename

        try:
            stats = os.stat(file_path)
        except FileNotFoundError:
            raise RulesConfigMissingError(file_path)
        except OSError as e:
            raise RulesConfigError(
                f"Unable to access rules configuration file: {file_path}",
                path=file_path,
                original_error=e,
            )

        stamp = (stats.st_mtime_ns, stats.st_size)
        cached = self._cache.get(file_path)
        if cached is not None and cached.stamp == stamp:
            return cached.data

        try:
            raw = file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise RulesConfigError(
                f"Unable to read rules configuration file: {file_path}",
                path=file_path,
                original_error=e,
            )

        try:
            parsed_json = json.loads(raw)
        except json.JSONDecodeError as e:
            raise RulesConfigParseError(file_path, e)

        try:
            parsed = schema.model_validate(parsed_json)
        except ValidationError as e:
            raise RulesConfigValidationError(file_path, "Schema validation error", e)

        if parsed.version != expected_version:
            raise RulesConfigValidationError(
                file_path,
                f"Expected version {expected_version} but found {parsed.version}",
            )

        data = _freeze(parsed)
        self._cache[file_path] = _CacheEntry(
            data=data,
            stamp=stamp,
            digest=hashlib.sha256(raw.encode("utf-8")).hexdigest(),
        )
        logger.debug(f"Loaded rules configuration {file_path} (version {parsed.version})")
        return data


@dataclass(frozen=True)
class _FrozenConfig:
    version: int
    mappings: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    synonyms: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))
    terms: tuple[str, ...] = ()


def _freeze(config: BaseModel) -> _FrozenConfig:
    """Copy a validated file into read-only containers."""
    if isinstance(config, WoundSynonymConfig):
        return _FrozenConfig(
            version=config.version,
            synonyms=MappingProxyType({k: tuple(v) for k, v in config.synonyms.items()}),
        )
    if isinstance(config, LcdTermsConfig):
        return _FrozenConfig(version=config.version, terms=tuple(config.terms))
    return _FrozenConfig(
        version=config.version,
        mappings=MappingProxyType(dict(config.mappings)),
    )


# =============================================================================
# Factory Function
# =============================================================================


_rules_provider: Optional[RulesConfigProvider] = None


def get_rules_provider() -> RulesConfigProvider:
    """
    Get or create the shared rules provider.

    Returns:
        RulesConfigProvider instance
    """
    global _rules_provider

    if _rules_provider is None:
        _rules_provider = RulesConfigProvider()

    return _rules_provider
