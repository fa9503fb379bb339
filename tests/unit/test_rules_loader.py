"""
Unit tests for the rules configuration provider.
"""

import json
import os
from pathlib import Path

import pytest

from lcd_compliance.config.rules_loader import (
    DEFAULT_CONFIG_ROOT,
    ICD10_WOUND_FILE,
    LCD_TERMS_FILE,
    PROBLEM_MAP_FILE,
    WOUND_SYNONYM_FILE,
    RulesConfigProvider,
    RulesSnapshot,
    get_rules_provider,
)
from lcd_compliance.utils.errors import (
    RulesConfigError,
    RulesConfigMissingError,
    RulesConfigParseError,
    RulesConfigValidationError,
)


def write_json(path: Path, data) -> None:
    """Write a rules file and move its mtime forward."""
    path.write_text(json.dumps(data), encoding="utf-8")
    stat = path.stat()
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 5_000_000_000))


# =============================================================================
# Snapshot
# =============================================================================


@pytest.mark.unit
class TestRulesSnapshot:
    """Tests for RulesSnapshot lookups."""

    def test_bundled_files_load(self, rules_snapshot: RulesSnapshot):
        """Test the bundled defaults load into a versioned snapshot."""
        assert rules_snapshot.version.startswith("v1:")
        assert not rules_snapshot.is_empty
        assert rules_snapshot.icd10_wound_mappings["E11.621"] == "diabetic_foot_ulcer"

    def test_wound_category_exact_then_prefix(self, rules_snapshot: RulesSnapshot):
        """Test exact codes win, then the longest configured prefix."""
        assert rules_snapshot.wound_category_for_code("L98.4") == "chronic_wound"
        assert rules_snapshot.wound_category_for_code("l89.154") == "pressure_ulcer"
        assert rules_snapshot.wound_category_for_code("I70.449") == "arterial_ulcer"
        assert rules_snapshot.wound_category_for_code("Z00.00") is None
        assert rules_snapshot.wound_category_for_code("  ") is None

    def test_synonym_group(self, rules_snapshot: RulesSnapshot):
        """Test synonym group lookup is case-insensitive substring."""
        assert rules_snapshot.synonym_group_for("Chronic STASIS ULCER, left") == "venous_leg_ulcer"
        assert rules_snapshot.synonym_group_for("laceration") is None

    def test_problem_code(self, rules_snapshot: RulesSnapshot):
        """Test problem description lookup."""
        assert rules_snapshot.problem_code(" Diabetic Foot Ulcer ") == "E11.621"
        assert rules_snapshot.problem_code("sprained ankle") is None

    def test_lcd_terms(self, rules_snapshot: RulesSnapshot):
        """Test LCD terminology detection."""
        assert rules_snapshot.is_lcd_term("Application of Skin Substitute graft, 25 sq cm")
        assert not rules_snapshot.is_lcd_term("routine follow up")

    def test_snapshot_is_read_only(self, rules_snapshot: RulesSnapshot):
        """Test snapshot mappings cannot be modified."""
        with pytest.raises(TypeError):
            rules_snapshot.icd10_wound_mappings["E11.621"] = "pressure_ulcer"  # type: ignore[index]
        with pytest.raises(AttributeError):
            rules_snapshot.version = "changed"  # type: ignore[misc]

    def test_empty_snapshot(self):
        """Test the fallback snapshot."""
        empty = RulesSnapshot.empty()
        assert empty.version == "builtin"
        assert empty.is_empty
        assert empty.wound_category_for_code("E11.621") is None
        assert empty.synonym_group_for("dfu") is None


# =============================================================================
# Provider
# =============================================================================


@pytest.mark.unit
class TestRulesConfigProvider:
    """Tests for file loading, caching and validation."""

    def test_default_root(self):
        """Test the bundled directory is used by default."""
        assert RulesConfigProvider().config_root == DEFAULT_CONFIG_ROOT

    def test_environment_override(self, rules_dir: Path, monkeypatch):
        """Test COMPLIANCE_RULES_CONFIG_ROOT selects the directory."""
        monkeypatch.setenv("COMPLIANCE_RULES_CONFIG_ROOT", str(rules_dir))
        assert RulesConfigProvider().config_root == rules_dir.resolve()

    def test_getters(self, rules_dir: Path):
        """Test individual dictionary getters."""
        provider = RulesConfigProvider(rules_dir)
        assert provider.get_problem_icd10_mappings()["vlu"] == "I87.2"
        assert "dfu" in provider.get_wound_type_synonyms()["diabetic_foot_ulcer"]
        assert provider.get_icd10_wound_mappings()["L89"] == "pressure_ulcer"
        assert "offloading" in provider.get_lcd_specific_terms()

    def test_unchanged_file_served_from_cache(self, rules_dir: Path):
        """Test an unchanged file is not re-read."""
        provider = RulesConfigProvider(rules_dir)
        assert provider.get_icd10_wound_mappings() is provider.get_icd10_wound_mappings()

    def test_modified_file_reloaded(self, rules_dir: Path):
        """Test a changed file is picked up without touching old snapshots."""
        provider = RulesConfigProvider(rules_dir)
        before = provider.snapshot()

        write_json(
            rules_dir / ICD10_WOUND_FILE,
            {"version": 1, "mappings": {"E11.621": "pressure_ulcer"}},
        )
        after = provider.snapshot()

        assert after.icd10_wound_mappings == {"E11.621": "pressure_ulcer"}
        assert before.icd10_wound_mappings["E11.621"] == "diabetic_foot_ulcer"
        assert after.version != before.version

    def test_same_content_same_version(self, rules_dir: Path):
        """Test the version tag depends on file content only."""
        first = RulesConfigProvider(rules_dir).snapshot()
        second = RulesConfigProvider(DEFAULT_CONFIG_ROOT).snapshot()
        assert first.version == second.version

    def test_clear_cache(self, rules_dir: Path):
        """Test clearing the cache forces a re-read."""
        provider = RulesConfigProvider(rules_dir)
        first = provider.get_lcd_specific_terms()
        provider.clear_cache()
        second = provider.get_lcd_specific_terms()
        assert first == second
        assert first is not second

    def test_missing_file(self, rules_dir: Path):
        """Test a missing file raises RulesConfigMissingError."""
        (rules_dir / LCD_TERMS_FILE).unlink()
        with pytest.raises(RulesConfigMissingError) as exc_info:
            RulesConfigProvider(rules_dir).snapshot()
        assert exc_info.value.path == rules_dir.resolve() / LCD_TERMS_FILE

    def test_invalid_json(self, rules_dir: Path):
        """Test unparseable JSON raises RulesConfigParseError."""
        (rules_dir / PROBLEM_MAP_FILE).write_text("{not json", encoding="utf-8")
        with pytest.raises(RulesConfigParseError) as exc_info:
            RulesConfigProvider(rules_dir).get_problem_icd10_mappings()
        assert isinstance(exc_info.value.original_error, json.JSONDecodeError)

    def test_version_mismatch(self, rules_dir: Path):
        """Test a file with another version raises RulesConfigValidationError."""
        write_json(rules_dir / ICD10_WOUND_FILE, {"version": 2, "mappings": {}})
        with pytest.raises(RulesConfigValidationError, match="Expected version 1 but found 2"):
            RulesConfigProvider(rules_dir).get_icd10_wound_mappings()

    @pytest.mark.parametrize(
        "data",
        [
            {"version": 1, "synonyms": {"diabetic_foot_ulcer": []}},
            {"version": 1, "synonyms": {"diabetic_foot_ulcer": [""]}},
            {"version": 1},
            {"version": 0, "synonyms": {}},
        ],
    )
    def test_schema_validation(self, rules_dir: Path, data):
        """Test schema violations raise RulesConfigValidationError."""
        write_json(rules_dir / WOUND_SYNONYM_FILE, data)
        with pytest.raises(RulesConfigValidationError):
            RulesConfigProvider(rules_dir).get_wound_type_synonyms()

    def test_error_hierarchy(self):
        """Test every loader error is a RulesConfigError."""
        for error in (RulesConfigMissingError, RulesConfigParseError, RulesConfigValidationError):
            assert issubclass(error, RulesConfigError)

    def test_shared_provider(self):
        """Test the factory returns a single shared provider."""
        assert get_rules_provider() is get_rules_provider()
