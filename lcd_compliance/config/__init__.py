"""
Rules Configuration Module.

Versioned, hot-reloadable terminology dictionaries for the wound classifier.
"""

from lcd_compliance.config.rules_loader import (
    RulesConfigProvider,
    RulesSnapshot,
    get_rules_provider,
    DEFAULT_CONFIG_ROOT,
    PROBLEM_MAP_FILE,
    WOUND_SYNONYM_FILE,
    ICD10_WOUND_FILE,
    LCD_TERMS_FILE,
)

__all__ = [
    "RulesConfigProvider",
    "RulesSnapshot",
    "get_rules_provider",
    "DEFAULT_CONFIG_ROOT",
    "PROBLEM_MAP_FILE",
    "WOUND_SYNONYM_FILE",
    "ICD10_WOUND_FILE",
    "LCD_TERMS_FILE",
]
