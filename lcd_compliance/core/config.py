"""
Compliance Engine Configuration
Settings for the Medicare LCD compliance assessment engine.
Source: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ComplianceSettings(BaseSettings):
    """
    Compliance engine configuration settings.

    Policy constants default to the Medicare wound-care LCD values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="COMPLIANCE_",  # All engine settings prefixed with COMPLIANCE_
    )

    # =========================================================================
    # Rules Configuration
    # =========================================================================
    RULES_CONFIG_ROOT: Optional[Path] = Field(
        default=None,
        description="Directory holding the versioned rules JSON files (bundled defaults when unset)",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    LOG_FILE: Optional[str] = Field(
        default=None,
        description="Optional log file path",
    )
    JSON_LOGS: bool = Field(
        default=False,
        description="Serialize log records as JSON",
    )
    LOG_ROTATION: str = Field(
        default="100 MB",
        description="Size or interval at which the log file rotates",
    )
    LOG_RETENTION: str = Field(
        default="30 days",
        description="How long rotated log files are kept",
    )

    # =========================================================================
    # Policy Constants
    # =========================================================================
    CONSERVATIVE_CARE_DAYS: int = Field(
        default=30,
        ge=1,
        description="Days of conservative care required before advanced therapy",
    )
    REDUCTION_WINDOW_DAYS: int = Field(
        default=28,
        ge=1,
        description="Response window for the wound area reduction check",
    )
    REDUCTION_THRESHOLD_PERCENT: float = Field(
        default=20.0,
        gt=0.0,
        le=100.0,
        description="Minimum area reduction inside the response window",
    )
    WEEKLY_AT_RISK_COVERAGE_PERCENT: float = Field(
        default=85.0,
        ge=0.0,
        le=100.0,
        description="Effective weekly coverage at or above which gaps are at-risk, not non-compliant",
    )
    COMPONENT_WEIGHT: float = Field(
        default=25.0,
        gt=0.0,
        le=25.0,
        description="Points per score component (four components)",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate log level."""
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level


class CompliancePolicy(BaseModel):
    """Policy constants applied to one assessment.

    Frozen so a policy can be shared between concurrent assessments.
    """

    model_config = ConfigDict(frozen=True)

    conservative_care_days: int = Field(default=30, ge=1)
    reduction_window_days: int = Field(default=28, ge=1)
    reduction_threshold_percent: float = Field(default=20.0, gt=0.0, le=100.0)
    weekly_at_risk_coverage_percent: float = Field(default=85.0, ge=0.0, le=100.0)
    component_weight: float = Field(default=25.0, gt=0.0, le=25.0)

    @classmethod
    def from_settings(cls, settings: Optional[ComplianceSettings] = None) -> "CompliancePolicy":
        """Build a policy from environment settings."""
        settings = settings or get_compliance_settings()
        return cls(
            conservative_care_days=settings.CONSERVATIVE_CARE_DAYS,
            reduction_window_days=settings.REDUCTION_WINDOW_DAYS,
            reduction_threshold_percent=settings.REDUCTION_THRESHOLD_PERCENT,
            weekly_at_risk_coverage_percent=settings.WEEKLY_AT_RISK_COVERAGE_PERCENT,
            component_weight=settings.COMPONENT_WEIGHT,
        )


def load_policy_from_file(path: str | Path) -> CompliancePolicy:
    """Load a payer/MAC specific policy from a YAML file.

    Keys not present in the file keep their Medicare defaults.

    Args:
        path: Path to the YAML policy file

    Returns:
        CompliancePolicy
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Policy file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return CompliancePolicy(**data)


# Singleton instance
_compliance_settings: Optional[ComplianceSettings] = None


def get_compliance_settings() -> ComplianceSettings:
    """
    Get cached compliance settings instance.

    Returns:
        ComplianceSettings instance
    """
    global _compliance_settings
    if _compliance_settings is None:
        _compliance_settings = ComplianceSettings()
    return _compliance_settings


def reset_compliance_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _compliance_settings
    _compliance_settings = None
