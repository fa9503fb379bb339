"""
Custom Exceptions
Rules configuration error hierarchy.
"""

from pathlib import Path
from typing import Optional


class RulesConfigError(Exception):
    """Base exception for rules configuration errors."""

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.path = path
        self.original_error = original_error


class RulesConfigMissingError(RulesConfigError):
    """Raised when a rules configuration file does not exist."""

    def __init__(self, path: Path):
        super().__init__(f"Rules configuration file not found: {path}", path=path)


class RulesConfigParseError(RulesConfigError):
    """Raised when a rules configuration file is not valid JSON."""

    def __init__(self, path: Path, original_error: Optional[Exception] = None):
        super().__init__(
            f"Unable to parse rules configuration file: {path}",
            path=path,
            original_error=original_error,
        )


class RulesConfigValidationError(RulesConfigError):
    """Raised when a rules configuration file fails schema or version checks."""

    def __init__(
        self,
        path: Path,
        details: str,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            f"Rules configuration validation failed for {path}: {details}",
            path=path,
            original_error=original_error,
        )
