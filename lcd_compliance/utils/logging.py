"""
Logging Configuration
Structured logging with loguru, driven by ComplianceSettings.
Source: https://github.com/Delgan/loguru
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from lcd_compliance.core.config import ComplianceSettings, get_compliance_settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(settings: Optional[ComplianceSettings] = None) -> None:
    """
    Configure engine logging from settings.

    Replaces any existing sinks with a stderr sink and, when LOG_FILE is
    set, a rotating file sink. JSON_LOGS serializes both sinks.

    Args:
        settings: Engine settings (process-wide settings when omitted)
    """
    settings = settings or get_compliance_settings()

    logger.remove()

    if settings.JSON_LOGS:
        logger.add(sys.stderr, format="{message}", level=settings.LOG_LEVEL, serialize=True)
    else:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=settings.LOG_LEVEL, colorize=True)

    if settings.LOG_FILE:
        Path(settings.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            settings.LOG_FILE,
            rotation=settings.LOG_ROTATION,
            retention=settings.LOG_RETENTION,
            compression="zip",
            format=FILE_FORMAT,
            level=settings.LOG_LEVEL,
            serialize=settings.JSON_LOGS,
        )

    logger.debug(
        f"Compliance engine logging configured: level={settings.LOG_LEVEL}, "
        f"file={settings.LOG_FILE or '-'}, json={settings.JSON_LOGS}"
    )


def get_logger(name: str = __name__):  # type: ignore[no-untyped-def]
    """
    Get a logger bound to a module name.

    Example:
        >>> from lcd_compliance.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Assessment started")
    """
    return logger.bind(name=name)
