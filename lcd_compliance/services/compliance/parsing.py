"""
Encounter payload parsing.

Encounters store wound details and conservative care as raw JSON. These
helpers validate them into models and never raise: a payload that does
not match its schema is logged and treated as missing data.
"""

from typing import Any, Iterable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from lcd_compliance.schemas.clinical import (
    ConservativeCare,
    DocumentedException,
    Encounter,
    WoundDetails,
)
from lcd_compliance.utils.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse_payload(payload: Any, model: type[ModelT], label: str) -> Optional[ModelT]:
    if isinstance(payload, model):
        return payload
    if not payload:
        return None

    try:
        if isinstance(payload, (str, bytes)):
            return model.model_validate_json(payload)
        return model.model_validate(payload)
    except ValidationError as e:
        # Only field locations are logged, never payload content
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        logger.warning(f"Failed to parse {label}: invalid fields {fields}")
        return None


def parse_wound_details(payload: Any) -> Optional[WoundDetails]:
    """
    Parse an encounter's wound-details payload.

    Args:
        payload: Raw dict, JSON string or WoundDetails

    Returns:
        WoundDetails, or None when empty or malformed
    """
    return _parse_payload(payload, WoundDetails, "wound details")


def parse_conservative_care(payload: Any) -> Optional[ConservativeCare]:
    """
    Parse an encounter's conservative-care payload.

    Args:
        payload: Raw dict, JSON string or ConservativeCare

    Returns:
        ConservativeCare, or None when empty or malformed
    """
    return _parse_payload(payload, ConservativeCare, "conservative care")


def coerce_encounters(encounters: Iterable[Any]) -> list[Encounter]:
    """
    Validate encounter records, sorted by visit date.

    Records that are not encounters (no visit date, wrong shape) are
    logged and skipped.
    """
    parsed: list[Encounter] = []
    for index, record in enumerate(encounters or []):
        if isinstance(record, Encounter):
            parsed.append(record)
            continue
        try:
            parsed.append(Encounter.model_validate(record))
        except ValidationError as e:
            logger.warning(f"Skipping malformed encounter at position {index}: {e.error_count()} errors")

    return sorted(parsed, key=lambda enc: enc.date)


def coerce_exceptions(exceptions: Iterable[Any]) -> list[DocumentedException]:
    """Validate documented exceptions; malformed records are dropped."""
    parsed: list[DocumentedException] = []
    for record in exceptions or []:
        if isinstance(record, DocumentedException):
            parsed.append(record)
            continue
        try:
            parsed.append(DocumentedException.model_validate(record))
        except ValidationError:
            logger.debug("Ignoring malformed documented exception")

    return parsed
