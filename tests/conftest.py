"""
Pytest Configuration and Fixtures.
Shared test fixtures for all test modules.
"""

import shutil
from pathlib import Path
from typing import Any, Optional

import pytest

from lcd_compliance.config.rules_loader import DEFAULT_CONFIG_ROOT, RulesConfigProvider, RulesSnapshot
from lcd_compliance.core.config import reset_compliance_settings


def make_episode(**overrides: Any) -> dict[str, Any]:
    """Build a raw episode record in the upstream camelCase shape."""
    episode = {
        "id": "episode-1",
        "patientId": "patient-1",
        "woundType": "DFU",
        "woundLocation": "foot",
        "primaryDiagnosis": "L97.409",
        "secondaryDiagnoses": None,
        "episodeStartDate": "2024-01-01T00:00:00Z",
        "episodeEndDate": None,
        "status": "active",
    }
    episode.update(overrides)
    return episode


def make_encounter(
    visit_date: str,
    area: Optional[float] = 4.5,
    interventions: Optional[list[dict[str, Any]]] = None,
    **overrides: Any,
) -> dict[str, Any]:
    """Build a raw encounter; ``area=None`` records no measurement."""
    wound_details: dict[str, Any] = {"location": "left plantar foot"}
    if area is not None:
        wound_details["currentMeasurement"] = {"area": area}

    encounter = {
        "id": f"encounter-{visit_date}",
        "episodeId": "episode-1",
        "date": f"{visit_date}T00:00:00Z",
        "woundDetails": wound_details,
        "conservativeCare": {"interventions": interventions or []},
        "infectionStatus": None,
        "comorbidities": [],
    }
    encounter.update(overrides)
    return encounter


def make_exception(week_id: str, **overrides: Any) -> dict[str, Any]:
    """Build a raw documented exception, valid holiday by default."""
    exception = {
        "id": f"exc-{week_id}",
        "week": week_id,
        "type": "holiday",
        "reason": "Clinic closed",
        "documentedBy": "clinician-1",
        "documentedDate": "2024-01-15T00:00:00Z",
        "isValidException": True,
    }
    exception.update(overrides)
    return exception


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read environment settings for every test."""
    reset_compliance_settings()
    yield
    reset_compliance_settings()


@pytest.fixture
def episode_factory():
    """Factory for raw episode records."""
    return make_episode


@pytest.fixture
def encounter_factory():
    """Factory for raw encounter records."""
    return make_encounter


@pytest.fixture
def exception_factory():
    """Factory for raw documented exceptions."""
    return make_exception


@pytest.fixture
def rules_dir(tmp_path: Path) -> Path:
    """Writable copy of the bundled rules files."""
    target = tmp_path / "rules"
    shutil.copytree(DEFAULT_CONFIG_ROOT, target)
    return target


@pytest.fixture
def rules_snapshot() -> RulesSnapshot:
    """Snapshot of the bundled rules files."""
    return RulesConfigProvider(DEFAULT_CONFIG_ROOT).snapshot()


@pytest.fixture
def offloading_intervention() -> dict[str, Any]:
    """Total contact cast recorded on day one."""
    return {
        "id": "1",
        "type": "offloading_device",
        "name": "Total Contact Cast",
        "startDate": "2024-01-01T00:00:00Z",
        "medicare": {"compliant": True},
    }


@pytest.fixture
def dfu_episode() -> dict[str, Any]:
    """Diabetic foot ulcer episode starting 2024-01-01."""
    return make_episode(primaryDiagnosis="E11.621", woundType="Diabetic foot ulcer")


@pytest.fixture
def weekly_dfu_encounters(offloading_intervention: dict[str, Any]) -> list[dict[str, Any]]:
    """Five weekly measured visits, area 10.0 down to 7.0, offloading on day one."""
    return [
        make_encounter("2024-01-01", 10.0, [offloading_intervention]),
        make_encounter("2024-01-08", 9.0),
        make_encounter("2024-01-15", 8.0),
        make_encounter("2024-01-22", 7.5),
        make_encounter("2024-01-29", 7.0),
    ]


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
