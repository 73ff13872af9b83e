"""
Pytest fixtures for the climate actions tests.

Provides raw wire-form records, validated actions, and a FastAPI test client
backed by a temporary static snapshot and status log (no network).
"""

import copy
import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from actions.schema import validate_actions  # noqa: E402


def make_record(**overrides) -> dict:
    """Return a valid wire-form action record with *overrides* applied."""
    record = {
        "id": "X-1",
        "city": "Serra",
        "country": "Brazil",
        "actionName": "Landfill gas capture",
        "category": "Mitigation",
        "sector": "Waste",
        "costTier": "High",
        "status": "Completed",
        "description": "Capture methane from the landfill.",
        "lastUpdated": "2025-02-10",
    }
    record.update(overrides)
    return record


_RECORDS = [
    make_record(id="1", city="Serra", actionName="Landfill gas capture",
                category="Mitigation", sector="Waste", costTier="High",
                status="Completed", investmentUSD=4500000,
                tags=["methane", "energy"]),
    make_record(id="2", city="Recife", actionName="Mangrove restoration",
                category="Adaptation", sector="AFOLU", costTier="Medium",
                status="In progress",
                description="Restore mangroves to buffer storm surge.",
                tags=["flooding", "nature-based"]),
    make_record(id="3", city="Campinas", actionName="Rooftop solar on schools",
                category="Mitigation", sector="Stationary Energy", costTier="Low",
                status="Ready to start",
                description="Install rooftop solar on municipal schools.",
                owner="Secretaria de Educação", tags=["solar", "schools"]),
    make_record(id="4", city="Recife", actionName="Electric bus corridor",
                category="Mitigation", sector="Transportation", costTier="High",
                status="Not started",
                description="Replace diesel buses with battery electric buses."),
    make_record(id="5", city="Serra", actionName="Urban tree canopy",
                category="Adaptation", sector="AFOLU", costTier="Low",
                status="On hold",
                description="Plant native trees along heat-exposed avenues.",
                tags=["heat", "Solar shading"]),
]


@pytest.fixture()
def sample_records() -> list[dict]:
    """Five raw records covering every status and most sectors."""
    return copy.deepcopy(_RECORDS)


@pytest.fixture()
def sample_actions(sample_records):
    """The sample records validated into Action models, in input order."""
    return validate_actions(sample_records)


@pytest.fixture()
def scenario_actions():
    """The two-record scenario: Serra/Mitigation/Waste/Completed and Recife/Adaptation/AFOLU/In progress."""
    return validate_actions([
        make_record(id="1", city="Serra", category="Mitigation", sector="Waste",
                    status="Completed"),
        make_record(id="2", city="Recife", category="Adaptation", sector="AFOLU",
                    status="In progress", actionName="Mangrove restoration"),
    ])


@pytest.fixture()
def snapshot_file(tmp_path, sample_records) -> Path:
    """Static snapshot file holding the sample records."""
    path = tmp_path / "actions.json"
    path.write_text(json.dumps(sample_records), encoding="utf-8")
    return path


@pytest.fixture()
def app_config(tmp_path, snapshot_file, monkeypatch):
    """AppConfig pointing at the temporary snapshot, with Sheets disabled."""
    monkeypatch.delenv("GOOGLE_SHEETS_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_SHEETS_ID", raising=False)
    monkeypatch.setenv("ACTIONS_STATIC_PATH", str(snapshot_file))
    monkeypatch.setenv("STATUS_LOG_PATH", str(tmp_path / "status_updates.json"))
    from utils.config import AppConfig
    return AppConfig.from_env()


@pytest.fixture()
def client(app_config):
    """TestClient for an app serving the sample records."""
    from fastapi.testclient import TestClient
    from api.app import create_app
    with TestClient(create_app(config=app_config)) as c:
        yield c
