"""Shared fixtures for the API test suite.

All tests run in JSON file mode (no database required).
We wire helpers to a JsonFileStore under tmp_path, and patch db.is_available() → False.
"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from starlette.testclient import TestClient

from pharmacy_locator.algorithms import RankingConfig
from pharmacy_locator.models import Pharmacy
from pharmacy_locator.registry import JsonFileStore

# ---------------------------------------------------------------------------
# Sample pharmacies (mirrors sample-data/verified_pharmacies.json)
# ---------------------------------------------------------------------------

SAMPLE_PHARMACIES: list[Pharmacy] = [
    Pharmacy(
        id=101,
        name="Apollo Pharmacy Indiranagar",
        address="100 Feet Road, HAL 2nd Stage, Indiranagar, Bengaluru",
        phone="+91 80 2521 0101",
        lat=12.9719,
        lon=77.6412,
    ),
    Pharmacy(
        id=102,
        name="MedPlus Koramangala",
        address="80 Feet Road, 4th Block, Koramangala, Bengaluru",
        phone="+91 80 4110 2020",
        lat=12.9352,
        lon=77.6245,
    ),
    Pharmacy(
        id=103,
        name="Wellness Forever MG Road",
        address="Brigade Road Junction, MG Road, Bengaluru",
        phone="+91 80 2558 3030",
        lat=12.9747,
        lon=77.6080,
    ),
]

# MG Road, Bengaluru
CUSTOMER = {"lat": 12.9758, "lon": 77.6045}


@pytest.fixture()
def store(tmp_path):
    return JsonFileStore(tmp_path / "app_database.json")


@pytest.fixture()
def app(store):
    """FastAPI app running in JSON file mode (no DB)."""
    with (
        patch("pharmacy_locator.registry.db.is_available", return_value=False),
        patch("pharmacy_locator.registry.db.init_pool", return_value=False),
        patch("pharmacy_locator.registry.db.close_pool"),
    ):
        from pharmacy_locator.api import helpers
        from pharmacy_locator.api.app import app as _app

        helpers.init_services(store, seeded=list(SAMPLE_PHARMACIES), config=RankingConfig())

        # Set server_started_at on app.state (normally done in startup event)
        _app.state.server_started_at = datetime(2026, 10, 1, 0, 0, 0, tzinfo=timezone.utc)

        yield _app

        # Cleanup
        helpers._STORE = None
        helpers._REGISTRY = None
        helpers._INVENTORY = None
        helpers._ENGINE = None


@pytest.fixture()
def client(app):
    return TestClient(app, raise_server_exceptions=False)


def register(client, name, lat=12.97, lon=77.60, **extra):
    """Register a pharmacy and return its JSON record."""
    resp = client.post("/api/pharmacies", json={"name": name, "lat": lat, "lon": lon, **extra})
    assert resp.status_code in (200, 201), resp.text
    return resp.json()["data"]


def upload(client, pharmacy_id, *items):
    resp = client.put(f"/api/pharmacies/{pharmacy_id}/inventory", json={"items": list(items)})
    assert resp.status_code == 200, resp.text
    return resp.json()
