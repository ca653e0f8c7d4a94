"""Shared fixtures: a throwaway JSON store plus the managers wired to it."""

from __future__ import annotations

import pytest

from pharmacy_locator.algorithms import Coordinate
from pharmacy_locator.models import Pharmacy
from pharmacy_locator.registry import (
    InventoryIndex,
    JsonFileStore,
    NearbyMatchEngine,
    PharmacyRegistry,
)

# Kilometres per degree of longitude along the equator (Earth radius 6371 km)
KM_PER_DEGREE = 6371.0 * 3.141592653589793 / 180.0

ORIGIN = Coordinate(lat=0.0, lon=0.0)


def at_km(km: float) -> Coordinate:
    """A point on the equator ``km`` kilometres east of ORIGIN."""
    return Coordinate(lat=0.0, lon=km / KM_PER_DEGREE)


def make_pharmacy(pharmacy_id: int, name: str, km: float, **extra) -> Pharmacy:
    point = at_km(km)
    return Pharmacy(id=pharmacy_id, name=name, lat=point.lat, lon=point.lon, **extra)


SEED_PHARMACIES: list[Pharmacy] = [
    Pharmacy(
        id=101,
        name="Apollo Pharmacy Indiranagar",
        address="100 Feet Road, Indiranagar",
        phone="+91 80 2521 0101",
        lat=12.9719,
        lon=77.6412,
    ),
    Pharmacy(
        id=102,
        name="MedPlus Koramangala",
        address="80 Feet Road, Koramangala",
        phone="+91 80 4110 2020",
        lat=12.9352,
        lon=77.6245,
    ),
]


class CountingStore(JsonFileStore):
    """JsonFileStore that counts saves."""

    def __init__(self, path):
        super().__init__(path)
        self.saves = 0

    def save(self, state):
        self.saves += 1
        return super().save(state)


@pytest.fixture()
def store(tmp_path):
    return CountingStore(tmp_path / "app_database.json")


@pytest.fixture()
def registry(store):
    return PharmacyRegistry(store)


@pytest.fixture()
def seeded_registry(store):
    return PharmacyRegistry(store, seeded=SEED_PHARMACIES)


@pytest.fixture()
def inventory(store):
    return InventoryIndex(store)


@pytest.fixture()
def engine(registry, inventory):
    return NearbyMatchEngine(registry, inventory)
