"""Pharmacy Locator — Record Store, Registry and Inventory Managers."""

from .inventory import InventoryIndex
from .nearby import NearbyMatchEngine
from .pharmacies import (
    ID_BASELINE,
    PharmacyRegistry,
    dedupe_by_name,
    load_seed_pharmacies,
)
from .record_store import JsonFileStore, PostgresStore, RecordStore

__all__ = [
    "InventoryIndex",
    "NearbyMatchEngine",
    "ID_BASELINE",
    "PharmacyRegistry",
    "dedupe_by_name",
    "load_seed_pharmacies",
    "JsonFileStore",
    "PostgresStore",
    "RecordStore",
]
