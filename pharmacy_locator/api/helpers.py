"""Shared service state and path constants for the Pharmacy Locator API."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from fastapi import HTTPException

from ..algorithms.ranking import RankingConfig
from ..models import Pharmacy
from ..registry import (
    InventoryIndex,
    JsonFileStore,
    NearbyMatchEngine,
    PharmacyRegistry,
    RecordStore,
    load_seed_pharmacies,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Path constants (env vars override)
# ---------------------------------------------------------------------------

ROOT = Path(__file__).resolve().parent.parent.parent
OUTPUT_DIR = ROOT / "output"

STORE_PATH = Path(os.environ.get("PLX_STORE_PATH", str(OUTPUT_DIR / "app_database.json")))
SEED_PATH = Path(os.environ.get("PLX_SEED_PATH", str(ROOT / "sample-data" / "verified_pharmacies.json")))
RANKING_RULES_PATH = os.environ.get("PLX_RANKING_RULES")

# ---------------------------------------------------------------------------
# Service state (populated by init_services at startup)
# ---------------------------------------------------------------------------

_STORE: RecordStore | None = None
_REGISTRY: PharmacyRegistry | None = None
_INVENTORY: InventoryIndex | None = None
_ENGINE: NearbyMatchEngine | None = None


def init_services(
    store: RecordStore | None = None,
    seeded: list[Pharmacy] | None = None,
    config: RankingConfig | None = None,
) -> None:
    """
    Wire the managers to a record store.

    Defaults: JSON file store at STORE_PATH, seeds from SEED_PATH, ranking
    rules from PLX_RANKING_RULES (or the packaged rules file).
    """
    global _STORE, _REGISTRY, _INVENTORY, _ENGINE  # noqa: PLW0603

    _STORE = store if store is not None else JsonFileStore(STORE_PATH)
    if seeded is None:
        seeded = load_seed_pharmacies(SEED_PATH)
    if config is None:
        config = RankingConfig.load(RANKING_RULES_PATH)

    _REGISTRY = PharmacyRegistry(_STORE, seeded=seeded)
    _INVENTORY = InventoryIndex(_STORE)
    _ENGINE = NearbyMatchEngine(_REGISTRY, _INVENTORY, config)
    logger.info("Services ready (store mode: %s, %d seed pharmacies)", _STORE.mode, len(seeded))


def _require(service):
    if service is None:
        raise HTTPException(status_code=503, detail="Registry services not initialized")
    return service


def get_store() -> RecordStore:
    return _require(_STORE)


def get_registry() -> PharmacyRegistry:
    return _require(_REGISTRY)


def get_inventory() -> InventoryIndex:
    return _require(_INVENTORY)


def get_engine() -> NearbyMatchEngine:
    return _require(_ENGINE)


def require_pharmacy(pharmacy_id: int) -> Pharmacy:
    """Fetch a pharmacy or raise 404."""
    pharmacy = get_registry().get(pharmacy_id)
    if pharmacy is None:
        raise HTTPException(status_code=404, detail="Pharmacy not found")
    return pharmacy
