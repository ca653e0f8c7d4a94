"""
Pharmacy Locator — Pharmacy Registry Manager

Find-or-create registration of pharmacies, keyed by case-folded name.

Two populations share one id space:
  • pre-seeded (verified) pharmacies, read-only, ids <= ID_BASELINE
  • owner-registered pharmacies, stored in the record store, ids > ID_BASELINE

Registration never overwrites: the first writer's address, phone and
coordinates stand for every later request with the same name.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from pydantic import TypeAdapter, ValidationError

from ..algorithms.geo_proximity import Coordinate
from ..models import Pharmacy, RegistryState, pharmacy_name_key
from .record_store import RecordStore

logger = logging.getLogger(__name__)

# Ids at or below this value are reserved for pre-seeded pharmacies
ID_BASELINE = 1000

_PHARMACY_LIST = TypeAdapter(list[Pharmacy])


def load_seed_pharmacies(path: str | Path | None, id_baseline: int = ID_BASELINE) -> list[Pharmacy]:
    """
    Load the pre-seeded pharmacy list from a JSON array.

    A missing or unreadable file yields an empty list.  Entries whose id
    falls above the baseline would collide with owner-registered ids and are
    skipped with a warning.
    """
    if path is None:
        return []
    seed_path = Path(path)
    if not seed_path.exists():
        logger.info("No seed pharmacies at %s", seed_path)
        return []

    try:
        with open(seed_path, "r", encoding="utf-8") as f:
            seeds = _PHARMACY_LIST.validate_python(json.load(f))
    except (OSError, ValueError, ValidationError) as e:
        logger.warning("Could not load seed pharmacies from %s: %s", seed_path, e)
        return []

    kept = []
    for p in seeds:
        if p.id > id_baseline:
            logger.warning(
                "Skipping seed pharmacy %r: id %d is above the reserved baseline %d",
                p.name,
                p.id,
                id_baseline,
            )
            continue
        kept.append(p)

    logger.info("Loaded %d seed pharmacies from %s", len(kept), seed_path)
    return kept


def dedupe_by_name(pharmacies: Iterable[Pharmacy]) -> list[Pharmacy]:
    """
    Collapse pharmacies sharing a case-folded name and sort by name.

    Later entries replace earlier ones, so an owner-registered record wins
    over a seeded record of the same name.
    """
    by_name: dict[str, Pharmacy] = {}
    for p in pharmacies:
        by_name[pharmacy_name_key(p.name)] = p
    return sorted(by_name.values(), key=lambda p: (p.name.lower(), p.name))


class PharmacyRegistry:
    """Registry manager over a record store plus a read-only seed list."""

    def __init__(
        self,
        store: RecordStore,
        seeded: Iterable[Pharmacy] | None = None,
        id_baseline: int = ID_BASELINE,
    ):
        self.store = store
        self.seeded: list[Pharmacy] = list(seeded or [])
        self.id_baseline = id_baseline

    def _all(self, state: RegistryState) -> list[Pharmacy]:
        return [*self.seeded, *state.registry]

    def _find(self, state: RegistryState, name: str) -> Pharmacy | None:
        key = pharmacy_name_key(name)
        for p in self._all(state):
            if pharmacy_name_key(p.name) == key:
                return p
        return None

    def next_id(self, state: RegistryState) -> int:
        """Next free id: one above the largest existing id or the baseline."""
        return max([p.id for p in self._all(state)] + [self.id_baseline]) + 1

    def register(
        self,
        name: str,
        address: str,
        phone: str,
        location: Coordinate,
    ) -> tuple[Pharmacy, bool]:
        """
        Find a pharmacy by name or create it.

        Returns ``(pharmacy, created)``.  On a hit the stored record is
        returned unchanged and the request's details are discarded.
        """
        state = self.store.load()

        existing = self._find(state, name)
        if existing is not None:
            return existing, False

        pharmacy = Pharmacy(
            id=self.next_id(state),
            name=name.strip(),
            address=address,
            phone=phone,
            lat=location.lat,
            lon=location.lon,
        )
        state.registry.append(pharmacy)
        self.store.save(state)

        logger.info("Registered pharmacy %r with id %d", pharmacy.name, pharmacy.id)
        return pharmacy, True

    def find_or_create(
        self,
        name: str,
        address: str,
        phone: str,
        location: Coordinate,
    ) -> Pharmacy:
        return self.register(name, address, phone, location)[0]

    def get(self, pharmacy_id: int, state: RegistryState | None = None) -> Pharmacy | None:
        """Look up a pharmacy by id across seeded and registered records."""
        state = state if state is not None else self.store.load()
        for p in self._all(state):
            if p.id == pharmacy_id:
                return p
        return None

    def list_pharmacies(self, state: RegistryState | None = None) -> list[Pharmacy]:
        """All pharmacies, deduplicated by name and sorted for display."""
        state = state if state is not None else self.store.load()
        return dedupe_by_name(self._all(state))
