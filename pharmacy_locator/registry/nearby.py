"""Nearby-match engine: one store snapshot in, a ranked pharmacy list out."""

from __future__ import annotations

import logging

from ..algorithms.geo_proximity import Coordinate
from ..algorithms.ranking import RankingConfig, rank_pharmacies
from ..models import RankedPharmacy
from .inventory import InventoryIndex
from .pharmacies import PharmacyRegistry

logger = logging.getLogger(__name__)


class NearbyMatchEngine:
    def __init__(
        self,
        registry: PharmacyRegistry,
        inventory: InventoryIndex,
        config: RankingConfig | None = None,
    ):
        self.registry = registry
        self.inventory = inventory
        self.config = config or RankingConfig()

    def find_nearby(self, location: Coordinate, medicine_name: str) -> list[RankedPharmacy]:
        """
        Rank every known pharmacy for ``medicine_name`` around ``location``.

        Reads the registry and the medicine index from a single load so both
        come from the same snapshot.
        """
        state = self.registry.store.load()
        pharmacies = self.registry.list_pharmacies(state)
        entries = self.inventory.entries_for(medicine_name, state)

        results = rank_pharmacies(location, pharmacies, entries, self.config)
        logger.info(
            "Nearby search for %r at (%.4f, %.4f): %d results",
            medicine_name,
            location.lat,
            location.lon,
            len(results),
        )
        return results
