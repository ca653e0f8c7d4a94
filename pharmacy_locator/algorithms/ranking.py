#!/usr/bin/env python3
"""
Pharmacy Locator — Nearby-Match Ranking

Joins the pharmacy list with one medicine's stock entries, attaches the
distance from the customer, and builds the result set:

    1. every pharmacy that has the medicine Available (never truncated)
    2. topped up with the nearest remaining pharmacies until the result cap
    3. one Available pharmacy flagged as the best option, minimising
       ``distance_km * distance_weight + price``

The returned list is not sorted for display; ``sort_results`` implements the
presentation orderings offered to customers.

Configuration:
    ranking_rules.yaml — result cap, distance weight, price unit labels
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Sequence

import yaml

from ..models import Pharmacy, RankedPharmacy, StockEntry, StockStatus
from .geo_proximity import Coordinate, rounded_distance_km

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_RULES_PATH = Path(__file__).resolve().parent.parent / "config" / "ranking_rules.yaml"

DEFAULT_RESULT_CAP = 15
# 1 km of travel is valued the same as 10 currency units of price
DEFAULT_DISTANCE_WEIGHT = 10.0
DEFAULT_STOCKED_PRICE_UNIT = "per strip"
DEFAULT_MISSING_PRICE_UNIT = "-"


class SortKey(str, Enum):
    PRICE = "price"
    DISTANCE = "distance"
    AVAILABILITY = "availability"


# ---------------------------------------------------------------------------
# Configuration loader
# ---------------------------------------------------------------------------


@dataclass
class RankingConfig:
    """Tunable ranking parameters, loaded from ranking_rules.yaml."""

    result_cap: int = DEFAULT_RESULT_CAP
    distance_weight: float = DEFAULT_DISTANCE_WEIGHT
    stocked_price_unit: str = DEFAULT_STOCKED_PRICE_UNIT
    missing_price_unit: str = DEFAULT_MISSING_PRICE_UNIT

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RankingConfig":
        """Load configuration from a YAML file. Missing keys keep their defaults."""
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        results = raw.get("results", {})
        scoring = raw.get("best_option", {})
        units = raw.get("price_units", {})

        return cls(
            result_cap=int(results.get("cap", DEFAULT_RESULT_CAP)),
            distance_weight=float(scoring.get("distance_weight", DEFAULT_DISTANCE_WEIGHT)),
            stocked_price_unit=units.get("stocked", DEFAULT_STOCKED_PRICE_UNIT),
            missing_price_unit=units.get("missing", DEFAULT_MISSING_PRICE_UNIT),
        )

    @classmethod
    def load(cls, path: str | Path | None = None) -> "RankingConfig":
        """Load the rules file if present, otherwise fall back to defaults."""
        rules_path = Path(path) if path else DEFAULT_RULES_PATH
        if not rules_path.exists():
            logger.info("No ranking rules at %s, using defaults", rules_path)
            return cls()
        config = cls.from_yaml(rules_path)
        logger.info(
            "Loaded ranking rules from %s (cap=%d, distance_weight=%.1f)",
            rules_path,
            config.result_cap,
            config.distance_weight,
        )
        return config


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def option_score(
    distance_km: float,
    price: float,
    distance_weight: float = DEFAULT_DISTANCE_WEIGHT,
) -> float:
    """Combined distance/price score. Lower is better."""
    return distance_km * distance_weight + price


def select_best_option(
    available: Iterable[RankedPharmacy],
    distance_weight: float = DEFAULT_DISTANCE_WEIGHT,
) -> RankedPharmacy | None:
    """
    Pick the pharmacy with the lowest option score.

    Ties keep the first pharmacy encountered.  Returns None for an empty
    input.
    """
    best: RankedPharmacy | None = None
    best_score = 0.0
    for candidate in available:
        score = option_score(candidate.distance, candidate.price, distance_weight)
        if best is None or score < best_score:
            best = candidate
            best_score = score
    return best


# ---------------------------------------------------------------------------
# Result assembly
# ---------------------------------------------------------------------------


def _project(
    pharmacy: Pharmacy,
    location: Coordinate,
    entry: StockEntry | None,
    config: RankingConfig,
) -> RankedPharmacy:
    distance = rounded_distance_km(location, Coordinate(lat=pharmacy.lat, lon=pharmacy.lon))
    if entry is None:
        return RankedPharmacy(
            **pharmacy.model_dump(),
            distance=distance,
            price=0.0,
            price_unit=config.missing_price_unit,
            stock=StockStatus.UNAVAILABLE,
        )
    return RankedPharmacy(
        **pharmacy.model_dump(),
        distance=distance,
        price=entry.price,
        price_unit=config.stocked_price_unit,
        stock=entry.stock,
    )


def rank_pharmacies(
    location: Coordinate,
    pharmacies: Sequence[Pharmacy],
    entries: Iterable[StockEntry],
    config: RankingConfig | None = None,
) -> list[RankedPharmacy]:
    """
    Build the nearby-match result set for one medicine.

    Parameters
    ----------
    location : Coordinate
        The customer's position.
    pharmacies : sequence of Pharmacy
        Deduplicated pharmacy list, in traversal order.
    entries : iterable of StockEntry
        The medicine's stock entries (empty when the medicine is unknown).
    config : RankingConfig, optional
        Ranking parameters. Uses defaults if not provided.

    Returns
    -------
    list of RankedPharmacy
        All Available pharmacies in traversal order, followed by the nearest
        other pharmacies until ``config.result_cap`` is reached.  At most one
        entry has ``is_best_option`` set.
    """
    config = config or RankingConfig()
    by_pharmacy = {e.pharmacy_id: e for e in entries}

    available: list[RankedPharmacy] = []
    other: list[RankedPharmacy] = []
    for pharmacy in pharmacies:
        ranked = _project(pharmacy, location, by_pharmacy.get(pharmacy.id), config)
        if ranked.stock == StockStatus.AVAILABLE:
            available.append(ranked)
        else:
            other.append(ranked)

    other.sort(key=lambda r: r.distance)

    results = list(available)
    needed = config.result_cap - len(results)
    if needed > 0:
        results.extend(other[:needed])

    best = select_best_option(available, config.distance_weight)
    if best is not None:
        for ranked in results:
            if ranked.id == best.id:
                ranked.is_best_option = True
                break

    logger.debug(
        "Ranked %d pharmacies: %d available, %d returned, best=%s",
        len(pharmacies),
        len(available),
        len(results),
        best.id if best else None,
    )
    return results


# ---------------------------------------------------------------------------
# Presentation ordering
# ---------------------------------------------------------------------------


def sort_results(
    results: Iterable[RankedPharmacy],
    sort_by: SortKey | str = SortKey.DISTANCE,
) -> list[RankedPharmacy]:
    """
    Order a result set for display.

    The best option always comes first.  The rest follow by ascending price,
    ascending distance, or (for ``availability``) Available before
    Unavailable and then by distance.  The sort is stable.
    """
    sort_by = SortKey(sort_by)

    if sort_by is SortKey.PRICE:
        def secondary(r: RankedPharmacy) -> tuple:
            return (r.price,)
    elif sort_by is SortKey.AVAILABILITY:
        def secondary(r: RankedPharmacy) -> tuple:
            return (r.stock != StockStatus.AVAILABLE, r.distance)
    else:
        def secondary(r: RankedPharmacy) -> tuple:
            return (r.distance,)

    return sorted(results, key=lambda r: (not r.is_best_option, *secondary(r)))
