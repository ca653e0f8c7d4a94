"""Pharmacy Locator — Distance and Ranking Algorithms."""

from .geo_proximity import (
    Coordinate,
    haversine_km,
    round_distance,
    rounded_distance_km,
)
from .ranking import (
    RankingConfig,
    SortKey,
    option_score,
    rank_pharmacies,
    select_best_option,
    sort_results,
)

__all__ = [
    "Coordinate",
    "haversine_km",
    "round_distance",
    "rounded_distance_km",
    "RankingConfig",
    "SortKey",
    "option_score",
    "rank_pharmacies",
    "select_best_option",
    "sort_results",
]
