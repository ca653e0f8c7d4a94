#!/usr/bin/env python3
"""
Pharmacy Locator — Great-Circle Distance

Computes the distance between a customer location and a pharmacy using the
Haversine formula.  The raw distance is returned at full precision; the
ranking engine rounds it to one decimal for display and scoring.

No external geo-libraries required — pure math with stdlib.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

EARTH_RADIUS_KM = 6371.0

# Precision used for distances shown to customers and fed into scoring
DISPLAY_DECIMALS = 1
_DISPLAY_QUANTUM = Decimal(1).scaleb(-DISPLAY_DECIMALS)


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 coordinate pair in decimal degrees."""
    lat: float
    lon: float


# ---------------------------------------------------------------------------
# Core distance calculation
# ---------------------------------------------------------------------------


def haversine_km(coord_a: Coordinate, coord_b: Coordinate) -> float:
    """
    Compute the great-circle distance in kilometres between two WGS84 points
    using the Haversine formula.
    """
    lat1 = math.radians(coord_a.lat)
    lat2 = math.radians(coord_b.lat)
    dlat = math.radians(coord_b.lat - coord_a.lat)
    dlon = math.radians(coord_b.lon - coord_a.lon)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def round_distance(km: float) -> float:
    """
    Round a distance to the display precision, halves away from zero.

    Works on the exact binary value of ``km``: 0.25 becomes 0.3, while 0.35
    (stored just below 0.35) becomes 0.3.
    """
    return float(Decimal(km).quantize(_DISPLAY_QUANTUM, rounding=ROUND_HALF_UP))


def rounded_distance_km(coord_a: Coordinate, coord_b: Coordinate) -> float:
    """Haversine distance rounded to the display precision (0.1 km)."""
    return round_distance(haversine_km(coord_a, coord_b))
