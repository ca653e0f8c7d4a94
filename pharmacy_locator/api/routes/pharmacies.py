"""Pharmacy endpoints (list, register, nearby, detail)."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query, Response

from ...algorithms.geo_proximity import Coordinate
from ...algorithms.ranking import SortKey, sort_results
from ..helpers import get_engine, get_registry, require_pharmacy
from ..models import PharmacyRegisterRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/pharmacies")
async def list_pharmacies(
    q: str | None = Query(None, description="Search pharmacy name (case-insensitive)"),
) -> dict[str, Any]:
    """List registered and seeded pharmacies, deduplicated by name."""
    results = get_registry().list_pharmacies()

    if q:
        q_lower = q.lower()
        results = [p for p in results if q_lower in p.name.lower()]

    return {
        "meta": {"total": len(results)},
        "data": [p.model_dump(mode="json") for p in results],
    }


@router.post("/api/pharmacies")
async def register_pharmacy(body: PharmacyRegisterRequest, response: Response) -> dict[str, Any]:
    """
    Find-or-create a pharmacy by name.

    201 when a new pharmacy was registered, 200 when the name already
    existed (the stored record is returned unchanged).
    """
    pharmacy, created = get_registry().register(
        name=body.name,
        address=body.address,
        phone=body.phone,
        location=Coordinate(lat=body.lat, lon=body.lon),
    )
    response.status_code = 201 if created else 200
    return {"created": created, "data": pharmacy.model_dump(mode="json")}


@router.get("/api/pharmacies/nearby")
async def nearby_pharmacies(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude"),
    medicine: str = Query(..., min_length=1, description="Medicine name"),
    sort_by: SortKey | None = Query(
        None,
        description="Presentation order: price, distance or availability. Omit for engine order.",
    ),
) -> dict[str, Any]:
    """Rank pharmacies around a location for one medicine."""
    if not medicine.strip():
        raise HTTPException(status_code=422, detail="medicine must not be blank")

    try:
        results = get_engine().find_nearby(Coordinate(lat=lat, lon=lon), medicine)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Nearby query failed")
        raise HTTPException(status_code=500, detail=str(e))

    if sort_by is not None:
        results = sort_results(results, sort_by)

    best = next((r for r in results if r.is_best_option), None)
    return {
        "center": {"lat": lat, "lon": lon},
        "medicine": medicine.strip(),
        "count": len(results),
        "best_option_id": best.id if best else None,
        "data": [r.model_dump(mode="json") for r in results],
    }


@router.get("/api/pharmacies/{pharmacy_id}")
async def get_pharmacy(pharmacy_id: int) -> dict[str, Any]:
    """Get a single pharmacy by id."""
    return {"data": require_pharmacy(pharmacy_id).model_dump(mode="json")}
