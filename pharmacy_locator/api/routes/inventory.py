"""Inventory endpoints: owner uploads, status changes, removals and lookups."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Response

from ...models import InventoryItem, StockStatus
from ..helpers import get_inventory, require_pharmacy
from ..models import InventoryUploadRequest, StockStatusRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/pharmacies/{pharmacy_id}/inventory")
async def list_inventory(pharmacy_id: int) -> dict[str, Any]:
    """The pharmacy's own inventory, sorted by medicine."""
    require_pharmacy(pharmacy_id)
    items = get_inventory().items_for(pharmacy_id)
    return {
        "pharmacy_id": pharmacy_id,
        "count": len(items),
        "data": [i.model_dump(mode="json") for i in items],
    }


@router.put("/api/pharmacies/{pharmacy_id}/inventory")
async def upload_inventory(pharmacy_id: int, body: InventoryUploadRequest) -> dict[str, Any]:
    """Upsert a batch of price/stock rows for the pharmacy."""
    require_pharmacy(pharmacy_id)
    items = [
        InventoryItem(
            medicine_name=row.medicine_name,
            price=row.price,
            stock=row.stock or StockStatus.AVAILABLE,
        )
        for row in body.items
    ]
    get_inventory().upsert_many(pharmacy_id, items)
    return {"pharmacy_id": pharmacy_id, "updated": len(items)}


@router.get("/api/pharmacies/{pharmacy_id}/inventory/{medicine_name}")
async def get_inventory_entry(pharmacy_id: int, medicine_name: str) -> dict[str, Any]:
    """Price and stock of one medicine at one pharmacy."""
    entry = get_inventory().entry_for(pharmacy_id, medicine_name)
    if entry is None:
        raise HTTPException(status_code=404, detail="Medicine not stocked by this pharmacy")
    return {"data": {"price": entry.price, "stock": entry.stock.value}}


@router.patch("/api/pharmacies/{pharmacy_id}/inventory/{medicine_name}")
async def update_stock_status(
    pharmacy_id: int,
    medicine_name: str,
    body: StockStatusRequest,
) -> dict[str, Any]:
    """Change the stock status of an existing inventory entry."""
    require_pharmacy(pharmacy_id)
    if not get_inventory().set_status(pharmacy_id, medicine_name, body.stock):
        raise HTTPException(status_code=404, detail="Medicine not stocked by this pharmacy")
    return {"pharmacy_id": pharmacy_id, "medicine": medicine_name, "stock": body.stock.value}


@router.delete("/api/pharmacies/{pharmacy_id}/inventory/{medicine_name}", status_code=204)
async def delete_inventory_entry(pharmacy_id: int, medicine_name: str) -> Response:
    """Remove a medicine from the pharmacy's inventory."""
    require_pharmacy(pharmacy_id)
    if not get_inventory().remove(pharmacy_id, medicine_name):
        raise HTTPException(status_code=404, detail="Medicine not stocked by this pharmacy")
    return Response(status_code=204)


@router.get("/api/medicines/{medicine_name}")
async def inventory_check(medicine_name: str) -> dict[str, Any]:
    """Whether any pharmacy lists the medicine locally."""
    return {"medicine": medicine_name, "in_inventory": get_inventory().inventory_check(medicine_name)}
