"""Pydantic record types shared by the store, the managers and the ranking engine."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class StockStatus(str, Enum):
    AVAILABLE = "Available"
    UNAVAILABLE = "Unavailable"


# Labels written by earlier owner dashboards, mapped on read
_LEGACY_STOCK_LABELS: dict[str, StockStatus] = {
    "in stock": StockStatus.AVAILABLE,
    "out of stock": StockStatus.UNAVAILABLE,
}


def medicine_key(name: str) -> str:
    """Normalize a medicine name into its index key (trimmed, lower-cased)."""
    return (name or "").strip().lower()


def pharmacy_name_key(name: str) -> str:
    """Normalize a pharmacy name for identity comparison."""
    return (name or "").strip().lower()


def _coerce_stock(value: Any) -> Any:
    if value is None:
        return StockStatus.AVAILABLE
    if isinstance(value, str):
        return _LEGACY_STOCK_LABELS.get(value.strip().lower(), value)
    return value


# ---------------------------------------------------------------------------
# Persisted records
# ---------------------------------------------------------------------------


class Pharmacy(BaseModel):
    id: int
    name: str
    address: str = ""
    phone: str = ""
    lat: float
    lon: float


class StockEntry(BaseModel):
    pharmacy_id: int
    price: float = Field(..., ge=0)
    stock: StockStatus = StockStatus.AVAILABLE

    @field_validator("stock", mode="before")
    @classmethod
    def map_legacy_stock_label(cls, value: Any) -> Any:
        return _coerce_stock(value)


class RegistryState(BaseModel):
    """
    The whole persisted document.

    ``registry`` holds owner-registered pharmacies; ``index`` maps a medicine
    key to its stock entries.  Keys are re-normalized and empty collections
    dropped on validation so a hand-edited document cannot reintroduce
    case-sensitive duplicates.
    """

    registry: list[Pharmacy] = Field(default_factory=list)
    index: dict[str, list[StockEntry]] = Field(default_factory=dict)

    @field_validator("index", mode="after")
    @classmethod
    def normalize_index_keys(cls, index: dict[str, list[StockEntry]]) -> dict[str, list[StockEntry]]:
        normalized: dict[str, list[StockEntry]] = {}
        for name, entries in index.items():
            key = medicine_key(name)
            if not key:
                continue
            bucket = normalized.setdefault(key, [])
            for entry in entries:
                # One entry per pharmacy; the later entry wins
                bucket[:] = [e for e in bucket if e.pharmacy_id != entry.pharmacy_id]
                bucket.append(entry)
        return {k: v for k, v in normalized.items() if v}


# ---------------------------------------------------------------------------
# Inputs and projections
# ---------------------------------------------------------------------------


class InventoryItem(BaseModel):
    """One row of an owner's inventory upload (typed in or extracted from a price slip)."""

    medicine_name: str
    price: float = Field(..., ge=0)
    stock: StockStatus = StockStatus.AVAILABLE

    @field_validator("stock", mode="before")
    @classmethod
    def map_legacy_stock_label(cls, value: Any) -> Any:
        return _coerce_stock(value)


class RankedPharmacy(Pharmacy):
    """A pharmacy as returned by a nearby-match query."""

    distance: float
    price: float = 0.0
    price_unit: str = "-"
    stock: StockStatus = StockStatus.UNAVAILABLE
    is_best_option: bool = False
