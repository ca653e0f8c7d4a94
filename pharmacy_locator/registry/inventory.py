"""
Pharmacy Locator — Inventory Index Manager

Maintains the medicine index: medicine key → one StockEntry per pharmacy.
Every public method normalizes the medicine name with ``medicine_key``
before touching the index, so callers never see case-sensitive duplicates.

Inputs are assumed pre-validated (non-negative prices, non-blank names);
the HTTP layer rejects bad requests before they reach this module.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from ..models import (
    InventoryItem,
    RegistryState,
    StockEntry,
    StockStatus,
    medicine_key,
)
from .record_store import RecordStore

logger = logging.getLogger(__name__)


def _find_entry(entries: list[StockEntry], pharmacy_id: int) -> StockEntry | None:
    for entry in entries:
        if entry.pharmacy_id == pharmacy_id:
            return entry
    return None


class InventoryIndex:
    """Medicine index manager over a record store."""

    def __init__(self, store: RecordStore):
        self.store = store

    # -- writes ------------------------------------------------------------

    def upsert_many(
        self,
        pharmacy_id: int,
        items: Iterable[InventoryItem | Mapping[str, Any]],
    ) -> None:
        """
        Merge a batch of price/stock rows for one pharmacy.

        Each row overwrites the pharmacy's existing entry for that medicine
        or creates it.  The document is saved once for the whole batch.
        """
        state = self.store.load()
        count = 0
        for raw in items:
            item = raw if isinstance(raw, InventoryItem) else InventoryItem.model_validate(raw)
            key = medicine_key(item.medicine_name)
            entries = state.index.setdefault(key, [])
            entry = _find_entry(entries, pharmacy_id)
            if entry is None:
                entries.append(StockEntry(pharmacy_id=pharmacy_id, price=item.price, stock=item.stock))
            else:
                entry.price = item.price
                entry.stock = item.stock
            count += 1

        self.store.save(state)
        logger.info("Upserted %d inventory items for pharmacy %d", count, pharmacy_id)

    def set_status(self, pharmacy_id: int, medicine_name: str, stock: StockStatus) -> bool:
        """
        Change the stock status of an existing entry.

        Returns False (and writes nothing) when the pharmacy has no entry
        for the medicine.
        """
        state = self.store.load()
        entry = _find_entry(state.index.get(medicine_key(medicine_name), []), pharmacy_id)
        if entry is None:
            return False
        entry.stock = StockStatus(stock)
        self.store.save(state)
        return True

    def remove(self, pharmacy_id: int, medicine_name: str) -> bool:
        """
        Delete the pharmacy's entry for a medicine.

        The medicine key is dropped once its last entry is gone.  Returns
        False when there was nothing to delete.
        """
        state = self.store.load()
        key = medicine_key(medicine_name)
        entries = state.index.get(key)
        if not entries:
            return False

        remaining = [e for e in entries if e.pharmacy_id != pharmacy_id]
        if len(remaining) == len(entries):
            return False

        if remaining:
            state.index[key] = remaining
        else:
            del state.index[key]
        self.store.save(state)
        return True

    # -- reads -------------------------------------------------------------

    def has_medicine(self, medicine_name: str) -> bool:
        return bool(self.store.load().index.get(medicine_key(medicine_name)))

    # Name used by the presentation layer
    inventory_check = has_medicine

    def entries_for(
        self,
        medicine_name: str,
        state: RegistryState | None = None,
    ) -> list[StockEntry]:
        state = state if state is not None else self.store.load()
        return list(state.index.get(medicine_key(medicine_name), []))

    def entry_for(self, pharmacy_id: int, medicine_name: str) -> StockEntry | None:
        return _find_entry(self.entries_for(medicine_name), pharmacy_id)

    def items_for(self, pharmacy_id: int) -> list[InventoryItem]:
        """The pharmacy's own inventory, one row per medicine key, sorted by key."""
        state = self.store.load()
        items = []
        for key in sorted(state.index):
            entry = _find_entry(state.index[key], pharmacy_id)
            if entry is not None:
                items.append(InventoryItem(medicine_name=key, price=entry.price, stock=entry.stock))
        return items

    def medicine_count(self, state: RegistryState | None = None) -> int:
        state = state if state is not None else self.store.load()
        return len(state.index)
