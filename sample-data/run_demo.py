#!/usr/bin/env python3
"""
Pharmacy Locator — End-to-End Demo

Runs the owner and customer flows against a throwaway JSON store:
  1. Register: owners register pharmacies (find-or-create by name)
  2. Stock: owners upload prices and stock for a few medicines
  3. Search: a customer ranks nearby pharmacies for one medicine

Usage:
    python sample-data/run_demo.py [--medicine Paracetamol] [--sort-by price]
"""

from __future__ import annotations

import argparse
import tempfile
from pathlib import Path

from pharmacy_locator.algorithms import Coordinate, RankingConfig, SortKey, sort_results
from pharmacy_locator.registry import (
    InventoryIndex,
    JsonFileStore,
    NearbyMatchEngine,
    PharmacyRegistry,
    load_seed_pharmacies,
)

ROOT = Path(__file__).resolve().parent.parent

# Customer standing near Bengaluru's MG Road
CUSTOMER = Coordinate(lat=12.9756, lon=77.6050)

OWNERS = [
    {
        "name": "Sri Sai Medicals",
        "address": "12 Residency Road, Bengaluru",
        "phone": "+91 98450 11111",
        "location": Coordinate(lat=12.9667, lon=77.6010),
        "items": [
            {"medicine_name": "Paracetamol", "price": 32.0, "stock": "Available"},
            {"medicine_name": "Cetirizine", "price": 18.5, "stock": "Available"},
        ],
    },
    {
        "name": "Apollo Pharmacy Indiranagar",  # already seeded, resolves to the seed record
        "address": "ignored",
        "phone": "ignored",
        "location": Coordinate(lat=0.0, lon=0.0),
        "items": [
            {"medicine_name": "PARACETAMOL", "price": 28.0, "stock": "Available"},
            {"medicine_name": "Azithromycin", "price": 110.0, "stock": "Unavailable"},
        ],
    },
    {
        "name": "Jayanagar Health Store",
        "address": "4th Block, Jayanagar, Bengaluru",
        "phone": "+91 98450 22222",
        "location": Coordinate(lat=12.9250, lon=77.5938),
        "items": [
            {"medicine_name": "paracetamol", "price": 25.0, "stock": "Unavailable"},
        ],
    },
]


def step_register(registry: PharmacyRegistry) -> list[tuple[int, list[dict]]]:
    print("=" * 65)
    print("STEP 1: REGISTRATION")
    print("=" * 65)

    uploads = []
    for owner in OWNERS:
        pharmacy, created = registry.register(
            owner["name"], owner["address"], owner["phone"], owner["location"]
        )
        print(f"  {'created ' if created else 'existing'}  #{pharmacy.id:<5} {pharmacy.name}")
        uploads.append((pharmacy.id, owner["items"]))
    print()
    return uploads


def step_stock(inventory: InventoryIndex, uploads: list[tuple[int, list[dict]]]) -> None:
    print("=" * 65)
    print("STEP 2: INVENTORY UPLOADS")
    print("=" * 65)

    for pharmacy_id, items in uploads:
        inventory.upsert_many(pharmacy_id, items)
        print(f"  #{pharmacy_id:<5} {len(items)} items")
    print()


def step_search(engine: NearbyMatchEngine, medicine: str, sort_by: str | None) -> None:
    print("=" * 65)
    print(f"STEP 3: SEARCH — {medicine!r} near ({CUSTOMER.lat}, {CUSTOMER.lon})")
    print("=" * 65)

    if not engine.inventory.has_medicine(medicine):
        print("  (not in any local inventory — showing nearest pharmacies only)")

    results = engine.find_nearby(CUSTOMER, medicine)
    if sort_by:
        results = sort_results(results, sort_by)

    for r in results:
        marker = "*" if r.is_best_option else " "
        price = f"{r.price:8.2f} {r.price_unit}" if r.price_unit != "-" else f"{'-':>8}"
        print(f"  {marker} {r.distance:6.1f} km  {r.stock.value:<11} {price:<18} {r.name}")

    print("  " + "-" * 63)
    print(f"  {len(results)} results, * = best option")
    print("=" * 65)


def main():
    parser = argparse.ArgumentParser(description="Pharmacy Locator end-to-end demo")
    parser.add_argument("--medicine", default="Paracetamol")
    parser.add_argument("--sort-by", choices=[k.value for k in SortKey], default=None)
    args = parser.parse_args()

    seeded = load_seed_pharmacies(ROOT / "sample-data" / "verified_pharmacies.json")

    with tempfile.TemporaryDirectory() as tmp:
        store = JsonFileStore(Path(tmp) / "demo_database.json")
        registry = PharmacyRegistry(store, seeded=seeded)
        inventory = InventoryIndex(store)
        engine = NearbyMatchEngine(registry, inventory, RankingConfig.load())

        print()
        print("  Pharmacy Locator — End-to-End Demo")
        print()

        uploads = step_register(registry)
        step_stock(inventory, uploads)
        step_search(engine, args.medicine, args.sort_by)


if __name__ == "__main__":
    main()
