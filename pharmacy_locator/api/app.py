#!/usr/bin/env python3
"""
Pharmacy Locator — API

FastAPI server exposing the registry, inventory and nearby-match managers:
  • Database mode — the registry document lives in PostgreSQL when reachable
  • JSON file mode — the document lives in a local JSON file otherwise

Usage:
    uvicorn pharmacy_locator.api.app:app --reload --port 8000
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..registry import PostgresStore, db
from . import helpers
from .routes import health, inventory, pharmacies

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Pharmacy Locator",
    version=__version__,
    description="Find nearby pharmacies stocking a medicine; owners keep inventories current",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(pharmacies.router)
app.include_router(inventory.router)


@app.on_event("startup")
async def startup():
    app.state.server_started_at = datetime.now(timezone.utc)
    # Try to connect to DB (best-effort)
    if db.init_pool():
        if db.ensure_schema():
            logger.info("Running in DATABASE mode")
            helpers.init_services(PostgresStore())
            return
        db.close_pool()
    logger.info("Running in JSON FILE mode (%s)", helpers.STORE_PATH)
    helpers.init_services()


@app.on_event("shutdown")
async def shutdown():
    db.close_pool()
