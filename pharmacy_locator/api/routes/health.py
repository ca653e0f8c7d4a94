"""Health check endpoint."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from ...registry import db
from ..helpers import get_engine, get_inventory, get_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/health")
async def health(request: Request):
    """Health check — reports store mode, record counts, version, store latency. Always open."""
    store = get_store()

    db_latency_ms = db.ping() if db.is_available() else None
    db_ok = db_latency_ms is not None

    t0 = time.monotonic()
    state = store.load()
    load_latency_ms = round((time.monotonic() - t0) * 1000, 1)

    if store.mode == "database":
        # load() hides database errors behind an empty document; trust the ping
        store_ok = db_ok
        store_latency_ms = db_latency_ms
    else:
        store_ok = True
        store_latency_ms = load_latency_ms

    pharmacy_count = len(get_engine().registry.list_pharmacies(state))
    medicine_count = get_inventory().medicine_count(state)

    server_started_at = request.app.state.server_started_at
    uptime_seconds = round((datetime.now(timezone.utc) - server_started_at).total_seconds())

    overall_status = "healthy" if store_ok else "degraded"
    if not store_ok:
        logger.warning("Health check: %s store is down", store.mode)

    return JSONResponse(
        status_code=200 if store_ok else 503,
        content={
            "status": overall_status,
            "mode": store.mode,
            "pharmacy_count": pharmacy_count,
            "medicine_count": medicine_count,
            "version": request.app.version,
            "database_connected": db_ok,
            "started_at": server_started_at.isoformat(),
            "uptime_seconds": uptime_seconds,
            "checks": {
                "store": {
                    "status": "up" if store_ok else "down",
                    "latency_ms": store_latency_ms,
                },
            },
        },
    )
