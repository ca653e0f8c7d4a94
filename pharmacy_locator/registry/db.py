"""
Pharmacy Locator — PostgreSQL Document Store Connection

Everything the locator needs from PostgreSQL lives here:
  • a small threaded connection pool, configured from PLX_DB_* variables
  • the ``app_documents`` table that holds the registry document
  • a timed ``SELECT 1`` used by the health check

PostgreSQL is optional.  ``init_pool`` returns False when the server cannot
be reached, and the API then keeps its document in the JSON file store.

Usage:
    from pharmacy_locator.registry import db

    if db.init_pool() and db.ensure_schema():
        latency_ms = db.ping()
"""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from typing import Any, Iterator

import psycopg2
from psycopg2 import pool

logger = logging.getLogger(__name__)

DOCUMENTS_TABLE = "app_documents"

SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS {DOCUMENTS_TABLE} (
    doc_key    TEXT PRIMARY KEY,
    body       JSONB NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""

# Pool bounds
POOL_MIN_CONN = 1
POOL_MAX_CONN = 4

_pool: pool.ThreadedConnectionPool | None = None


def connection_params() -> dict[str, Any]:
    """psycopg2 connection keywords, read from the environment at call time."""
    return {
        "host": os.environ.get("PLX_DB_HOST", "localhost"),
        "port": int(os.environ.get("PLX_DB_PORT", "5432")),
        "dbname": os.environ.get("PLX_DB_NAME", "plx_locator"),
        "user": os.environ.get("PLX_DB_USER", "plx"),
        "password": os.environ.get("PLX_DB_PASSWORD", "plx_local_dev"),
        "connect_timeout": int(os.environ.get("PLX_DB_CONNECT_TIMEOUT", "3")),
    }


# ---------------------------------------------------------------------------
# Pool lifecycle
# ---------------------------------------------------------------------------


def init_pool() -> bool:
    """
    Open the pool and confirm the server answers.

    Returns False (with no pool left open) when PostgreSQL is unreachable.
    """
    global _pool
    params = connection_params()
    try:
        _pool = pool.ThreadedConnectionPool(POOL_MIN_CONN, POOL_MAX_CONN, **params)
    except psycopg2.Error as e:
        logger.warning(
            "PostgreSQL at %s:%s unreachable, keeping the document in the JSON file: %s",
            params["host"],
            params["port"],
            e,
        )
        _pool = None
        return False

    if ping() is None:
        close_pool()
        return False

    logger.info("Document store pool ready (%s@%s/%s)", params["user"], params["host"], params["dbname"])
    return True


def close_pool() -> None:
    global _pool
    if _pool is None:
        return
    try:
        _pool.closeall()
    finally:
        _pool = None
    logger.info("Document store pool closed")


def is_available() -> bool:
    """True while a pool is open. Says nothing about the server being up; use ``ping``."""
    return _pool is not None


@contextmanager
def get_conn() -> Iterator[Any]:
    """
    Check a connection out of the pool for one unit of work.

    Commits on a clean exit and rolls back otherwise.  The connection goes
    back to the pool even when the commit or rollback itself fails.
    """
    active = _pool
    if active is None:
        raise RuntimeError("Database pool not initialized")

    conn = active.getconn()
    try:
        yield conn
        conn.commit()
    except BaseException:
        if not conn.closed:
            conn.rollback()
        raise
    finally:
        # Broken connections are discarded rather than handed out again
        active.putconn(conn, close=bool(conn.closed))


# ---------------------------------------------------------------------------
# Document store helpers
# ---------------------------------------------------------------------------


def ensure_schema() -> bool:
    """Create the documents table if it is missing. False when that fails."""
    try:
        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
    except (psycopg2.Error, RuntimeError) as e:
        logger.warning("Could not ensure %s table: %s", DOCUMENTS_TABLE, e)
        return False
    return True


def ping() -> float | None:
    """Round-trip latency of ``SELECT 1`` in ms, or None when the database does not answer."""
    t0 = time.monotonic()
    try:
        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
                cur.fetchone()
    except (psycopg2.Error, RuntimeError) as e:
        logger.warning("Database ping failed: %s", e)
        return None
    return round((time.monotonic() - t0) * 1000, 1)
