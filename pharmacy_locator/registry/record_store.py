"""
Pharmacy Locator — Record Store

Persists the whole registry document (owner-registered pharmacies plus the
medicine index) as a single blob.  Every mutation is a full
load → mutate → save cycle; there is no partial read or write.

Two backends share the same contract:
  • JsonFileStore — one JSON file on local disk (default)
  • PostgresStore — one JSONB row in ``app_documents`` (when the DB is up)

``load`` never raises: an empty, corrupt or unreadable medium yields an
empty RegistryState and a logged warning.  ``save`` is best-effort: a failed
write is logged and reported through its return value, never raised.

There is no locking.  Two concurrent cycles can interleave and the last
save wins.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import psycopg2
from psycopg2 import extras
from pydantic import ValidationError

from ..models import RegistryState
from . import db

logger = logging.getLogger(__name__)

DOCUMENT_KEY = "app_database"


class RecordStore:
    """Interface shared by the storage backends."""

    mode = "abstract"

    def load(self) -> RegistryState:
        raise NotImplementedError

    def save(self, state: RegistryState) -> bool:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# JSON file backend
# ---------------------------------------------------------------------------


class JsonFileStore(RecordStore):
    """Stores the document as pretty-printed JSON at ``path``."""

    mode = "json_file"

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> RegistryState:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("No store file at %s, starting with an empty registry", self.path)
            return RegistryState()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read store file %s: %s", self.path, e)
            return RegistryState()

        if not raw.strip():
            return RegistryState()

        try:
            state = RegistryState.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Store file %s is corrupt, starting with an empty registry: %s",
                self.path,
                e.errors()[0]["msg"] if e.errors() else e,
            )
            return RegistryState()

        logger.debug(
            "Loaded %d pharmacies and %d medicines from %s",
            len(state.registry),
            len(state.index),
            self.path,
        )
        return state

    def save(self, state: RegistryState) -> bool:
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file then swap, so readers never see half a document
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(state.model_dump_json(indent=2))
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            logger.warning("Could not save store file %s: %s", self.path, e)
            return False
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.debug(
            "Saved %d pharmacies and %d medicines to %s",
            len(state.registry),
            len(state.index),
            self.path,
        )
        return True


# ---------------------------------------------------------------------------
# PostgreSQL backend
# ---------------------------------------------------------------------------


class PostgresStore(RecordStore):
    """Stores the document as one JSONB row of ``db.DOCUMENTS_TABLE``, keyed by ``doc_key``."""

    mode = "database"

    def __init__(self, doc_key: str = DOCUMENT_KEY):
        self.doc_key = doc_key

    def load(self) -> RegistryState:
        try:
            with db.get_conn() as conn:
                with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                    cur.execute(
                        "SELECT body FROM app_documents WHERE doc_key = %s",
                        (self.doc_key,),
                    )
                    row = cur.fetchone()
        except (psycopg2.Error, RuntimeError) as e:
            logger.warning("Could not read registry document from database: %s", e)
            return RegistryState()

        if row is None or not row["body"]:
            return RegistryState()

        try:
            return RegistryState.model_validate(row["body"])
        except ValidationError as e:
            logger.warning("Registry document %r is corrupt, starting empty: %s", self.doc_key, e)
            return RegistryState()

    def save(self, state: RegistryState) -> bool:
        try:
            with db.get_conn() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        INSERT INTO app_documents (doc_key, body, updated_at)
                        VALUES (%s, %s, now())
                        ON CONFLICT (doc_key)
                        DO UPDATE SET body = EXCLUDED.body, updated_at = now()
                        """,
                        (self.doc_key, extras.Json(state.model_dump(mode="json"))),
                    )
        except (psycopg2.Error, RuntimeError) as e:
            logger.warning("Could not save registry document to database: %s", e)
            return False
        return True
