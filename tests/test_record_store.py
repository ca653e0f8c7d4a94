"""Tests for the record store backends."""

from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock, patch

import psycopg2

from pharmacy_locator.models import Pharmacy, RegistryState, StockEntry, StockStatus
from pharmacy_locator.registry.record_store import JsonFileStore, PostgresStore


def _sample_state() -> RegistryState:
    return RegistryState(
        registry=[Pharmacy(id=1001, name="Sri Sai Medicals", address="Residency Road", phone="98450", lat=12.96, lon=77.60)],
        index={"paracetamol": [StockEntry(pharmacy_id=1001, price=32.0, stock=StockStatus.AVAILABLE)]},
    )


# ---- JsonFileStore ----------------------------------------------------------


class TestJsonFileStoreLoad:
    def test_missing_file_is_empty(self, tmp_path):
        state = JsonFileStore(tmp_path / "absent.json").load()
        assert state.registry == []
        assert state.index == {}

    def test_empty_file_is_empty(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text("   ")
        assert JsonFileStore(path).load() == RegistryState()

    def test_corrupt_json_is_empty_and_logged(self, tmp_path, caplog):
        path = tmp_path / "db.json"
        path.write_text("{not json")
        with caplog.at_level(logging.WARNING):
            state = JsonFileStore(path).load()
        assert state == RegistryState()
        assert "corrupt" in caplog.text

    def test_wrong_shape_is_empty(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text(json.dumps({"registry": [{"name": "no id"}], "index": {}}))
        assert JsonFileStore(path).load() == RegistryState()

    def test_unreadable_path_is_empty(self, tmp_path, caplog):
        """A directory where the file should be cannot be read."""
        with caplog.at_level(logging.WARNING):
            state = JsonFileStore(tmp_path).load()
        assert state == RegistryState()
        assert "Could not read" in caplog.text

    def test_legacy_stock_labels(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text(json.dumps({
            "registry": [],
            "index": {
                "paracetamol": [
                    {"pharmacy_id": 1001, "price": 30, "stock": "In Stock"},
                    {"pharmacy_id": 1002, "price": 31, "stock": "Out of Stock"},
                ],
            },
        }))
        entries = JsonFileStore(path).load().index["paracetamol"]
        assert [e.stock for e in entries] == [StockStatus.AVAILABLE, StockStatus.UNAVAILABLE]

    def test_keys_normalized_and_empty_dropped(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text(json.dumps({
            "registry": [],
            "index": {
                "Paracetamol": [{"pharmacy_id": 1001, "price": 30, "stock": "Available"}],
                "paracetamol": [{"pharmacy_id": 1001, "price": 35, "stock": "Unavailable"}],
                "Cetirizine": [],
            },
        }))
        index = JsonFileStore(path).load().index
        assert list(index) == ["paracetamol"]
        assert len(index["paracetamol"]) == 1
        assert index["paracetamol"][0].price == 35


class TestJsonFileStoreSave:
    def test_round_trip(self, tmp_path):
        store = JsonFileStore(tmp_path / "db.json")
        assert store.save(_sample_state()) is True
        assert store.load() == _sample_state()

    def test_creates_parent_directories(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested" / "dir" / "db.json")
        assert store.save(_sample_state()) is True
        assert store.path.exists()

    def test_document_layout(self, tmp_path):
        store = JsonFileStore(tmp_path / "db.json")
        store.save(_sample_state())
        doc = json.loads(store.path.read_text())
        assert set(doc) == {"registry", "index"}
        assert doc["index"]["paracetamol"][0] == {"pharmacy_id": 1001, "price": 32.0, "stock": "Available"}

    def test_write_failure_is_logged_not_raised(self, tmp_path, caplog):
        """Saving onto a directory fails; the error is reported, not raised."""
        target = tmp_path / "occupied"
        target.mkdir()
        store = JsonFileStore(target)
        with caplog.at_level(logging.WARNING):
            assert store.save(_sample_state()) is False
        assert "Could not save" in caplog.text
        # No temp files left behind
        assert [p.name for p in tmp_path.iterdir()] == ["occupied"]


# ---- PostgresStore ----------------------------------------------------------


def _mock_conn(row=None, error=None):
    conn = MagicMock()
    cur = conn.cursor.return_value.__enter__.return_value
    cur.fetchone.return_value = row
    if error is not None:
        cur.execute.side_effect = error
    get_conn = MagicMock()
    get_conn.return_value.__enter__.return_value = conn
    get_conn.return_value.__exit__.return_value = False
    return get_conn, cur


class TestPostgresStore:
    def test_load_without_pool_is_empty(self):
        with patch("pharmacy_locator.registry.db._pool", None):
            assert PostgresStore().load() == RegistryState()

    def test_save_without_pool_fails_softly(self):
        with patch("pharmacy_locator.registry.db._pool", None):
            assert PostgresStore().save(_sample_state()) is False

    def test_load_parses_document(self):
        body = _sample_state().model_dump(mode="json")
        get_conn, cur = _mock_conn(row={"body": body})
        with patch("pharmacy_locator.registry.record_store.db.get_conn", get_conn):
            state = PostgresStore().load()
        assert state == _sample_state()
        assert cur.execute.call_args[0][1] == ("app_database",)

    def test_load_missing_row_is_empty(self):
        get_conn, _ = _mock_conn(row=None)
        with patch("pharmacy_locator.registry.record_store.db.get_conn", get_conn):
            assert PostgresStore().load() == RegistryState()

    def test_load_database_error_is_empty(self):
        get_conn, _ = _mock_conn(error=psycopg2.OperationalError("connection lost"))
        with patch("pharmacy_locator.registry.record_store.db.get_conn", get_conn):
            assert PostgresStore().load() == RegistryState()

    def test_save_upserts_document(self):
        get_conn, cur = _mock_conn()
        with patch("pharmacy_locator.registry.record_store.db.get_conn", get_conn):
            assert PostgresStore(doc_key="test_doc").save(_sample_state()) is True
        sql, params = cur.execute.call_args[0]
        assert "ON CONFLICT (doc_key)" in sql
        assert params[0] == "test_doc"
        assert params[1].adapted["index"]["paracetamol"][0]["pharmacy_id"] == 1001

    def test_save_database_error_returns_false(self):
        get_conn, _ = _mock_conn(error=psycopg2.OperationalError("read-only"))
        with patch("pharmacy_locator.registry.record_store.db.get_conn", get_conn):
            assert PostgresStore().save(_sample_state()) is False

