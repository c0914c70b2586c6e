"""
Tests for db/store.py

Uses an in-memory SQLite store; no external database required.
"""

import asyncio
import os
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from db.schema import create_tables
from db.store import Store, StoreError, StoreNotOpenError, bind_positional


class TestBindPositional:
    def test_placeholders_numbered_in_order(self):
        sql, params = bind_positional("SELECT * FROM t WHERE a = ? AND b = ?", ["x", 2])
        assert sql == "SELECT * FROM t WHERE a = :p0 AND b = :p1"
        assert params == {"p0": "x", "p1": 2}

    def test_no_placeholders(self):
        assert bind_positional("SELECT 1", []) == ("SELECT 1", {})

    def test_count_mismatch_raises(self):
        with pytest.raises(StoreError):
            bind_positional("SELECT ? , ?", ["only-one"])


class TestStoreLifecycle:
    def test_execute_before_open_raises(self):
        store = Store("sqlite://")
        with pytest.raises(StoreNotOpenError):
            asyncio.run(store.execute("SELECT 1"))

    def test_open_is_idempotent_and_close_twice_is_safe(self):
        store = Store("sqlite://")
        assert store.open() is store.open()
        assert store.is_open
        store.close()
        store.close()
        assert not store.is_open

    def test_open_retries_then_raises(self):
        store = Store("sqlite://")
        error = OperationalError("SELECT 1", {}, Exception("unreachable"))

        with patch("db.store.create_engine") as create_engine, patch("db.store.time.sleep") as sleep:
            create_engine.return_value.connect.side_effect = error
            with pytest.raises(OperationalError):
                store.open(attempts=3, base_sleep=0.1)

        assert sleep.call_count == 3
        assert not store.is_open


class TestStoreExecute:
    def test_select_returns_dict_rows(self, store, seed):
        seed.contact("c-1", name="Jo")
        rows = asyncio.run(store.execute(
            "SELECT contact_id, contact_name FROM employee_contacts WHERE contact_id = ?",
            ["c-1"],
        ))
        assert rows == [{"contact_id": "c-1", "contact_name": "Jo"}]

    def test_write_returns_empty_list(self, store):
        rows = asyncio.run(store.execute(
            "INSERT INTO employee_contacts VALUES (?, ?, ?, ?)",
            ["c-2", "Sam", "123", "Sibling"],
        ))
        assert rows == []

    def test_driver_conversion_error_wrapped(self, store):
        with pytest.raises(StoreError):
            asyncio.run(store.execute(
                "SELECT 1 FROM employee_contacts WHERE contact_id = ?", [10**30]
            ))

    def test_sql_error_wrapped(self, store):
        with pytest.raises(StoreError) as exc:
            asyncio.run(store.execute("SELECT * FROM no_such_table"))
        assert exc.value.query == "SELECT * FROM no_such_table"


@pytest.mark.integration
class TestStoreAgainstDatabase:
    """Runs the bootstrap and a round trip on the database at TEST_DATABASE_URL."""

    def test_round_trip(self):
        store = Store(os.environ["TEST_DATABASE_URL"]).open()
        try:
            asyncio.run(create_tables(store))
            asyncio.run(store.execute(
                "INSERT INTO employee_contacts VALUES (?, ?, ?, ?)",
                ["it-contact", "Jo", "+44 1234567", "Friend"],
            ))
            rows = asyncio.run(store.execute(
                "SELECT contact_name FROM employee_contacts WHERE contact_id = ?",
                ["it-contact"],
            ))
            assert rows == [{"contact_name": "Jo"}]
        finally:
            asyncio.run(store.execute(
                "DELETE FROM employee_contacts WHERE contact_id = ?", ["it-contact"]
            ))
            store.close()
