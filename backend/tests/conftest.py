"""
Root pytest configuration for backend tests.

Provides:
- Shared fixtures (store, app, client)
- A mock store for tests that assert on the queries issued
- Row seeding helper (seed)
"""

import asyncio
import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

# Add backend directory to Python path so imports like
# `from db.store import ...` and `from utils.validators import ...` work
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

import pytest

from db.schema import create_tables
from db.store import Store


@pytest.fixture
def store():
    """Open in-memory SQLite store with both tables created."""
    store = Store("sqlite://").open()
    asyncio.run(create_tables(store))
    yield store
    store.close()


@pytest.fixture
def mock_store():
    """Store double whose execute() records calls and returns no rows."""
    mock = Mock(spec=Store)
    mock.execute = AsyncMock(return_value=[])
    return mock


def _build_app(store):
    from app import create_app

    app = create_app(store=store)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def app(store):
    """Create test Flask application backed by the SQLite store."""
    return _build_app(store)


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def mock_app(mock_store):
    """Create test Flask application backed by the mock store."""
    return _build_app(mock_store)


@pytest.fixture
def mock_client(mock_app):
    return mock_app.test_client()


class Seeder:
    """Insert and read rows through the real store."""

    def __init__(self, store):
        self.store = store

    def contact(self, contact_id, name="Jo", phone="+44 1234567", relation="Friend"):
        asyncio.run(self.store.execute(
            "INSERT INTO employee_contacts (contact_id, contact_name, contact_phone, contact_relation) "
            "VALUES (?, ?, ?, ?)",
            [contact_id, name, phone, relation],
        ))

    def employee(self, employee_id, primary_contact_id=None, secondary_contact_id=None, **overrides):
        row = {
            "employee_name": "Ada Lovelace",
            "employee_title": "Engineer",
            "employee_phone": "+44 2071234567",
            "employee_mail": "ada@example.com",
            "employee_address_street": "12 St James's Square",
            "employee_address_city": "London",
            "employee_address_state": "Greater London",
        }
        row.update(overrides)
        asyncio.run(self.store.execute(
            "INSERT INTO employee_data (employee_id, employee_name, employee_title, employee_phone, "
            "employee_mail, employee_address_street, employee_address_city, employee_address_state, "
            "primary_alternate_contact_id, secondary_alternate_contact_id) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            [
                employee_id,
                row["employee_name"],
                row["employee_title"],
                row["employee_phone"],
                row["employee_mail"],
                row["employee_address_street"],
                row["employee_address_city"],
                row["employee_address_state"],
                primary_contact_id,
                secondary_contact_id,
            ],
        ))

    def rows(self, query, args=()):
        return asyncio.run(self.store.execute(query, args))


@pytest.fixture
def seed(store):
    return Seeder(store)
