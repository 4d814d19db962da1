"""Shared pytest fixtures for all tests."""

import sqlite3
import pytest
from datetime import date
from decimal import Decimal
from pathlib import Path

from config import Config, get_migrations_dir
from models.expense import Expense
from models.forms import ExpenseForm
from services.base import Services
from tests.helpers import run_migrations


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database.
    """
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary directory.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "kassza",
        db_data_dir=tmp_path / "kassza" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "kassza" / "logs",
        export_dir=tmp_path / "kassza" / "exports",
        default_monthly_budget=Decimal("500000"),
        spend_basis="all",
    )


@pytest.fixture
def db_manager_with_schema(test_db):
    """Create a DatabaseManager with schema already set up.

    This fixture provides a DatabaseManager that uses an in-memory database
    with all migrations already applied.

    Args:
        test_db: In-memory database connection fixture.

    Returns:
        DatabaseManager: Database manager with schema ready.
    """
    run_migrations(test_db, get_migrations_dir())

    class TestDatabaseManager:
        """Test database manager that uses in-memory connection."""

        def __init__(self, conn):
            self.conn = conn

        def connect(self):
            """Return a context manager for the test connection."""
            return _TestConnectionContext(self.conn)

        def get_db_path(self):
            """Return a fake path for the test database."""
            return Path(":memory:")

        def get_migrations_dir(self):
            """Get the migrations directory path."""
            return get_migrations_dir()

    class _TestConnectionContext:
        """Context manager for test database connections."""

        def __init__(self, conn):
            self.conn = conn

        def __enter__(self):
            return self.conn

        def __exit__(self, exc_type, exc_val, exc_tb):
            # Don't close the connection - let the fixture handle it
            pass

    return TestDatabaseManager(test_db)


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Create a Services container with test database.

    Sessions are kept in memory so tests never touch a session file.

    Returns:
        Services: Services container for testing.
    """
    return Services(test_config, db_manager=db_manager_with_schema, remember_session=False)


@pytest.fixture
def ledger(services):
    """Register a user and load their (empty) ledger.

    Returns:
        Ledger: Ledger of the signed-in test user.
    """
    services.identity.register("anna@example.com", "secret123")
    return services.load_ledger()


@pytest.fixture
def make_expense():
    """Factory for in-memory Expense objects used by the pure tools tests."""

    def _make(
        full_price="1000",
        primary="Essential Maintenance",
        match=100,
        secondary="",
        day=date(2024, 1, 15),
        recurring=False,
        name="Item",
    ):
        return Expense(
            id=None,
            owner_id="user-1",
            name=name,
            full_price=Decimal(full_price),
            date=day,
            primary_category=primary,
            category_match=match,
            secondary_category=secondary,
            is_recurring=recurring,
        )

    return _make


@pytest.fixture
def expense_form():
    """Factory for valid ExpenseForm objects."""

    def _make(**overrides):
        fields = {
            "name": "groceries",
            "full_price": Decimal("10000"),
            "date": date(2024, 1, 15),
            "primary_category": "Essential Maintenance",
        }
        fields.update(overrides)
        return ExpenseForm(**fields)

    return _make
