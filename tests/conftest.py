"""Shared pytest fixtures for all tests."""

import sqlite3
import pytest

from config import Config, get_migrations_dir
from services.base import Services
from tests.helpers import MemoryDatabaseManager, RecordingDispatcher, run_migrations


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database.
    """
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary database.

    Day boundaries are computed in UTC so expected datetimes stay readable.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "spendwise",
        db_data_dir=tmp_path / "spendwise" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "spendwise" / "logs",
        timezone="UTC",
        currency_symbol="₹",
        category_limit=7,
        top_categories=5,
        dispatcher="log",
    )


@pytest.fixture
def db_manager_with_schema(test_db):
    """In-memory database with every migration applied.

    Args:
        test_db: In-memory database connection fixture.

    Returns:
        MemoryDatabaseManager: Manager sharing the fixture's connection.
    """
    run_migrations(test_db, get_migrations_dir())
    return MemoryDatabaseManager(test_db)


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Create a Services container with test database.

    Args:
        test_config: Test configuration fixture.
        db_manager_with_schema: Database manager with schema set up.

    Returns:
        Services: Services container for testing.
    """
    return Services(test_config, db_manager=db_manager_with_schema)


@pytest.fixture
def user(services):
    """A user opted in to every email."""
    return services.users.create("Asha", "asha@example.com")


@pytest.fixture
def food(services):
    """Predefined expense category."""
    return services.categories.create("Food", "expense", color="#FF6384")


@pytest.fixture
def salary(services):
    """Predefined income category."""
    return services.categories.create("Salary", "income", color="#4CAF50")


@pytest.fixture
def dispatcher():
    """Dispatcher that keeps requests in memory."""
    return RecordingDispatcher()
