"""Helper utilities for tests."""

from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
import sqlite3

from config import get_migrations_dir
from models.transaction import Transaction
from notifications.dispatchers.base import NotificationDispatcher

def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    for migration_file in sorted(migrations_dir.glob("*.sql")):
        conn.executescript(migration_file.read_text())

    conn.commit()


class MemoryDatabaseManager:
    """DatabaseManager stand-in that hands out one shared in-memory connection.

    connect() never closes the connection; the test_db fixture owns it.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    @contextmanager
    def connect(self):
        yield self.conn

    def get_db_path(self) -> Path:
        return Path(":memory:")

    def get_migrations_dir(self) -> Path:
        return get_migrations_dir()

def utc(*args) -> datetime:
    """Shorthand for an aware UTC datetime."""
    return datetime(*args, tzinfo=timezone.utc)

def record(services, user_id, category, amount, when, **kwargs) -> Transaction:
    """Record a transaction whose type follows its category."""
    return services.transactions.create(
        Transaction(
            id=None,
            user_id=user_id,
            type=category.type,
            amount=Decimal(str(amount)),
            category_id=category.id,
            date=when,
            **kwargs,
        )
    )

class RecordingDispatcher(NotificationDispatcher):
    """Dispatcher that collects requests instead of delivering them."""

    def __init__(self):
        self.sent = []

    def dispatch(self, request) -> None:
        self.sent.append(request)

    def kinds(self) -> list:
        return [request.kind for request in self.sent]

class FailingDispatcher(NotificationDispatcher):
    """Dispatcher that fails for one recipient."""

    def __init__(self, failing_recipient):
        self.failing_recipient = failing_recipient
        self.sent = []

    def dispatch(self, request) -> None:
        if request.recipient == self.failing_recipient:
            raise ConnectionError(f"Mail server rejected {request.recipient}")
        self.sent.append(request)
