"""SQLite connection handling for the Spendwise store."""

import sqlite3
from contextlib import contextmanager
from config import Config, get_migrations_dir

# Seconds a writer waits on a locked database, e.g. while a report run reads.
BUSY_TIMEOUT = 5.0


class DatabaseManager:
    """Opens connections to the configured database file.

    Every connection enforces foreign keys, so deleting a user cascades to
    their categories, transactions, budgets, goals and queued notifications.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        self.config = config

    @contextmanager
    def connect(self):
        """Get a database connection with automatic cleanup.

        Yields:
            sqlite3.Connection: Connection with foreign keys enforced.
        """
        db_path = self.get_db_path()
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path, timeout=BUSY_TIMEOUT)
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    def get_db_path(self):
        """Path to the database file."""
        return self.config.db_path

    def get_migrations_dir(self):
        """Directory holding the numbered .sql migrations."""
        return get_migrations_dir()
