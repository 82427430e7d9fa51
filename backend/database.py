"""
Database handles and schema management for the leaderboard.

A handle is constructed once at startup, passed to the repositories and
closed on shutdown:

    with open_database(Config) as db:
        db.init_schema()
        ...

SQLite is the default engine; PostgreSQL is used when DATABASE_URL points
to a postgres server (see database_postgres.py).
"""

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Optional, Sequence

logger = logging.getLogger(__name__)


class Database:
    """
    Base class for storage handles.

    Owns a single connection shared by every request handler. Each
    `connection()` block holds the handle's lock, so one operation runs at a
    time against the shared connection.
    """

    placeholder = "?"
    schema: Sequence[str] = ()

    def __init__(self, conn: Any):
        self._conn = conn
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._conn is None

    def sql(self, query: str) -> str:
        """Rewrite `?` placeholders to the driver's paramstyle."""
        if self.placeholder == "?":
            return query
        return query.replace("?", self.placeholder)

    @contextmanager
    def connection(self, auto_commit: bool = True) -> Generator[Any, None, None]:
        """
        Context manager for database operations.

        Automatically handles:
        - Committing on successful exit (if auto_commit=True)
        - Rolling back on exception
        - Closing the cursor in all cases

        Yields:
            A tuple of (connection, cursor) for database operations.
        """
        if self._conn is None:
            raise RuntimeError("Database handle is closed")

        with self._lock:
            cursor = self._conn.cursor()
            try:
                yield self._conn, cursor
                if auto_commit:
                    self._conn.commit()
                else:
                    # End the read transaction so the connection is not left idle in it
                    self._conn.rollback()
            except Exception:
                self._conn.rollback()
                raise
            finally:
                cursor.close()

    def insert(self, cursor: Any, query: str, params: Sequence[Any]) -> int:
        """Execute an INSERT and return the new row id."""
        raise NotImplementedError

    def init_schema(self) -> None:
        """
        Initialize the schema with all required tables and indexes.
        Safe to call multiple times (uses IF NOT EXISTS).
        """
        with self.connection() as (conn, cursor):
            for statement in self.schema:
                cursor.execute(statement)
        logger.info("Database schema initialized")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.info("Database connection closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class SQLiteDatabase(Database):
    """Storage handle backed by a SQLite file."""

    schema = (
        """
        CREATE TABLE IF NOT EXISTS scores (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            nickname TEXT NOT NULL,
            score INTEGER NOT NULL,
            created_at TEXT NOT NULL
        )
        """,
        "CREATE INDEX IF NOT EXISTS idx_scores_created_at ON scores (created_at DESC)",
        "CREATE INDEX IF NOT EXISTS idx_scores_score ON scores (score DESC)",
    )

    def __init__(self, path: str):
        if path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(path, check_same_thread=False)
        conn.row_factory = sqlite3.Row  # Enable column access by name
        super().__init__(conn)
        self.path = path
        logger.info(f"Opened SQLite database at: {path}")

    def insert(self, cursor: Any, query: str, params: Sequence[Any]) -> int:
        cursor.execute(self.sql(query), tuple(params))
        return cursor.lastrowid


def get_database_path(config: Optional[Any] = None) -> str:
    """
    Determine the SQLite database path.

    Priority:
    1. `SQLITE_PATH` on the given config object
    2. SQLITE_PATH environment variable
    3. backend/data/leaderboard.sqlite
    """
    path = getattr(config, 'SQLITE_PATH', None) or os.getenv('SQLITE_PATH')
    if path:
        return path
    return str(Path(__file__).parent / 'data' / 'leaderboard.sqlite')


def open_database(config: Optional[Any] = None) -> Database:
    """
    Open the storage handle described by the configuration.

    A postgres DATABASE_URL selects PostgreSQL, anything else uses SQLite.
    """
    database_url = getattr(config, 'DATABASE_URL', None) or os.getenv('DATABASE_URL')
    if database_url and database_url.startswith(("postgres://", "postgresql://")):
        from database_postgres import PostgresDatabase

        return PostgresDatabase(database_url)

    return SQLiteDatabase(get_database_path(config))


if __name__ == "__main__":
    # Allow running this module directly to initialize the database
    logging.basicConfig(level=logging.INFO)
    from config import Config

    with open_database(Config) as db:
        db.init_schema()
    print("Database ready")
