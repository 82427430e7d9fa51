"""
Base repository bound to an explicit storage handle.

Repositories never open connections on their own: the handle is created at
startup and shared, and every operation goes through its transaction
context manager:
- Transaction commit on success
- Transaction rollback on failure
"""

from contextlib import contextmanager
from typing import Any, Generator

from database import Database


class BaseRepository:
    """
    Base class for all repositories.

    Subclasses should use self.connection() for writes and
    self.read_connection() for queries.
    """

    def __init__(self, db: Database):
        self.db = db

    @contextmanager
    def connection(self) -> Generator[Any, None, None]:
        """
        Yields:
            A tuple of (connection, cursor); committed on successful exit.

        Example:
            with self.connection() as (conn, cursor):
                cursor.execute(self.db.sql("SELECT * FROM scores"))
                results = cursor.fetchall()
        """
        with self.db.connection(auto_commit=True) as handle:
            yield handle

    @contextmanager
    def read_connection(self) -> Generator[Any, None, None]:
        """
        Same as connection() but with auto_commit=False since
        read operations don't need commits.
        """
        with self.db.connection(auto_commit=False) as handle:
            yield handle
