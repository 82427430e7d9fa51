"""
PostgreSQL storage handle.

Connects using DATABASE_URL (preferred) or individual
PGHOST/PGPORT/PGUSER/PGPASSWORD/PGDATABASE environment variables.

This module is provider-agnostic and works with Railway, Render, Heroku,
or any PostgreSQL instance.
"""

import os
import logging
from typing import Any, Optional, Sequence

import psycopg2
from psycopg2.extras import RealDictCursor

from database import Database

logger = logging.getLogger(__name__)


def get_connection_string(database_url: Optional[str] = None) -> str:
    """
    Get the PostgreSQL connection string.

    Priority:
    1. Explicit database_url argument
    2. DATABASE_URL environment variable (standard for Railway, Heroku, etc.)
    3. Individual PG* environment variables (PGHOST, PGPORT, PGUSER, PGPASSWORD, PGDATABASE)

    Raises:
        ValueError: If no valid connection configuration is found
    """
    database_url = database_url or os.getenv('DATABASE_URL')
    if database_url:
        return database_url

    pghost = os.getenv('PGHOST')
    pgport = os.getenv('PGPORT', '5432')
    pguser = os.getenv('PGUSER')
    pgpassword = os.getenv('PGPASSWORD')
    pgdatabase = os.getenv('PGDATABASE')

    if pghost and pguser and pgpassword and pgdatabase:
        return f"postgresql://{pguser}:{pgpassword}@{pghost}:{pgport}/{pgdatabase}"

    raise ValueError(
        "Database connection not configured. "
        "Set DATABASE_URL or PGHOST/PGUSER/PGPASSWORD/PGDATABASE environment variables."
    )


class PostgresDatabase(Database):
    """Storage handle backed by PostgreSQL; rows come back as dictionaries."""

    placeholder = "%s"
    schema = (
        """
        CREATE TABLE IF NOT EXISTS scores (
            id SERIAL PRIMARY KEY,
            nickname TEXT NOT NULL,
            score INTEGER NOT NULL,
            created_at TEXT NOT NULL
        )
        """,
        "CREATE INDEX IF NOT EXISTS idx_scores_created_at ON scores (created_at DESC)",
        "CREATE INDEX IF NOT EXISTS idx_scores_score ON scores (score DESC)",
    )

    def __init__(self, database_url: Optional[str] = None, conn: Any = None):
        if conn is None:
            try:
                conn = psycopg2.connect(get_connection_string(database_url), cursor_factory=RealDictCursor)
            except Exception as e:
                logger.error(f"Failed to connect to PostgreSQL: {e}")
                raise
        super().__init__(conn)
        logger.info("Connected to PostgreSQL")

    def insert(self, cursor: Any, query: str, params: Sequence[Any]) -> int:
        cursor.execute(self.sql(query) + " RETURNING id", tuple(params))
        return cursor.fetchone()['id']
