"""
Tests for the data_access layer and the storage handles.

SQLite tests run against a temporary database file; PostgreSQL tests mock
the driver connection to verify the SQL without a server.
"""

import pytest
import sys
import os
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data_access import ScoreRepository, format_timestamp
from database import SQLiteDatabase, open_database, get_database_path
from database_postgres import PostgresDatabase, get_connection_string

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture()
def db(tmp_path):
    handle = SQLiteDatabase(str(tmp_path / "scores.sqlite"))
    handle.init_schema()
    yield handle
    handle.close()


@pytest.fixture()
def repo(db):
    return ScoreRepository(db)


class TestFormatTimestamp:

    def test_fixed_width_utc(self):
        assert format_timestamp(NOW) == "2026-10-18T12:00:00.000000Z"

    def test_converts_to_utc(self):
        local = datetime(2026, 10, 18, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(local) == "2026-10-18T12:00:00.000000Z"


class TestSQLiteDatabase:

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "scores.sqlite"
        with SQLiteDatabase(str(path)) as handle:
            handle.init_schema()
        assert path.exists()

    def test_init_schema_is_idempotent(self, db):
        db.init_schema()
        with db.connection(auto_commit=False) as (conn, cursor):
            cursor.execute("SELECT name FROM sqlite_master WHERE type = 'index' AND tbl_name = 'scores'")
            names = {row['name'] for row in cursor.fetchall()}
        assert {'idx_scores_score', 'idx_scores_created_at'} <= names

    def test_context_manager_closes(self, tmp_path):
        with SQLiteDatabase(str(tmp_path / "x.sqlite")) as handle:
            pass
        assert handle.closed
        with pytest.raises(RuntimeError):
            with handle.connection():
                pass

    def test_rollback_on_error(self, db, repo):
        with pytest.raises(ValueError):
            with db.connection() as (conn, cursor):
                cursor.execute(
                    "INSERT INTO scores (nickname, score, created_at) VALUES (?, ?, ?)",
                    ("Ann", 10, format_timestamp(NOW)),
                )
                raise ValueError("boom")
        assert repo.get_total_count() == 0

    def test_open_database_defaults_to_sqlite(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        class Cfg:
            DATABASE_URL = None
            SQLITE_PATH = str(tmp_path / "cfg.sqlite")

        with open_database(Cfg) as handle:
            assert isinstance(handle, SQLiteDatabase)
            assert handle.path == Cfg.SQLITE_PATH

    def test_get_database_path_from_env(self, monkeypatch):
        monkeypatch.setenv("SQLITE_PATH", "/tmp/elsewhere.sqlite")
        assert get_database_path() == "/tmp/elsewhere.sqlite"


class TestScoreRepository:

    def test_insert_returns_increasing_ids(self, repo):
        first = repo.insert_score("Ann", 50)
        second = repo.insert_score("Bob", 80)
        assert second > first
        assert repo.get_total_count() == 2

    def test_top_scores_order(self, repo):
        repo.insert_score("Ann", 50, created_at=NOW - timedelta(minutes=3))
        repo.insert_score("Bob", 80, created_at=NOW - timedelta(minutes=2))
        repo.insert_score("Cid", 80, created_at=NOW - timedelta(minutes=1))

        items = repo.get_top_scores(10)

        assert [item['nickname'] for item in items] == ["Bob", "Cid", "Ann"]
        assert set(items[0]) == {'id', 'nickname', 'score', 'createdAt'}

    def test_top_scores_respects_limit(self, repo):
        for score in (10, 20, 30, 40):
            repo.insert_score("Ann", score)
        items = repo.get_top_scores(2)
        assert [item['score'] for item in items] == [40, 30]

    def test_weekly_excludes_old_records(self, repo):
        repo.insert_score("Old", 900, created_at=NOW - timedelta(days=8))
        repo.insert_score("Edge", 100, created_at=NOW - timedelta(days=6, hours=23))
        repo.insert_score("New", 50, created_at=NOW - timedelta(hours=1))

        items = repo.get_weekly_top_scores(10, now=NOW)

        assert [item['nickname'] for item in items] == ["Edge", "New"]
        cutoff = format_timestamp(NOW - timedelta(days=7))
        assert all(item['createdAt'] >= cutoff for item in items)

    def test_rank_counts_strictly_greater(self, repo):
        for score in (100, 80, 80, 50):
            repo.insert_score("Ann", score)

        assert repo.get_rank_for_score(120) == 1
        assert repo.get_rank_for_score(100) == 1
        assert repo.get_rank_for_score(80) == 2
        assert repo.get_rank_for_score(50) == 4
        assert repo.get_rank_for_score(1) == 5

    def test_rank_is_monotonic(self, repo):
        for score in (5, 10, 10, 40, 70, 70, 99):
            repo.insert_score("Ann", score)
        ranks = [repo.get_rank_for_score(s) for s in range(0, 110, 5)]
        # Higher scores never get a worse rank
        assert ranks == sorted(ranks, reverse=True)


class TestPostgresDatabase:
    """PostgresDatabase with a mocked psycopg2 connection."""

    def make_db(self, cursor):
        conn = MagicMock()
        conn.cursor.return_value = cursor
        return PostgresDatabase(conn=conn), conn

    def test_rewrites_placeholders(self):
        db, _ = self.make_db(MagicMock())
        assert db.sql("SELECT * FROM scores WHERE score > ? LIMIT ?") == \
            "SELECT * FROM scores WHERE score > %s LIMIT %s"

    def test_insert_uses_returning(self):
        cursor = MagicMock()
        cursor.fetchone.return_value = {'id': 42}
        db, conn = self.make_db(cursor)

        new_id = ScoreRepository(db).insert_score("Ann", 50, created_at=NOW)

        assert new_id == 42
        query, params = cursor.execute.call_args[0]
        assert query.endswith("RETURNING id")
        assert "%s" in query
        assert params == ("Ann", 50, "2026-10-18T12:00:00.000000Z")
        conn.commit.assert_called_once()

    def test_rank_query(self):
        cursor = MagicMock()
        cursor.fetchone.return_value = {'better': 3}
        db, conn = self.make_db(cursor)

        assert ScoreRepository(db).get_rank_for_score(70) == 4
        query, params = cursor.execute.call_args[0]
        assert "score > %s" in query
        assert params == (70,)
        conn.commit.assert_not_called()
        # Reads end their transaction
        conn.rollback.assert_called_once()

    def test_error_rolls_back(self):
        cursor = MagicMock()
        cursor.execute.side_effect = RuntimeError("connection lost")
        db, conn = self.make_db(cursor)

        with pytest.raises(RuntimeError):
            ScoreRepository(db).insert_score("Ann", 50)
        conn.rollback.assert_called_once()
        cursor.close.assert_called_once()

    @patch('database_postgres.psycopg2.connect')
    def test_open_database_selects_postgres(self, mock_connect):
        class Cfg:
            DATABASE_URL = "postgresql://user:pw@localhost:5432/snake"
            SQLITE_PATH = None

        handle = open_database(Cfg)

        assert isinstance(handle, PostgresDatabase)
        assert mock_connect.call_args[0][0] == Cfg.DATABASE_URL

    def test_connection_string_from_pg_variables(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("PGHOST", "db")
        monkeypatch.setenv("PGUSER", "snake")
        monkeypatch.setenv("PGPASSWORD", "secret")
        monkeypatch.setenv("PGDATABASE", "scores")
        monkeypatch.delenv("PGPORT", raising=False)

        assert get_connection_string() == "postgresql://snake:secret@db:5432/scores"

    def test_connection_string_missing(self, monkeypatch):
        for name in ("DATABASE_URL", "PGHOST", "PGUSER", "PGPASSWORD", "PGDATABASE"):
            monkeypatch.delenv(name, raising=False)
        with pytest.raises(ValueError):
            get_connection_string()
