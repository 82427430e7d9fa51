"""
Score repository for leaderboard database operations.

The scores table is append-only: rows are inserted and read, never updated
or deleted.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from .base import BaseRepository

WEEKLY_WINDOW = timedelta(days=7)

# Fixed-width UTC format so text comparison matches chronological order
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render an aware datetime as the stored UTC text form."""
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


class ScoreRepository(BaseRepository):
    """
    Repository for scores table operations.
    """

    # -------------------------------------------------------------------------
    # Write operations
    # -------------------------------------------------------------------------

    def insert_score(self, nickname: str, score: int, created_at: Optional[datetime] = None) -> int:
        """
        Append a score record.

        Args:
            nickname: Validated player nickname
            score: Validated score
            created_at: Creation time, defaults to now (UTC)

        Returns:
            The id assigned by the storage engine
        """
        created = format_timestamp(created_at or utc_now())
        with self.connection() as (conn, cursor):
            return self.db.insert(
                cursor,
                "INSERT INTO scores (nickname, score, created_at) VALUES (?, ?, ?)",
                (nickname, score, created),
            )

    # -------------------------------------------------------------------------
    # Query operations
    # -------------------------------------------------------------------------

    def get_top_scores(self, limit: int) -> List[Dict[str, Any]]:
        """
        Get the best scores of all time.

        Ties are broken by submission time, earliest first.
        """
        with self.read_connection() as (conn, cursor):
            cursor.execute(self.db.sql("""
                SELECT id, nickname, score, created_at
                FROM scores
                ORDER BY score DESC, created_at ASC, id ASC
                LIMIT ?
            """), (limit,))

            return [self._row_to_record(row) for row in cursor.fetchall()]

    def get_weekly_top_scores(self, limit: int, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """
        Get the best scores submitted during the 7 days before `now`.
        """
        cutoff = format_timestamp((now or utc_now()) - WEEKLY_WINDOW)
        with self.read_connection() as (conn, cursor):
            cursor.execute(self.db.sql("""
                SELECT id, nickname, score, created_at
                FROM scores
                WHERE created_at >= ?
                ORDER BY score DESC, created_at ASC, id ASC
                LIMIT ?
            """), (cutoff, limit))

            return [self._row_to_record(row) for row in cursor.fetchall()]

    def get_rank_for_score(self, score: int) -> int:
        """
        1 + number of stored scores strictly greater than `score`.

        Equal scores share a rank.
        """
        with self.read_connection() as (conn, cursor):
            cursor.execute(
                self.db.sql("SELECT COUNT(*) AS better FROM scores WHERE score > ?"),
                (score,),
            )
            row = cursor.fetchone()
            return row['better'] + 1

    def get_total_count(self) -> int:
        with self.read_connection() as (conn, cursor):
            cursor.execute("SELECT COUNT(*) AS total FROM scores")
            return cursor.fetchone()['total']

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _row_to_record(self, row: Any) -> Dict[str, Any]:
        """Convert a database row to the wire representation."""
        return {
            'id': row['id'],
            'nickname': row['nickname'],
            'score': row['score'],
            'createdAt': row['created_at'],
        }
