"""
Data access layer for the leaderboard database.

The repositories take an explicitly opened storage handle (see database.py)
instead of reaching for a global connection.
"""

from .repositories import BaseRepository, ScoreRepository
from .repositories.score_repository import format_timestamp, utc_now

__all__ = [
    'BaseRepository',
    'ScoreRepository',
    'format_timestamp',
    'utc_now',
]
