"""
Repositories for the leaderboard tables.

Each repository wraps one table and borrows connections from the shared
storage handle.
"""

from .base import BaseRepository
from .score_repository import ScoreRepository

__all__ = ['BaseRepository', 'ScoreRepository']
