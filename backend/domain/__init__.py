"""
Domain entities for the Snake game engine.

This module contains the core game entities that are independent of
infrastructure concerns (database, HTTP, terminal rendering).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES,
    IDLE, RUNNING, GAME_OVER,
    FOOD_SCORE, SPEED_MULTIPLIERS,
)
from .snake import Snake
from .game_state import GameState
from .engine import GameCallbacks, GameConfig, SnakeGame

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES',
    'IDLE', 'RUNNING', 'GAME_OVER',
    'FOOD_SCORE', 'SPEED_MULTIPLIERS',
    'Snake',
    'GameState',
    'GameCallbacks',
    'GameConfig',
    'SnakeGame',
]
