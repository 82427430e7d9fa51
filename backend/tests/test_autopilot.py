"""
Tests for the autopilot player.
"""

import random
import sys
import os

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain import GameState, UP, DOWN, LEFT, RIGHT, VALID_MOVES, RUNNING
from players import AutopilotPlayer, Player


def make_state(snake, food=None, obstacles=(), direction=RIGHT, grid_size=10):
    return GameState(
        grid_size=grid_size,
        snake=tuple(snake),
        food=food,
        obstacles=frozenset(obstacles),
        score=0,
        max_score=0,
        direction=direction,
        status=RUNNING,
    )


class TestAutopilotPlayer:

    def setup_method(self):
        self.player = AutopilotPlayer(rng=random.Random(1))

    def test_is_a_player(self):
        assert isinstance(self.player, Player)

    def test_returns_valid_move(self):
        state = make_state([(5, 5), (4, 5), (3, 5)], food=(8, 8))
        assert self.player.get_move(state) in VALID_MOVES

    def test_never_reverses(self):
        state = make_state([(5, 5), (4, 5), (3, 5)], food=(0, 5))
        for _ in range(20):
            assert self.player.get_move(state) != LEFT

    def test_heads_towards_food(self):
        state = make_state([(5, 5), (4, 5), (3, 5)], food=(5, 1))
        assert self.player.get_move(state) == UP

    def test_avoids_walls(self):
        """Only DOWN is safe from the top right corner heading right."""
        state = make_state([(9, 0), (8, 0), (7, 0)], food=(9, 5))
        assert self.player.get_move(state) == DOWN

    def test_avoids_obstacles(self):
        state = make_state([(5, 5), (4, 5), (3, 5)], food=(8, 5), obstacles=[(6, 5)])
        assert self.player.get_move(state) in {UP, DOWN}

    def test_avoids_own_body(self):
        snake = [(5, 5), (5, 6), (4, 6), (4, 5), (4, 4)]
        state = make_state(snake, food=(0, 5), direction=UP)
        assert self.player.get_move(state) in {UP, RIGHT}

    def test_trapped_keeps_direction(self):
        snake = [(0, 0), (1, 0), (1, 1), (0, 1)]
        state = make_state(snake, food=(5, 5), direction=UP)
        assert self.player.safe_moves(state) == []
        assert self.player.get_move(state) == UP

    def test_moves_randomly_without_food(self):
        state = make_state([(5, 5), (4, 5), (3, 5)], food=None)
        assert self.player.get_move(state) in {UP, DOWN, RIGHT}
