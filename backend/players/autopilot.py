"""
Autopilot player - heads for the food while avoiding certain death.
"""

import random
from typing import List, Optional

from domain.constants import DIRECTION_VECTORS, OPPOSITE_DIRECTIONS
from domain.game_state import GameState
from .base import Player


class AutopilotPlayer(Player):
    """
    A greedy AI that picks a safe direction, preferring the ones that bring
    the head closer to the food.
    """

    name = "autopilot"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def safe_moves(self, game_state: GameState) -> List[str]:
        head_x, head_y = game_state.head
        # Tail is free next step unless the snake eats, which only happens on food
        body = set(game_state.snake[:-1])
        size = game_state.grid_size

        moves = []
        for move, (dx, dy) in DIRECTION_VECTORS.items():
            if move == OPPOSITE_DIRECTIONS[game_state.direction]:
                continue
            new_x, new_y = head_x + dx, head_y + dy

            # Check wall collisions
            if not (0 <= new_x < size and 0 <= new_y < size):
                continue

            if (new_x, new_y) in body or (new_x, new_y) in game_state.obstacles:
                continue

            # The tail stays put when this move eats
            if (new_x, new_y) == game_state.snake[-1] and (new_x, new_y) == game_state.food:
                continue

            moves.append(move)
        return moves

    def get_move(self, game_state: GameState) -> str:
        valid_moves = self.safe_moves(game_state)

        # No way out; keep going and accept the crash
        if not valid_moves:
            return game_state.direction

        if game_state.food is None:
            return self.rng.choice(valid_moves)

        food_x, food_y = game_state.food
        head_x, head_y = game_state.head

        def distance(move: str) -> int:
            dx, dy = DIRECTION_VECTORS[move]
            return abs(head_x + dx - food_x) + abs(head_y + dy - food_y)

        best = min(distance(move) for move in valid_moves)
        return self.rng.choice([move for move in valid_moves if distance(move) == best])
