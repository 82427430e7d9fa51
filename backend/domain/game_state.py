"""
GameState entity - a read-only snapshot of the game at a point in time.
"""

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class GameState:
    """
    A snapshot of the game taken after a simulation step.

    Renderers only ever see this value; the engine keeps the mutable state.

    Attributes:
        grid_size: side of the square board
        snake: tuple of (x, y) from head to tail
        food: position of the food, or None when the board is full
        obstacles: frozenset of obstacle positions
        score: current score
        max_score: best score recorded so far
        direction: direction applied on the last step
        status: one of 'idle', 'running', 'gameover'
    """

    grid_size: int
    snake: Tuple[Tuple[int, int], ...]
    food: Optional[Tuple[int, int]]
    obstacles: FrozenSet[Tuple[int, int]]
    score: int
    max_score: int
    direction: str
    status: str

    @property
    def head(self) -> Tuple[int, int]:
        return self.snake[0]

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        # = obstacle
        H = snake head
        S = snake body
        Row 0 is printed first, x-axis labels at the bottom.
        """
        board = [['.' for _ in range(self.grid_size)] for _ in range(self.grid_size)]

        for ox, oy in self.obstacles:
            board[oy][ox] = '#'

        if self.food is not None:
            fx, fy = self.food
            board[fy][fx] = 'F'

        for idx, (x, y) in enumerate(self.snake):
            if 0 <= x < self.grid_size and 0 <= y < self.grid_size:
                board[y][x] = 'H' if idx == 0 else 'S'

        result = []
        for y in range(self.grid_size):
            result.append(f"{y:2d} {' '.join(board[y])}")

        result.append("   " + " ".join(str(i % 10) for i in range(self.grid_size)))

        return "\n".join(result)

    def __repr__(self):
        return (
            f"<GameState status={self.status}, score={self.score}, "
            f"length={len(self.snake)}, food={self.food}>"
        )
