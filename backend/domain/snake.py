"""
Snake entity for the game engine.
"""

from collections import deque
from typing import Iterable, List, Tuple

from .constants import INITIAL_LENGTH


class Snake:
    """
    Represents the snake on the board.

    Attributes:
        positions: deque of (x, y) from head at index 0 to tail at the end
    """

    def __init__(self, positions: Iterable[Tuple[int, int]]):
        self.positions = deque(positions)

    @classmethod
    def spawn(cls, grid_size: int) -> "Snake":
        """Create the initial horizontal snake centred on the grid, facing right."""
        center = grid_size // 2
        return cls([(center - i, center) for i in range(INITIAL_LENGTH)])

    @property
    def head(self) -> Tuple[int, int]:
        """Return the head position (first element)."""
        return self.positions[0]

    def grow_to(self, position: Tuple[int, int]) -> None:
        """Prepend a new head, keeping the tail."""
        self.positions.appendleft(position)

    def move_to(self, position: Tuple[int, int]) -> None:
        """Prepend a new head and drop the tail."""
        self.positions.appendleft(position)
        self.positions.pop()

    def occupies(self, position: Tuple[int, int]) -> bool:
        return position in self.positions

    def as_list(self) -> List[Tuple[int, int]]:
        return list(self.positions)

    def __len__(self) -> int:
        return len(self.positions)

    def __repr__(self):
        return f"<Snake head={self.head} length={len(self)}>"
