"""
Single-player Snake simulation engine.

SnakeGame owns all mutable simulation state (snake, food, obstacles, score,
direction buffer) and advances it on a fixed-timestep clock. Renderers read
`get_current_state()` after each frame and never touch the engine internals.
"""

import logging
import math
import random
import time
from dataclasses import dataclass, replace
from typing import Callable, FrozenSet, List, Optional, Set, Tuple

from .constants import (
    DEFAULT_BASE_SPEED,
    DEFAULT_GRID_SIZE,
    DIRECTION_VECTORS,
    FOOD_SCORE,
    GAME_OVER,
    IDLE,
    OBSTACLE_DENSITY,
    OPPOSITE_DIRECTIONS,
    RIGHT,
    RUNNING,
    VALID_MOVES,
)
from .game_state import GameState
from .snake import Snake

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


@dataclass
class GameConfig:
    grid_size: int = DEFAULT_GRID_SIZE
    base_speed: float = DEFAULT_BASE_SPEED
    has_obstacles: bool = False

    def __post_init__(self):
        if self.grid_size < 4:
            raise ValueError(f"grid_size must be at least 4, got {self.grid_size}")
        if self.base_speed <= 0:
            raise ValueError(f"base_speed must be positive, got {self.base_speed}")


class GameCallbacks:
    """
    Notification hooks fired by the engine. Subclass and override what you need.
    """

    def on_score_change(self, score: int) -> None:
        pass

    def on_game_over(self, score: int) -> None:
        pass

    def on_max_score(self, score: int) -> None:
        pass


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class SnakeGame:
    """
    Manages:
      - Board (grid_size x grid_size)
      - The snake and its direction buffer
      - Food and obstacles
      - Score and best score
      - The fixed-step clock
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        callbacks: Optional[GameCallbacks] = None,
        initial_max_score: int = 0,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = _monotonic_ms,
    ):
        self.config = replace(config) if config else GameConfig()
        self.callbacks = callbacks or GameCallbacks()
        self.rng = rng or random.Random()
        self.clock = clock

        self.status = IDLE
        self.snake = Snake.spawn(self.config.grid_size)
        self.direction = RIGHT
        self.next_direction = RIGHT
        self.food: Optional[Position] = None
        self.obstacles: FrozenSet[Position] = frozenset()
        self.score = 0
        self.max_score = initial_max_score
        self.speed_multiplier = 1.0

        self.last_timestamp = 0.0
        self.accumulator = 0.0

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def step_interval(self) -> float:
        """Milliseconds between two cell advances."""
        return 1000.0 / (self.config.base_speed * self.speed_multiplier)

    def set_speed_multiplier(self, multiplier: float) -> None:
        if multiplier <= 0:
            raise ValueError(f"Speed multiplier must be positive, got {multiplier}")
        self.speed_multiplier = multiplier

    def set_obstacles(self, enabled: bool) -> None:
        """Enable or disable obstacles for the next session."""
        self.config.has_obstacles = enabled

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, now_ms: Optional[float] = None) -> None:
        self._reset()
        self.status = RUNNING
        self.last_timestamp = self.clock() if now_ms is None else now_ms
        self.accumulator = 0.0
        logger.debug(
            f"Game started: grid={self.config.grid_size} obstacles={len(self.obstacles)} "
            f"interval={self.step_interval:.1f}ms"
        )

    def restart(self, now_ms: Optional[float] = None) -> None:
        self.start(now_ms)

    def pause(self) -> None:
        if self.status == RUNNING:
            self.status = IDLE

    def update_max_score(self, score: int) -> None:
        if score > self.max_score:
            self.max_score = score
            self.callbacks.on_max_score(self.max_score)

    def handle_input(self, direction: str) -> None:
        """
        Buffer a direction change for the next step.

        Reversals are checked against the applied direction rather than the
        buffered one, so a reversal queued in the same frame stays rejected.
        """
        if self.status != RUNNING:
            return
        if direction not in VALID_MOVES:
            return
        if direction == self.next_direction:
            return
        if direction == OPPOSITE_DIRECTIONS[self.direction]:
            return

        self.next_direction = direction

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------

    def tick(self, timestamp_ms: Optional[float] = None) -> int:
        """
        Advance the simulation to `timestamp_ms`.

        Elapsed time is accumulated and drained in fixed `step_interval`
        slices, so the number of steps does not depend on the frame rate.

        Returns:
            Number of steps performed during this frame.
        """
        if self.status != RUNNING:
            return 0

        now = self.clock() if timestamp_ms is None else timestamp_ms
        delta = now - self.last_timestamp
        self.last_timestamp = now
        self.accumulator += delta

        interval = self.step_interval
        steps = 0
        while self.accumulator >= interval and self.status == RUNNING:
            self.step()
            self.accumulator -= interval
            steps += 1

        return steps

    def step(self) -> None:
        """Advance the snake by exactly one cell."""
        if self.status != RUNNING:
            return

        self.direction = self.next_direction
        dx, dy = DIRECTION_VECTORS[self.direction]
        hx, hy = self.snake.head
        next_head = (hx + dx, hy + dy)

        if self._is_collision(next_head):
            self._end_game()
            return

        if next_head == self.food:
            self.snake.grow_to(next_head)
            self.score += FOOD_SCORE
            self.callbacks.on_score_change(self.score)
            self.update_max_score(self.score)
            self.food = self._generate_food()
        else:
            self.snake.move_to(next_head)

    def get_current_state(self) -> GameState:
        """
        Return a snapshot of the current board as a GameState.
        """
        return GameState(
            grid_size=self.config.grid_size,
            snake=tuple(self.snake.positions),
            food=self.food,
            obstacles=self.obstacles,
            score=self.score,
            max_score=self.max_score,
            direction=self.direction,
            status=self.status,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reset(self) -> None:
        self.snake = Snake.spawn(self.config.grid_size)
        self.direction = RIGHT
        self.next_direction = RIGHT
        self.score = 0
        self.callbacks.on_score_change(self.score)
        self.obstacles = self._generate_obstacles() if self.config.has_obstacles else frozenset()
        self.food = self._generate_food()

    def _end_game(self) -> None:
        self.status = GAME_OVER
        logger.info(f"Game over: score={self.score} length={len(self.snake)}")
        self.callbacks.on_game_over(self.score)

    def _in_bounds(self, position: Position) -> bool:
        x, y = position
        size = self.config.grid_size
        return 0 <= x < size and 0 <= y < size

    def _is_collision(self, position: Position) -> bool:
        if not self._in_bounds(position):
            return True
        if self.snake.occupies(position):
            return True
        # Empty unless obstacles were enabled when the session started
        return position in self.obstacles

    def _free_cells(self) -> List[Position]:
        occupied: Set[Position] = set(self.snake.positions) | set(self.obstacles)
        size = self.config.grid_size
        return [
            (x, y)
            for x in range(size)
            for y in range(size)
            if (x, y) not in occupied
        ]

    def _generate_food(self) -> Optional[Position]:
        """
        Return a random cell not occupied by the snake or an obstacle.
        Returns None when the board is full.
        """
        available = self._free_cells()
        if not available:
            logger.warning("No free cell left for food")
            return None
        return self.rng.choice(available)

    def _generate_obstacles(self) -> FrozenSet[Position]:
        size = self.config.grid_size
        target = math.floor(size * OBSTACLE_DENSITY)
        target = min(target, size * size - len(self.snake))

        obstacles: Set[Position] = set()
        while len(obstacles) < target:
            candidate = (self.rng.randrange(size), self.rng.randrange(size))
            if self.snake.occupies(candidate) or candidate in obstacles:
                continue
            obstacles.add(candidate)
        return frozenset(obstacles)
