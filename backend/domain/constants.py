"""
Game constants for the Snake engine.
"""

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

# Unit vectors, y grows downwards
DIRECTION_VECTORS = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

OPPOSITE_DIRECTIONS = {
    UP: DOWN,
    DOWN: UP,
    LEFT: RIGHT,
    RIGHT: LEFT,
}

# Session states
IDLE = "idle"
RUNNING = "running"
GAME_OVER = "gameover"

# Game settings
DEFAULT_GRID_SIZE = 32
DEFAULT_BASE_SPEED = 6  # cells per second at multiplier 1.0
INITIAL_LENGTH = 3
FOOD_SCORE = 10
OBSTACLE_DENSITY = 0.6  # obstacles per grid side

SPEED_MULTIPLIERS = {
    "slow": 0.8,
    "normal": 1.0,
    "fast": 1.25,
}
