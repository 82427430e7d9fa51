"""
Interface for anything that steers the snake without a keyboard.
"""

from domain.game_state import GameState


class Player:
    """
    Looks at a board snapshot and picks the next direction.

    The returned value is fed to `SnakeGame.handle_input`, so the usual
    buffering rules apply: a reversal is ignored by the engine.
    """

    name = "player"

    def get_move(self, game_state: GameState) -> str:
        """Return one of "UP", "DOWN", "LEFT", "RIGHT" for `game_state`."""
        raise NotImplementedError(f"{type(self).__name__} must implement get_move()")
