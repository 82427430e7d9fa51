#!/usr/bin/env python3
"""
Play Snake in the terminal.

Two modes:

1) Interactive (default): curses front end. Arrow keys or WASD steer, space
   starts/restarts, p pauses, q quits.
2) Headless (--autopilot): the autopilot plays one game and the final board
   is printed.

Settings and the personal best are kept in the local profile. With
--nickname the last finished game is submitted to the leaderboard server.
"""

import argparse
import curses
import logging
import os
import sys
import time
from typing import List, Optional

from dotenv import load_dotenv

# Add backend to path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain import (  # noqa: E402
    DOWN, LEFT, RIGHT, UP,
    GAME_OVER, RUNNING,
    SPEED_MULTIPLIERS,
    GameCallbacks, GameConfig, GameState, SnakeGame,
)
from players import AutopilotPlayer, Player  # noqa: E402
from services.leaderboard_client import LeaderboardClient, LeaderboardClientError  # noqa: E402
from services.local_profile import (  # noqa: E402
    Settings,
    load_max_score,
    load_settings,
    save_max_score,
    save_settings,
)

logger = logging.getLogger(__name__)

FRAME_SECONDS = 1 / 60
DEFAULT_MAX_STEPS = 10_000

KEY_DIRECTIONS = {
    curses.KEY_UP: UP,
    curses.KEY_DOWN: DOWN,
    curses.KEY_LEFT: LEFT,
    curses.KEY_RIGHT: RIGHT,
    ord('w'): UP,
    ord('s'): DOWN,
    ord('a'): LEFT,
    ord('d'): RIGHT,
}

CELL_GLYPHS = {
    'head': '@@',
    'body': 'oo',
    'food': '<>',
    'obstacle': '##',
    'empty': '  ',
}


def key_to_direction(key: int) -> Optional[str]:
    if 0 <= key < 256:
        key = ord(chr(key).lower())
    return KEY_DIRECTIONS.get(key)


class ProfileCallbacks(GameCallbacks):
    """Keeps the local profile and the last finished score in sync with the engine."""

    def __init__(self, profile_path: Optional[str] = None):
        self.profile_path = profile_path
        self.last_final_score: Optional[int] = None

    def on_game_over(self, score: int) -> None:
        self.last_final_score = score

    def on_max_score(self, score: int) -> None:
        save_max_score(score, self.profile_path)


def board_lines(state: GameState) -> List[str]:
    """Project a game snapshot onto text rows, border included."""
    size = state.grid_size
    head = state.snake[0]
    body = set(state.snake[1:])

    rows = ['+' + '-' * (size * 2) + '+']
    for y in range(size):
        cells = []
        for x in range(size):
            pos = (x, y)
            if pos == head:
                cells.append(CELL_GLYPHS['head'])
            elif pos in body:
                cells.append(CELL_GLYPHS['body'])
            elif pos == state.food:
                cells.append(CELL_GLYPHS['food'])
            elif pos in state.obstacles:
                cells.append(CELL_GLYPHS['obstacle'])
            else:
                cells.append(CELL_GLYPHS['empty'])
        rows.append('|' + ''.join(cells) + '|')
    rows.append(rows[0])
    return rows


def status_message(state: GameState) -> str:
    if state.status == RUNNING:
        return "Arrows/WASD steer, p pauses, q quits"
    if state.status == GAME_OVER:
        return f"Game over! Final score {state.score}. Space to play again, q to quit"
    return "Press space to start, q to quit"


def build_game(settings: Settings, grid_size: int, callbacks: GameCallbacks, max_score: int) -> SnakeGame:
    game = SnakeGame(
        GameConfig(grid_size=grid_size, has_obstacles=settings.obstacles),
        callbacks=callbacks,
        initial_max_score=max_score,
    )
    game.set_speed_multiplier(settings.speed_multiplier)
    return game


def run_headless(game: SnakeGame, player: Player, max_steps: int = DEFAULT_MAX_STEPS) -> GameState:
    """Let `player` play a single game, one decision per step."""
    game.start()
    steps = 0
    while game.status == RUNNING and steps < max_steps:
        game.handle_input(player.get_move(game.get_current_state()))
        game.step()
        steps += 1
    logger.info(f"{player.name} finished after {steps} steps with score {game.score}")
    return game.get_current_state()


def _draw(stdscr, state: GameState) -> None:
    stdscr.erase()
    lines = board_lines(state)
    lines.append(f" Score: {state.score}   Best: {state.max_score}")
    lines.append(f" {status_message(state)}")

    height, width = stdscr.getmaxyx()
    if len(lines) > height or len(lines[0]) > width:
        lines = [f"Terminal too small: need {len(lines[0])}x{len(lines)}"]

    for row, line in enumerate(lines):
        try:
            stdscr.addstr(row, 0, line[:width - 1])
        except curses.error:
            pass
    stdscr.refresh()


def run_interactive(stdscr, game: SnakeGame) -> None:
    curses.curs_set(0)
    stdscr.nodelay(True)
    stdscr.keypad(True)

    while True:
        key = stdscr.getch()
        while key != -1:
            if key in (ord('q'), ord('Q')):
                return
            if key == ord(' ') and game.status != RUNNING:
                game.start()
            elif key in (ord('p'), ord('P')):
                game.pause()
            else:
                direction = key_to_direction(key)
                if direction is not None:
                    game.handle_input(direction)
            key = stdscr.getch()

        game.tick()
        _draw(stdscr, game.get_current_state())
        time.sleep(FRAME_SECONDS)


def submit_final_score(client: LeaderboardClient, nickname: str, score: int) -> Optional[int]:
    try:
        result = client.submit_score(nickname, score)
    except LeaderboardClientError as e:
        print(f"Could not submit score: {e.message}")
        return None
    rank = result.get('newRank')
    print(f"Submitted {score} points for {nickname}. Current rank: #{rank}")
    return rank


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description="Play Snake and submit your score to the leaderboard.")
    parser.add_argument("--speed", choices=sorted(SPEED_MULTIPLIERS), help="Game speed (saved to your profile)")
    parser.add_argument("--obstacles", dest="obstacles", action="store_true", default=None,
                        help="Enable obstacles (saved to your profile)")
    parser.add_argument("--no-obstacles", dest="obstacles", action="store_false",
                        help="Disable obstacles (saved to your profile)")
    parser.add_argument("--grid-size", type=int, default=32, help="Board side in cells (default: 32)")
    parser.add_argument("--autopilot", action="store_true", help="Let the autopilot play a single headless game")
    parser.add_argument("--max-steps", type=int, default=DEFAULT_MAX_STEPS,
                        help="Step cap for --autopilot games")
    parser.add_argument("--nickname", help="Submit the last finished game under this nickname")
    parser.add_argument("--server-url", default=None, help="Leaderboard server (default: LEADERBOARD_URL or localhost)")
    parser.add_argument("--profile", default=None, help="Profile file (default: SNAKE_PROFILE_PATH or ~/.snake_leaderboard)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)

    settings = load_settings(args.profile)
    if args.speed is not None:
        settings.speed = args.speed
    if args.obstacles is not None:
        settings.obstacles = args.obstacles
    save_settings(settings, args.profile)

    callbacks = ProfileCallbacks(args.profile)
    game = build_game(settings, args.grid_size, callbacks, load_max_score(args.profile))

    if args.autopilot:
        final_state = run_headless(game, AutopilotPlayer(), max_steps=args.max_steps)
        print(final_state.print_board())
        print(f"Final score: {final_state.score} (best: {final_state.max_score}, status: {final_state.status})")
    else:
        curses.wrapper(run_interactive, game)

    score = callbacks.last_final_score
    if args.nickname:
        if not score:
            print("No finished game with a positive score to submit.")
            return
        submit_final_score(LeaderboardClient(args.server_url), args.nickname, score)


if __name__ == "__main__":
    main()
