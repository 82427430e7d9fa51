"""
Local player profile: game settings and the personal best score.

Stored as a small JSON file in the user's home directory. A missing or
unreadable file is not an error; defaults are used instead.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from domain.constants import SPEED_MULTIPLIERS

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_PATH = Path.home() / ".snake_leaderboard" / "profile.json"


@dataclass
class Settings:
    speed: str = "normal"
    obstacles: bool = False

    @property
    def speed_multiplier(self) -> float:
        return SPEED_MULTIPLIERS.get(self.speed, SPEED_MULTIPLIERS["normal"])


def get_profile_path(path: Optional[str] = None) -> Path:
    return Path(path or os.getenv('SNAKE_PROFILE_PATH') or DEFAULT_PROFILE_PATH)


def _load(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to read profile {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def _save(path: Path, data: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def load_settings(path: Optional[str] = None) -> Settings:
    raw = _load(get_profile_path(path)).get("settings")
    if not isinstance(raw, dict):
        return Settings()

    speed = raw.get("speed")
    if speed not in SPEED_MULTIPLIERS:
        speed = Settings.speed
    return Settings(speed=speed, obstacles=bool(raw.get("obstacles", False)))


def save_settings(settings: Settings, path: Optional[str] = None) -> None:
    profile_path = get_profile_path(path)
    data = _load(profile_path)
    data["settings"] = asdict(settings)
    _save(profile_path, data)


def load_max_score(path: Optional[str] = None) -> int:
    raw = _load(get_profile_path(path)).get("maxScore", 0)
    try:
        return max(0, int(raw))
    except (TypeError, ValueError):
        return 0


def save_max_score(score: int, path: Optional[str] = None) -> None:
    profile_path = get_profile_path(path)
    data = _load(profile_path)
    data["maxScore"] = int(score)
    _save(profile_path, data)
