import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BACKEND_DIR = Path(__file__).parent


def _split_origins(value):
    return [o.strip() for o in value.split(",") if o.strip()]


class Config:
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Number of rows returned by GET /api/leaderboard (not client supplied)
    LEADERBOARD_LIMIT = int(os.environ.get('LEADERBOARD_LIMIT', '20'))
    # Storage: postgres when DATABASE_URL is set, sqlite file otherwise
    DATABASE_URL = os.environ.get('DATABASE_URL')
    SQLITE_PATH = os.environ.get('SQLITE_PATH') or str(BACKEND_DIR / 'data' / 'leaderboard.sqlite')
    # Per-client throttle on /api/leaderboard
    RATE_LIMIT_WINDOW_MS = int(os.environ.get('RATE_LIMIT_WINDOW_MS', '60000'))
    RATE_LIMIT_MAX = int(os.environ.get('RATE_LIMIT_MAX', '8'))
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
    CORS_ALLOWED_ORIGINS = _split_origins(
        os.environ.get('CORS_ALLOWED_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173')
    )
    MAX_CONTENT_LENGTH = 32 * 1024
