import os
import sys
import pytest

# Ensure the backend root (containing the top-level modules) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from app import create_app
from database import SQLiteDatabase


class AppTestConfig:
    TESTING = True
    LEADERBOARD_LIMIT = 20
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = 'memory://'
    RATE_LIMIT_WINDOW_MS = 60000
    RATE_LIMIT_MAX = 8
    CORS_ALLOWED_ORIGINS = ['http://localhost:5173']
    MAX_CONTENT_LENGTH = 32 * 1024


@pytest.fixture()
def database(tmp_path):
    db = SQLiteDatabase(str(tmp_path / 'leaderboard.sqlite'))
    db.init_schema()
    yield db
    db.close()


@pytest.fixture()
def flask_app(database):
    return create_app(AppTestConfig, database=database)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()
