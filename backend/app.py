import atexit
import logging
import signal
import sys
import time

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException

from config import Config
from data_access import ScoreRepository, format_timestamp, utc_now
from database import open_database
from services.leaderboard_service import (
    LeaderboardService,
    LeaderboardValidationError,
    parse_range,
)

logger = logging.getLogger(__name__)

leaderboard = Blueprint('leaderboard', __name__)
main = Blueprint('main', __name__)

_HTTP_ERROR_CODES = {
    400: ("BAD_REQUEST", "Malformed request"),
    404: ("NOT_FOUND", "Endpoint does not exist"),
    405: ("METHOD_NOT_ALLOWED", "Method not allowed on this endpoint"),
    413: ("PAYLOAD_TOO_LARGE", "Request body is too large"),
    429: ("RATE_LIMITED", "Too many requests, please slow down"),
}

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Content-Security-Policy": "default-src 'self'",
}


def error_response(status: int, error_code: str, message: str):
    return jsonify({"errorCode": error_code, "message": message}), status


def get_service() -> LeaderboardService:
    return current_app.extensions['leaderboard_service']


@main.route("/health", methods=["GET"])
def health_check():
    started = current_app.extensions['started_at']
    return jsonify({"status": "ok", "uptime": round(time.monotonic() - started, 3)})


@leaderboard.route("/api/leaderboard", methods=["GET"])
def get_leaderboard():
    """
    Get the top scores.

    Query parameters:
    - range: 'all' (default) or 'weekly' (trailing 7 days). Unknown values mean 'all'.

    The number of rows is server configuration (LEADERBOARD_LIMIT).
    """
    try:
        range_ = parse_range(request.args.get("range"))
        items = get_service().top_scores(range_)
        return jsonify({
            "items": items,
            "generatedAt": format_timestamp(utc_now()),
        })
    except Exception as error:
        logger.error(f"Error fetching leaderboard: {error}", exc_info=True)
        return error_response(500, "INTERNAL_ERROR", "Failed to load leaderboard")


@leaderboard.route("/api/leaderboard", methods=["POST"])
def submit_score():
    """
    Submit a final score.

    Body: {"nickname": str, "score": int}
    Returns 201 {"success": true, "id": int, "newRank": int}.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}

    try:
        fields = {key: payload[key] for key in ("nickname", "score") if key in payload}
        result = get_service().submit(**fields)
    except LeaderboardValidationError as error:
        return error_response(400, "VALIDATION_ERROR", error.message)
    except Exception as error:
        logger.error(f"Error submitting score: {error}", exc_info=True)
        return error_response(500, "INTERNAL_ERROR", "Failed to submit score")

    return jsonify({"success": True, "id": result.id, "newRank": result.rank}), 201


def create_app(config_class=Config, database=None):
    """
    Build the Flask application.

    Args:
        config_class: Configuration object (see config.Config)
        database: An opened storage handle. When omitted one is opened from
            the configuration and closed at interpreter exit.
    """
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    if database is None:
        database = open_database(config_class)
        database.init_schema()
        atexit.register(database.close)

    service = LeaderboardService(
        ScoreRepository(database),
        limit=flask_app.config.get('LEADERBOARD_LIMIT', 20),
    )
    flask_app.extensions['leaderboard_service'] = service
    flask_app.extensions['database'] = database
    flask_app.extensions['started_at'] = time.monotonic()

    CORS(flask_app, resources={r"/api/*": {"origins": flask_app.config.get('CORS_ALLOWED_ORIGINS', "*")}})

    limiter = Limiter(get_remote_address, app=flask_app)
    window_seconds = max(1, flask_app.config.get('RATE_LIMIT_WINDOW_MS', 60000) // 1000)
    rate_limit = f"{flask_app.config.get('RATE_LIMIT_MAX', 8)} per {window_seconds} second"
    limiter.limit(rate_limit)(leaderboard)
    flask_app.extensions['rate_limiter'] = limiter

    flask_app.register_blueprint(main)
    flask_app.register_blueprint(leaderboard)

    @flask_app.after_request
    def finalize_response(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        logger.info(f"{request.remote_addr} {request.method} {request.full_path.rstrip('?')} {response.status_code}")
        return response

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(error):
        error_code, message = _HTTP_ERROR_CODES.get(error.code, ("HTTP_ERROR", error.name))
        return error_response(error.code, error_code, message)

    @flask_app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.error(f"Unhandled error: {error}", exc_info=True)
        return error_response(500, "INTERNAL_ERROR", "Server error, please try again later")

    return flask_app


def _handle_sigterm(signum, frame):
    logger.info("SIGTERM received, shutting down...")
    sys.exit(0)


if __name__ == "__main__":
    logging.basicConfig(
        level=Config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    signal.signal(signal.SIGTERM, _handle_sigterm)

    with open_database(Config) as db:
        db.init_schema()
        app = create_app(Config, database=db)
        logger.info(f"Server listening on http://{Config.HOST}:{Config.PORT}")
        app.run(host=Config.HOST, port=Config.PORT, threaded=True)
