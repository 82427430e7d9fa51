"""
HTTP client for the leaderboard API.

Used by the terminal front end to submit a finished game and to show the
current standings.
"""

import logging
import os
from typing import Any, Dict

import requests

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "http://localhost:3000"


class LeaderboardClientError(Exception):
    """Request failed; `message` holds the server's explanation when it sent one."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class LeaderboardClient:
    def __init__(self, base_url: str = None, timeout: int = 10, session: requests.Session = None):
        self.base_url = (base_url or os.getenv('LEADERBOARD_URL') or DEFAULT_SERVER_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/api/leaderboard"

    def fetch_leaderboard(self, range_: str = "all") -> Dict[str, Any]:
        """
        Fetch the top scores.

        Returns:
            {"items": [...], "generatedAt": "..."}
        """
        try:
            response = self.session.get(self.endpoint, params={"range": range_}, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to reach leaderboard at {self.endpoint}: {e}")
            raise LeaderboardClientError(f"Leaderboard unavailable: {e}") from e

        if not response.ok:
            raise LeaderboardClientError(
                f"Failed to load leaderboard: {response.status_code}",
                status_code=response.status_code,
            )
        return response.json()

    def submit_score(self, nickname: str, score: int) -> Dict[str, Any]:
        """
        Submit a final score.

        Returns:
            {"success": True, "id": int, "newRank": int}

        Raises:
            LeaderboardClientError: network failure or non-2xx response
        """
        try:
            response = self.session.post(
                self.endpoint,
                json={"nickname": nickname, "score": score},
                timeout=self.timeout,
                headers={'Content-Type': 'application/json'},
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to submit score to {self.endpoint}: {e}")
            raise LeaderboardClientError(f"Leaderboard unavailable: {e}") from e

        if not response.ok:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("message") if isinstance(body, dict) else None
            raise LeaderboardClientError(
                message or f"Submission failed: {response.status_code}",
                status_code=response.status_code,
            )

        logger.info(f"Score {score} submitted for {nickname}")
        return response.json()
