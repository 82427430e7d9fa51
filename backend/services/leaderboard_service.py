"""
Leaderboard service.

Validates submissions, appends them to the score ledger and answers ranked
read queries. Storage errors are not caught here: they propagate to the
caller, which reports them as internal errors.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from data_access import ScoreRepository
from schemas import LeaderboardQuery, ScoreSubmission, first_error_message

logger = logging.getLogger(__name__)

ALL_TIME = "all"
WEEKLY = "weekly"
DEFAULT_LIMIT = 20

# Marks a field absent from the request body, as opposed to an explicit null
MISSING = object()


class LeaderboardValidationError(ValueError):
    """A submission was rejected; `message` is safe to show to the player."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class SubmissionResult:
    id: int
    rank: int


def parse_range(value: Any) -> str:
    """Return 'all' or 'weekly'; anything unrecognized falls back to 'all'."""
    try:
        return LeaderboardQuery(range=value).range
    except ValidationError:
        return ALL_TIME


def sanitize_nickname(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


class LeaderboardService:
    """
    Score ledger operations used by the HTTP layer.
    """

    def __init__(self, repository: ScoreRepository, limit: int = DEFAULT_LIMIT):
        self.repository = repository
        self.limit = limit

    def validate(self, nickname: Any = MISSING, score: Any = MISSING) -> ScoreSubmission:
        fields = {
            name: value
            for name, value in (('nickname', nickname), ('score', score))
            if value is not MISSING
        }
        try:
            return ScoreSubmission(**fields)
        except ValidationError as e:
            raise LeaderboardValidationError(first_error_message(e)) from e

    def submit(self, nickname: Any = MISSING, score: Any = MISSING) -> SubmissionResult:
        """
        Validate and append a score, then rank it against the whole table.

        The rank is read after the insert, so a strictly best score is rank 1.
        Insert and rank read are separate operations; a concurrent submission
        in between may shift the rank by one.

        Raises:
            LeaderboardValidationError: nickname or score is invalid
        """
        submission = self.validate(nickname, score)
        clean_nickname = sanitize_nickname(submission.nickname)

        record_id = self.repository.insert_score(clean_nickname, submission.score)
        rank = self.rank_for(submission.score)
        logger.info(f"Score submitted: id={record_id} nickname={clean_nickname!r} score={submission.score} rank={rank}")
        return SubmissionResult(id=record_id, rank=rank)

    def rank_for(self, score: int) -> int:
        return self.repository.get_rank_for_score(score)

    def top_scores(
        self,
        range_: str = ALL_TIME,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """
        Best scores ordered by score (desc) then submission time (asc).

        Args:
            range_: 'all' or 'weekly' (trailing 7 days); others mean 'all'
            limit: Maximum number of rows, defaults to the configured limit
            now: Query time for the weekly window, defaults to now
        """
        limit = self.limit if limit is None else limit
        if parse_range(range_) == WEEKLY:
            return self.repository.get_weekly_top_scores(limit, now=now)
        return self.repository.get_top_scores(limit)
