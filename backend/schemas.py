"""Pydantic request schemas for the public leaderboard API.

These models define input validation for score submissions and the range
filter of leaderboard reads.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, StringConstraints, ValidationError

# Latin letters, digits, hyphen, underscore and CJK unified ideographs
NICKNAME_PATTERN = "^[-_a-zA-Z0-9一-龥]+$"
MAX_NICKNAME_LENGTH = 16
MAX_SCORE = 999_999

Nickname = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=1,
        max_length=MAX_NICKNAME_LENGTH,
        pattern=NICKNAME_PATTERN,
    ),
]

LeaderboardRange = Literal["all", "weekly"]

# Human readable messages keyed by (field, pydantic error type)
_ERROR_MESSAGES = {
    ("nickname", "missing"): "Nickname is required",
    ("nickname", "string_type"): "Nickname must be a string",
    ("nickname", "string_too_short"): "Nickname cannot be empty",
    ("nickname", "string_too_long"): f"Nickname cannot exceed {MAX_NICKNAME_LENGTH} characters",
    ("nickname", "string_pattern_mismatch"): (
        "Nickname may only contain letters, digits, Chinese characters, '-' and '_'"
    ),
    ("score", "missing"): "Score is required",
    ("score", "int_type"): "Score must be a number",
    ("score", "int_parsing"): "Score must be a number",
    ("score", "int_parsing_size"): "Score is out of range",
    ("score", "finite_number"): "Score must be a number",
    ("score", "int_from_float"): "Score must be an integer",
    ("score", "greater_than"): "At least 1 point is needed to submit",
    ("score", "less_than_equal"): "Score is out of range",
}


class ScoreSubmission(BaseModel):
    nickname: Nickname
    score: int = Field(gt=0, le=MAX_SCORE)


class LeaderboardQuery(BaseModel):
    range: LeaderboardRange = "all"


def first_error_message(error: ValidationError) -> str:
    """Return a readable message for the first validation error."""
    errors = error.errors()
    if not errors:
        return "Submitted data failed validation"
    first = errors[0]
    field = str(first["loc"][0]) if first.get("loc") else ""
    return _ERROR_MESSAGES.get((field, first["type"]), first.get("msg", "Invalid value"))
