from __future__ import annotations

import json
import math
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, field_validator


def _require_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("must be a number")
    try:
        number = float(value)
    except OverflowError as exc:
        raise ValueError("must be a finite number") from exc
    if not math.isfinite(number):
        raise ValueError("must be a finite number")
    return number


def _require_string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        raise ValueError("must be a list")
    return [item if isinstance(item, str) else json.dumps(item) for item in value]


class RoleAssessment(BaseModel):
    """Raw model output for a role analysis. Scores are not yet clamped."""

    model_config = ConfigDict(extra="ignore")

    kind: Literal["role"] = "role"
    score: float
    strengths: list[str]
    weaknesses: list[str]
    suggestions: list[str]

    @field_validator("score", mode="before")
    @classmethod
    def _score_is_numeric(cls, value: Any) -> float:
        return _require_number(value)

    @field_validator("strengths", "weaknesses", "suggestions", mode="before")
    @classmethod
    def _lists_are_sequences(cls, value: Any) -> list[str]:
        return _require_string_list(value)


class JDAssessment(RoleAssessment):
    kind: Literal["jd"] = "jd"  # type: ignore[assignment]
    match_score: float
    missing_keywords: list[str]

    @field_validator("match_score", mode="before")
    @classmethod
    def _match_score_is_numeric(cls, value: Any) -> float:
        return _require_number(value)

    @field_validator("missing_keywords", mode="before")
    @classmethod
    def _keywords_are_sequence(cls, value: Any) -> list[str]:
        return _require_string_list(value)


Assessment = Union[RoleAssessment, JDAssessment]
