from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

AnalysisType = Literal["role", "jd"]

MAX_LIST_ITEMS = 5
MAX_MISSING_KEYWORDS = 10
MIN_JOB_DESCRIPTION_CHARS = 100


class GenerateReportRequest(BaseModel):
    resume_id: UUID
    mode: AnalysisType = "role"
    role: str | None = Field(default=None, max_length=200, validate_default=True)
    job_description: str | None = Field(
        default=None,
        max_length=8000,
        validate_default=True,
    )

    @field_validator("role", "job_description", mode="before")
    @classmethod
    def _strip_text(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("role")
    @classmethod
    def _role_required_in_role_mode(cls, value: str | None, info: ValidationInfo) -> str | None:
        if info.data.get("mode") == "role" and not value:
            raise ValueError("Role mode requires a non-empty 'role'.")
        return value

    @field_validator("job_description")
    @classmethod
    def _description_required_in_jd_mode(cls, value: str | None, info: ValidationInfo) -> str | None:
        if info.data.get("mode") == "jd" and len(value or "") < MIN_JOB_DESCRIPTION_CHARS:
            raise ValueError(
                f"JD mode requires a 'job_description' of at least {MIN_JOB_DESCRIPTION_CHARS} characters."
            )
        return value


class ReportDraft(BaseModel):
    """A normalized assessment ready to be written to the report table."""

    resume_id: str
    analysis_type: AnalysisType
    role: str | None = None
    job_description: str | None = None
    score: int = Field(ge=0, le=100)
    match_score: int | None = Field(default=None, ge=0, le=100)
    strengths: list[str] = Field(default_factory=list, max_length=MAX_LIST_ITEMS)
    weaknesses: list[str] = Field(default_factory=list, max_length=MAX_LIST_ITEMS)
    suggestions: list[str] = Field(default_factory=list, max_length=MAX_LIST_ITEMS)
    missing_keywords: list[str] | None = Field(default=None, max_length=MAX_MISSING_KEYWORDS)

    @model_validator(mode="after")
    def _check_mode_fields(self) -> "ReportDraft":
        if self.analysis_type == "role":
            if not self.role:
                raise ValueError("role reports require 'role'")
            if self.match_score is not None or self.missing_keywords is not None:
                raise ValueError("role reports cannot carry match_score or missing_keywords")
        else:
            if not self.job_description:
                raise ValueError("jd reports require 'job_description'")
            if self.match_score is None or self.missing_keywords is None:
                raise ValueError("jd reports require match_score and missing_keywords")
        return self


class Report(ReportDraft):
    id: str
    owner_id: str
    created_at: datetime


class ReportSummary(BaseModel):
    id: str
    resume_id: str
    role: str | None = None
    analysis_type: AnalysisType
    score: int
    match_score: int | None = None
    created_at: datetime


class ReportResponse(BaseModel):
    report: Report


class ReportHistoryResponse(BaseModel):
    reports: list[ReportSummary]
