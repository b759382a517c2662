from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from pydantic import ValidationError

from resumeiq.parsing.parse import MIN_TEXT_CHARS, UNREADABLE_MESSAGE, DocumentError, extract_text
from resumeiq.schemas.assessment import Assessment, JDAssessment, RoleAssessment
from resumeiq.schemas.report import (
    MAX_LIST_ITEMS,
    MAX_MISSING_KEYWORDS,
    AnalysisType,
    Report,
    ReportDraft,
)
from resumeiq.services.assessment import AIResponseInvalidShape, AssessmentClient, AssessmentError
from resumeiq.services.quota import QuotaCheckFailed, QuotaDecision, QuotaGuard
from resumeiq.storage.errors import NotFound, PersistFailed, QueryFailed, StorageUnavailable
from resumeiq.storage.files import DocumentStore
from resumeiq.storage.reports import ReportStore
from resumeiq.storage.resumes import ResumeStore

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    CHECKING_QUOTA = "checking_quota"
    FETCHING_DOCUMENT = "fetching_document"
    EXTRACTING_TEXT = "extracting_text"
    REQUESTING_ASSESSMENT = "requesting_assessment"
    VALIDATING_RESPONSE = "validating_response"
    PERSISTING = "persisting"
    DONE = "done"


class AbortReason(str, Enum):
    QUOTA_EXCEEDED = "quota_exceeded"
    QUOTA_CHECK_FAILED = "quota_check_failed"
    RESUME_NOT_FOUND = "resume_not_found"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    DOCUMENT_UNREADABLE = "document_unreadable"
    ASSESSMENT_FAILED = "assessment_failed"
    PERSIST_FAILED = "persist_failed"


ABORT_MESSAGES: dict[AbortReason, str] = {
    AbortReason.QUOTA_EXCEEDED: "Daily limit reached ({limit} reports/day).",
    AbortReason.QUOTA_CHECK_FAILED: "Failed to verify daily report limit.",
    AbortReason.RESUME_NOT_FOUND: "Resume not found or access denied.",
    AbortReason.STORAGE_UNAVAILABLE: "Failed to retrieve resume file from storage.",
    AbortReason.DOCUMENT_UNREADABLE: UNREADABLE_MESSAGE,
    AbortReason.ASSESSMENT_FAILED: "AI service is temporarily unavailable. Please try again.",
    AbortReason.PERSIST_FAILED: "Report generated but could not be saved.",
}

SERVER_FAULTS = frozenset(
    {
        AbortReason.QUOTA_CHECK_FAILED,
        AbortReason.STORAGE_UNAVAILABLE,
        AbortReason.PERSIST_FAILED,
    }
)


@dataclass(frozen=True)
class GenerateCommand:
    resume_id: str
    mode: AnalysisType
    role: str | None = None
    job_description: str | None = None


@dataclass(frozen=True)
class Done:
    report: Report
    state: PipelineState = PipelineState.DONE


@dataclass(frozen=True)
class Aborted:
    reason: AbortReason
    state: PipelineState
    message: str
    cause: BaseException | None = field(default=None, repr=False, compare=False)

    @property
    def server_fault(self) -> bool:
        return self.reason in SERVER_FAULTS


PipelineOutcome = Union[Done, Aborted]


def clamp_score(value: Any) -> int:
    """Clamp into [0, 100] and round half up to an integer."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise AIResponseInvalidShape("score must be a finite number")
    try:
        number = float(value)
    except OverflowError as exc:
        raise AIResponseInvalidShape("score must be a finite number") from exc
    if not math.isfinite(number):
        raise AIResponseInvalidShape("score must be a finite number")
    return int(math.floor(min(100.0, max(0.0, number)) + 0.5))


def _bounded_list(value: Any, limit: int, name: str) -> list[str]:
    if not isinstance(value, list):
        raise AIResponseInvalidShape(f"{name} must be a list")
    return [str(item) for item in value[:limit]]


def normalize_assessment(assessment: Assessment, command: GenerateCommand) -> ReportDraft:
    """Turn a model assessment into a storable draft, whatever the model returned."""
    if assessment.kind != command.mode:
        raise AIResponseInvalidShape(
            f"expected a {command.mode} assessment, got {assessment.kind}"
        )

    match_score: int | None = None
    missing_keywords: list[str] | None = None
    if isinstance(assessment, JDAssessment):
        match_score = clamp_score(assessment.match_score)
        missing_keywords = _bounded_list(
            assessment.missing_keywords, MAX_MISSING_KEYWORDS, "missing_keywords"
        )

    try:
        return ReportDraft(
            resume_id=command.resume_id,
            analysis_type=command.mode,
            role=command.role if command.mode == "role" else None,
            job_description=command.job_description if command.mode == "jd" else None,
            score=clamp_score(assessment.score),
            match_score=match_score,
            strengths=_bounded_list(assessment.strengths, MAX_LIST_ITEMS, "strengths"),
            weaknesses=_bounded_list(assessment.weaknesses, MAX_LIST_ITEMS, "weaknesses"),
            suggestions=_bounded_list(assessment.suggestions, MAX_LIST_ITEMS, "suggestions"),
            missing_keywords=missing_keywords,
        )
    except ValidationError as exc:
        raise AIResponseInvalidShape(str(exc)) from exc


class ReportPipeline:
    """Generates one report: quota, fetch, extract, assess, normalize, persist.

    Steps run strictly in order and the first failure ends the run. Failures
    are returned as ``Aborted`` values, never raised, and nothing is retried.
    """

    def __init__(
        self,
        *,
        quota: QuotaGuard,
        resumes: ResumeStore,
        documents: DocumentStore,
        assessor: AssessmentClient,
        reports: ReportStore,
        min_text_chars: int = MIN_TEXT_CHARS,
    ):
        self._quota = quota
        self._resumes = resumes
        self._documents = documents
        self._assessor = assessor
        self._reports = reports
        self._min_text_chars = min_text_chars

    def _abort(
        self,
        reason: AbortReason,
        state: PipelineState,
        cause: BaseException | None = None,
        message: str | None = None,
    ) -> Aborted:
        text = message or ABORT_MESSAGES[reason].format(limit=self._quota.limit)
        logger.info(
            "report_aborted reason=%s state=%s owner=%s",
            reason.value,
            state.value,
            self._reports.owner_id,
        )
        return Aborted(reason=reason, state=state, message=text, cause=cause)

    def _step(self, state: PipelineState, **fields: Any) -> None:
        details = " ".join(f"{key}={value}" for key, value in fields.items())
        logger.info(
            "report_step step=%s owner=%s %s",
            state.value,
            self._reports.owner_id,
            details,
        )

    async def run(self, command: GenerateCommand) -> PipelineOutcome:
        state = PipelineState.CHECKING_QUOTA
        self._step(state)
        try:
            decision = self._quota.check_and_count()
        except QuotaCheckFailed as exc:
            return self._abort(AbortReason.QUOTA_CHECK_FAILED, state, exc)
        if decision is QuotaDecision.DENY:
            return self._abort(AbortReason.QUOTA_EXCEEDED, state)

        state = PipelineState.FETCHING_DOCUMENT
        self._step(state, resume_id=command.resume_id)
        try:
            resume = self._resumes.get_by_id(command.resume_id)
        except NotFound as exc:
            return self._abort(AbortReason.RESUME_NOT_FOUND, state, exc)
        except QueryFailed as exc:
            return self._abort(AbortReason.STORAGE_UNAVAILABLE, state, exc)
        try:
            content = self._documents.download(resume.file_path)
        except StorageUnavailable as exc:
            return self._abort(AbortReason.STORAGE_UNAVAILABLE, state, exc)

        state = PipelineState.EXTRACTING_TEXT
        self._step(state, bytes=len(content))
        try:
            resume_text = await asyncio.to_thread(
                extract_text, content, min_chars=self._min_text_chars
            )
        except DocumentError as exc:
            return self._abort(AbortReason.DOCUMENT_UNREADABLE, state, exc, message=str(exc))

        state = PipelineState.REQUESTING_ASSESSMENT
        self._step(state, mode=command.mode, chars=len(resume_text))
        assessment: RoleAssessment
        try:
            if command.mode == "jd":
                assessment = await self._assessor.assess_for_jd(
                    resume_text, command.job_description or ""
                )
            else:
                assessment = await self._assessor.assess_for_role(resume_text, command.role or "")
        except AssessmentError as exc:
            logger.warning("assessment_failed code=%s detail=%s", exc.code, exc)
            return self._abort(AbortReason.ASSESSMENT_FAILED, state, exc)

        state = PipelineState.VALIDATING_RESPONSE
        self._step(state)
        try:
            draft = normalize_assessment(assessment, command)
        except AIResponseInvalidShape as exc:
            logger.warning("assessment_rejected detail=%s", exc)
            return self._abort(
                AbortReason.ASSESSMENT_FAILED,
                state,
                exc,
                message="Received an unexpected response from the AI service.",
            )

        state = PipelineState.PERSISTING
        self._step(state)
        try:
            report = self._reports.create(draft)
        except PersistFailed as exc:
            return self._abort(AbortReason.PERSIST_FAILED, state, exc)

        self._step(PipelineState.DONE, report_id=report.id)
        return Done(report=report)
