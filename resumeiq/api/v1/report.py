from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, Request, Response, status

from resumeiq.api.deps import get_report_pipeline, get_report_store
from resumeiq.core.config import settings
from resumeiq.core.errors import ApiError, envelope
from resumeiq.core.rate_limit import rate_limit
from resumeiq.schemas.report import GenerateReportRequest, ReportHistoryResponse, ReportResponse
from resumeiq.services.report_pdf import render_report_pdf, report_filename
from resumeiq.services.report_pipeline import AbortReason, Aborted, GenerateCommand, ReportPipeline
from resumeiq.storage.errors import NotFound, QueryFailed
from resumeiq.storage.reports import ReportStore

router = APIRouter()

NOT_FOUND_MESSAGE = "Report not found or access denied."

ABORT_STATUS: dict[AbortReason, int] = {
    AbortReason.QUOTA_EXCEEDED: status.HTTP_403_FORBIDDEN,
    AbortReason.RESUME_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    AbortReason.DOCUMENT_UNREADABLE: status.HTTP_400_BAD_REQUEST,
    AbortReason.ASSESSMENT_FAILED: status.HTTP_502_BAD_GATEWAY,
    AbortReason.QUOTA_CHECK_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    AbortReason.STORAGE_UNAVAILABLE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    AbortReason.PERSIST_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _raise_aborted(outcome: Aborted) -> None:
    raise ApiError(
        ABORT_STATUS[outcome.reason],
        outcome.message,
        code=outcome.reason.value.upper(),
    ) from outcome.cause


@router.post("/report/generate", status_code=status.HTTP_201_CREATED)
@rate_limit(settings.ai_rate_limit)
async def generate_report(
    request: Request,
    payload: GenerateReportRequest,
    pipeline: ReportPipeline = Depends(get_report_pipeline),
):
    _ = request
    outcome = await pipeline.run(
        GenerateCommand(
            resume_id=str(payload.resume_id),
            mode=payload.mode,
            role=payload.role,
            job_description=payload.job_description,
        )
    )
    if isinstance(outcome, Aborted):
        _raise_aborted(outcome)
    return envelope(ReportResponse(report=outcome.report).model_dump(mode="json"))


@router.get("/report/history")
@router.get("/report/all", include_in_schema=False)
async def report_history(reports: ReportStore = Depends(get_report_store)):
    try:
        summaries = reports.list_by_owner()
    except QueryFailed as exc:
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to fetch reports from the database.",
        ) from exc
    return envelope(ReportHistoryResponse(reports=summaries).model_dump(mode="json"))


def _load_report(reports: ReportStore, report_id: str):
    try:
        return reports.get_by_id(report_id)
    except NotFound as exc:
        raise ApiError(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE) from exc
    except QueryFailed as exc:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch report.") from exc


@router.get("/report/{report_id}/pdf")
async def download_report_pdf(report_id: str, reports: ReportStore = Depends(get_report_store)):
    report = _load_report(reports, report_id)
    content = await asyncio.to_thread(render_report_pdf, report)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{report_filename(report)}"',
            "Cache-Control": "no-store",
        },
    )


@router.get("/report/{report_id}")
async def get_report(report_id: str, reports: ReportStore = Depends(get_report_store)):
    report = _load_report(reports, report_id)
    return envelope(ReportResponse(report=report).model_dump(mode="json"))


@router.delete("/report/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(report_id: str, reports: ReportStore = Depends(get_report_store)):
    try:
        reports.delete_by_id(report_id)
    except NotFound as exc:
        raise ApiError(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE) from exc
    except QueryFailed as exc:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete report.") from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
