from __future__ import annotations

from fastapi import Depends, Header, Request

from resumeiq.core.container import Services
from resumeiq.core.security import Identity, verify_access_token
from resumeiq.services.quota import QuotaGuard
from resumeiq.services.report_pipeline import ReportPipeline
from resumeiq.storage.reports import ReportStore
from resumeiq.storage.resumes import ResumeStore


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_identity(
    authorization: str | None = Header(default=None),
    services: Services = Depends(get_services),
) -> Identity:
    return verify_access_token(authorization, services.settings)


def get_report_store(
    identity: Identity = Depends(get_identity),
    services: Services = Depends(get_services),
) -> ReportStore:
    return ReportStore(services.database, identity.owner_id)


def get_resume_store(
    identity: Identity = Depends(get_identity),
    services: Services = Depends(get_services),
) -> ResumeStore:
    return ResumeStore(services.database, identity.owner_id)


def get_report_pipeline(
    identity: Identity = Depends(get_identity),
    services: Services = Depends(get_services),
    resumes: ResumeStore = Depends(get_resume_store),
    reports: ReportStore = Depends(get_report_store),
) -> ReportPipeline:
    config = services.settings
    quota = QuotaGuard(
        services.database,
        limit=config.daily_report_limit,
        owner_id=identity.owner_id if config.quota_scope == "owner" else None,
    )
    return ReportPipeline(
        quota=quota,
        resumes=resumes,
        documents=services.documents,
        assessor=services.assessor,
        reports=reports,
        min_text_chars=config.min_extracted_chars,
    )
