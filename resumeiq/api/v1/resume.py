from __future__ import annotations

from fastapi import APIRouter, Depends, File, Request, UploadFile, status

from resumeiq.api.deps import get_resume_store, get_services
from resumeiq.core.container import Services
from resumeiq.core.errors import ApiError, envelope
from resumeiq.core.rate_limit import rate_limit
from resumeiq.parsing.parse import DocumentError
from resumeiq.schemas.resume import ResumeResponse
from resumeiq.services.resume_service import upload_resume
from resumeiq.storage.errors import PersistFailed, StorageUnavailable
from resumeiq.storage.files import looks_like_pdf
from resumeiq.storage.resumes import ResumeStore

router = APIRouter()

PDF_CONTENT_TYPES = {"application/pdf"}


async def _read_limited(file: UploadFile, max_bytes: int) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise ApiError(
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                f"File too large. Maximum allowed size is {max_bytes // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/resume/upload", status_code=status.HTTP_201_CREATED)
@rate_limit()
async def upload_resume_file(
    request: Request,
    resume: UploadFile | None = File(default=None),
    resumes: ResumeStore = Depends(get_resume_store),
    services: Services = Depends(get_services),
):
    _ = request
    if resume is None:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "No file uploaded. Attach a PDF under the key 'resume'.",
        )

    content_type = (resume.content_type or "").split(";")[0].strip().lower()
    if content_type not in PDF_CONTENT_TYPES:
        raise ApiError(status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, "Only PDF files are accepted.")

    content = await _read_limited(resume, services.settings.max_upload_bytes)
    if not looks_like_pdf(content):
        raise ApiError(status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, "Only PDF files are accepted.")

    try:
        record = await upload_resume(
            filename=resume.filename,
            content=content,
            resumes=resumes,
            documents=services.documents,
            min_text_chars=services.settings.min_extracted_chars,
        )
    except DocumentError as exc:
        raise ApiError(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    except StorageUnavailable as exc:
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to upload resume to storage.",
        ) from exc
    except PersistFailed as exc:
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to save resume metadata.",
        ) from exc

    return envelope(ResumeResponse(resume=record).model_dump(mode="json"))
