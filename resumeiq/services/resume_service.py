from __future__ import annotations

import asyncio
import logging
import time

from resumeiq.parsing.parse import MIN_TEXT_CHARS, extract_text
from resumeiq.schemas.resume import Resume
from resumeiq.storage.errors import PersistFailed, StorageUnavailable
from resumeiq.storage.files import DocumentStore, safe_filename
from resumeiq.storage.resumes import ResumeStore

logger = logging.getLogger(__name__)


def build_file_path(owner_id: str, filename: str | None) -> str:
    return f"{owner_id}/{int(time.time() * 1000)}-{safe_filename(filename)}"


async def upload_resume(
    *,
    filename: str | None,
    content: bytes,
    resumes: ResumeStore,
    documents: DocumentStore,
    min_text_chars: int = MIN_TEXT_CHARS,
) -> Resume:
    """Validate, store and register an uploaded PDF.

    The extractor runs first so unreadable files never reach storage. If the
    metadata insert fails, the stored object is removed again.
    """
    await asyncio.to_thread(extract_text, content, min_chars=min_text_chars)

    file_path = build_file_path(resumes.owner_id, filename)
    documents.upload(file_path, content)

    try:
        resume = resumes.create(file_path)
    except PersistFailed:
        try:
            documents.remove(file_path)
        except StorageUnavailable:
            logger.error("resume_rollback_failed path=%s", file_path, exc_info=True)
        raise

    logger.info("resume_uploaded id=%s owner=%s bytes=%s", resume.id, resume.owner_id, len(content))
    return resume
