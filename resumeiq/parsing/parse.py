from __future__ import annotations

import logging
from io import BytesIO

from pypdf import PdfReader

logger = logging.getLogger(__name__)

MIN_TEXT_CHARS = 80

SCANNED_MESSAGE = (
    "This resume appears to be a scanned/image PDF. Please export it from Word or Google Docs."
)
UNREADABLE_MESSAGE = (
    "Unable to read the resume file. Please export it from Word or Google Docs as a PDF and upload it again."
)


class DocumentError(ValueError):
    """The uploaded bytes cannot be turned into resume text."""

    message = UNREADABLE_MESSAGE

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.message)


class UnreadableDocument(DocumentError):
    message = UNREADABLE_MESSAGE


class ScannedDocument(DocumentError):
    message = SCANNED_MESSAGE


def extract_text(content: bytes, *, min_chars: int = MIN_TEXT_CHARS) -> str:
    """Return the text layer of a PDF, pages joined in document order."""
    try:
        reader = PdfReader(BytesIO(content))
        text_parts: list[str] = []
        for page in reader.pages:
            page_text = page.extract_text() or ""
            if page_text.strip():
                text_parts.append(page_text)
        text = "\n".join(text_parts)
    except Exception as exc:  # noqa: BLE001 - pypdf raises a wide range of errors on corrupt input
        logger.info("pdf_parse_failed bytes=%s error=%s", len(content), type(exc).__name__)
        raise UnreadableDocument() from exc

    if len(text.strip()) < min_chars:
        raise ScannedDocument()
    return text
