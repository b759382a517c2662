from __future__ import annotations

import logging
import re
from pathlib import Path

from resumeiq.storage.errors import StorageUnavailable

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"


def safe_filename(name: str | None) -> str:
    if not name:
        return "resume.pdf"
    name = re.sub(r"[^A-Za-z0-9_.-]", "_", name)
    name = name.strip("._") or "resume.pdf"
    return name[:64]


def looks_like_pdf(content: bytes) -> bool:
    return content.lstrip()[: len(PDF_MAGIC)] == PDF_MAGIC


class DocumentStore:
    """Object storage for uploaded files, one directory per bucket."""

    def __init__(self, root: str, bucket: str = "resumes"):
        self._root = (Path(root) / bucket).resolve()

    def _resolve(self, file_path: str) -> Path:
        target = (self._root / file_path).resolve()
        if target == self._root or self._root not in target.parents:
            raise StorageUnavailable(f"invalid object path '{file_path}'")
        return target

    def upload(self, file_path: str, content: bytes) -> None:
        target = self._resolve(file_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("xb") as handle:
                handle.write(content)
        except OSError as exc:
            raise StorageUnavailable(f"upload failed for '{file_path}': {exc}") from exc
        logger.info("document_uploaded path=%s bytes=%s", file_path, len(content))

    def download(self, file_path: str) -> bytes:
        target = self._resolve(file_path)
        try:
            return target.read_bytes()
        except OSError as exc:
            raise StorageUnavailable(f"download failed for '{file_path}': {exc}") from exc

    def remove(self, file_path: str) -> None:
        target = self._resolve(file_path)
        try:
            target.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageUnavailable(f"remove failed for '{file_path}': {exc}") from exc
        logger.info("document_removed path=%s", file_path)
