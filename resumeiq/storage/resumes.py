from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime, timezone

from resumeiq.schemas.resume import Resume
from resumeiq.storage.db import Database
from resumeiq.storage.errors import NotFound, PersistFailed, QueryFailed


class ResumeStore:
    """Resume metadata rows visible to a single owner."""

    def __init__(self, db: Database, owner_id: str):
        self._db = db
        self.owner_id = owner_id

    def create(self, file_path: str) -> Resume:
        resume = Resume(
            id=str(uuid.uuid4()),
            owner_id=self.owner_id,
            file_path=file_path,
            created_at=datetime.now(timezone.utc),
        )
        try:
            with self._db.transaction() as conn:
                conn.execute(
                    "INSERT INTO resumes (id, user_id, file_path, created_at) VALUES (?, ?, ?, ?)",
                    (resume.id, resume.owner_id, resume.file_path, resume.created_at.isoformat()),
                )
        except sqlite3.Error as exc:
            raise PersistFailed(f"resume insert failed: {exc}") from exc
        return resume

    def get_by_id(self, resume_id: str) -> Resume:
        try:
            with self._db.transaction() as conn:
                row = conn.execute(
                    "SELECT id, user_id, file_path, created_at FROM resumes WHERE id = ? AND user_id = ?",
                    (resume_id, self.owner_id),
                ).fetchone()
        except sqlite3.Error as exc:
            raise QueryFailed(f"resume lookup failed: {exc}") from exc
        if row is None:
            raise NotFound(resume_id)
        return Resume(
            id=row["id"],
            owner_id=row["user_id"],
            file_path=row["file_path"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
