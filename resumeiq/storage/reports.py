from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from datetime import datetime, timezone

from resumeiq.schemas.report import Report, ReportDraft, ReportSummary
from resumeiq.storage.db import Database
from resumeiq.storage.errors import NotFound, PersistFailed, QueryFailed

logger = logging.getLogger(__name__)

_REPORT_COLUMNS = (
    "id, user_id, resume_id, analysis_type, role, job_description, score, match_score, "
    "strengths_json, weaknesses_json, suggestions_json, missing_keywords_json, created_at"
)
_SUMMARY_COLUMNS = "id, resume_id, role, analysis_type, score, match_score, created_at"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _load_list(raw: str | None) -> list[str] | None:
    if raw is None:
        return None
    return [str(item) for item in json.loads(raw)]


def _row_to_report(row: sqlite3.Row) -> Report:
    return Report(
        id=row["id"],
        owner_id=row["user_id"],
        resume_id=row["resume_id"],
        analysis_type=row["analysis_type"],
        role=row["role"],
        job_description=row["job_description"],
        score=row["score"],
        match_score=row["match_score"],
        strengths=_load_list(row["strengths_json"]) or [],
        weaknesses=_load_list(row["weaknesses_json"]) or [],
        suggestions=_load_list(row["suggestions_json"]) or [],
        missing_keywords=_load_list(row["missing_keywords_json"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _row_to_summary(row: sqlite3.Row) -> ReportSummary:
    return ReportSummary(
        id=row["id"],
        resume_id=row["resume_id"],
        role=row["role"],
        analysis_type=row["analysis_type"],
        score=row["score"],
        match_score=row["match_score"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def count_reports_since(db: Database, since: datetime, owner_id: str | None = None) -> int:
    """Count report rows created at or after ``since``; all owners unless one is given."""
    query = "SELECT COUNT(1) FROM reports WHERE created_at >= ?"
    params: tuple[str, ...] = (since.astimezone(timezone.utc).isoformat(),)
    if owner_id is not None:
        query += " AND user_id = ?"
        params += (owner_id,)
    with db.transaction() as conn:
        row = conn.execute(query, params).fetchone()
    return int(row[0] or 0)


class ReportStore:
    """Report rows visible to a single owner.

    Every read and delete filters on the bound owner, so a row belonging to
    somebody else behaves exactly like a row that does not exist.
    """

    def __init__(self, db: Database, owner_id: str):
        self._db = db
        self.owner_id = owner_id

    def create(self, draft: ReportDraft) -> Report:
        report_id = str(uuid.uuid4())
        created_at = _utc_now()
        missing = draft.missing_keywords
        try:
            with self._db.transaction() as conn:
                conn.execute(
                    f"""
                    INSERT INTO reports ({_REPORT_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        report_id,
                        self.owner_id,
                        draft.resume_id,
                        draft.analysis_type,
                        draft.role,
                        draft.job_description,
                        draft.score,
                        draft.match_score,
                        json.dumps(draft.strengths, ensure_ascii=False),
                        json.dumps(draft.weaknesses, ensure_ascii=False),
                        json.dumps(draft.suggestions, ensure_ascii=False),
                        json.dumps(missing, ensure_ascii=False) if missing is not None else None,
                        created_at.isoformat(),
                    ),
                )
        except sqlite3.Error as exc:
            raise PersistFailed(f"report insert failed: {exc}") from exc

        return Report(
            id=report_id,
            owner_id=self.owner_id,
            created_at=created_at,
            **draft.model_dump(),
        )

    def list_by_owner(self) -> list[ReportSummary]:
        try:
            with self._db.transaction() as conn:
                rows = conn.execute(
                    f"""
                    SELECT {_SUMMARY_COLUMNS}
                    FROM reports
                    WHERE user_id = ?
                    ORDER BY created_at DESC, rowid DESC
                    """,
                    (self.owner_id,),
                ).fetchall()
        except sqlite3.Error as exc:
            raise QueryFailed(f"report listing failed: {exc}") from exc
        return [_row_to_summary(row) for row in rows]

    def get_by_id(self, report_id: str) -> Report:
        try:
            with self._db.transaction() as conn:
                row = conn.execute(
                    f"SELECT {_REPORT_COLUMNS} FROM reports WHERE id = ? AND user_id = ?",
                    (report_id, self.owner_id),
                ).fetchone()
        except sqlite3.Error as exc:
            raise QueryFailed(f"report lookup failed: {exc}") from exc
        if row is None:
            raise NotFound(report_id)
        return _row_to_report(row)

    def delete_by_id(self, report_id: str) -> None:
        try:
            with self._db.transaction() as conn:
                cursor = conn.execute(
                    "DELETE FROM reports WHERE id = ? AND user_id = ?",
                    (report_id, self.owner_id),
                )
        except sqlite3.Error as exc:
            raise QueryFailed(f"report delete failed: {exc}") from exc
        if cursor.rowcount == 0:
            raise NotFound(report_id)
        logger.info("report_deleted id=%s owner=%s", report_id, self.owner_id)
