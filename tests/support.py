from __future__ import annotations

import io
import json
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Sequence

import jwt
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from resumeiq.ai.types import ChatMessage
from resumeiq.core.config import Settings, load_settings
from resumeiq.core.container import Services
from resumeiq.services.assessment import AssessmentClient
from resumeiq.storage.db import Database
from resumeiq.storage.files import DocumentStore

JWT_SECRET = "test-secret-key-with-at-least-32-bytes"

RESUME_LINES = [
    "Jane Doe - Backend Developer",
    "jane.doe@example.com | +1 555 010 2030",
    "Experience: Built Python and FastAPI services handling 2M requests per day.",
    "Reduced PostgreSQL query latency by 40% through indexing and query rewrites.",
    "Skills: Python, FastAPI, PostgreSQL, Docker, AWS, Redis, CI/CD pipelines.",
]

JOB_DESCRIPTION = (
    "We are hiring a Senior Backend Engineer to design and operate Python services. "
    "Requirements: Python, Kubernetes, Kafka, PostgreSQL, observability tooling, and "
    "experience leading incident response for high-traffic APIs."
)

ROLE_REPLY = {
    "score": 82,
    "strengths": ["Quantified impact", "Relevant stack", "Clear layout"],
    "weaknesses": ["No leadership examples", "Sparse summary", "No certifications"],
    "suggestions": [
        "Add a summary",
        "Mention team size",
        "List certifications",
        "Link GitHub",
        "Tighten bullet wording",
    ],
}

JD_REPLY = {
    "score": 74,
    "match_score": 61,
    "strengths": ["Python depth", "PostgreSQL tuning"],
    "weaknesses": ["No Kubernetes", "No Kafka"],
    "suggestions": ["Add container orchestration work", "Describe on-call duties"],
    "missing_keywords": ["Kubernetes", "Kafka", "observability"],
}


def make_pdf(pages: Sequence[Sequence[str]]) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    for lines in pages:
        y = 800
        for line in lines:
            pdf.drawString(56, y, line)
            y -= 16
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def resume_pdf() -> bytes:
    return make_pdf([RESUME_LINES])


def make_token(
    owner_id: str,
    *,
    secret: str = JWT_SECRET,
    expires_in: timedelta = timedelta(hours=1),
    audience: str = "authenticated",
    **claims: Any,
) -> str:
    payload = {
        "sub": owner_id,
        "aud": audience,
        "exp": datetime.now(timezone.utc) + expires_in,
        **claims,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(owner_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(owner_id)}"}


class FakeAIClient:
    def __init__(self, reply: str | dict[str, Any] = "", error: Exception | None = None):
        self.reply = json.dumps(reply) if isinstance(reply, dict) else reply
        self.error = error
        self.calls: list[tuple[list[ChatMessage], float]] = []

    async def complete(self, messages: Sequence[ChatMessage], *, temperature: float) -> str:
        self.calls.append((list(messages), temperature))
        if self.error is not None:
            raise self.error
        return self.reply


def make_settings(workdir: str | Path, **overrides: Any) -> Settings:
    base = load_settings()
    values: dict[str, Any] = {
        "database_path": str(Path(workdir) / "resumeiq.db"),
        "storage_root": str(Path(workdir) / "storage"),
        "jwt_secret": JWT_SECRET,
        "jwt_audience": "authenticated",
        "ai_api_key": "test-key",
        "daily_report_limit": 10,
        "quota_scope": "global",
        "max_upload_bytes": 5 * 1024 * 1024,
        "min_extracted_chars": 80,
    }
    values.update(overrides)
    return replace(base, **values)


def make_services(workdir: str | Path, ai: FakeAIClient, **overrides: Any) -> Services:
    config = make_settings(workdir, **overrides)
    return Services(
        settings=config,
        database=Database(config.database_path),
        documents=DocumentStore(config.storage_root),
        assessor=AssessmentClient(ai, temperature=config.ai_temperature),
    )
