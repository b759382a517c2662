from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class Resume(BaseModel):
    id: str
    owner_id: str
    file_path: str
    created_at: datetime


class ResumeResponse(BaseModel):
    resume: Resume
