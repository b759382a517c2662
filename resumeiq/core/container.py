from __future__ import annotations

from dataclasses import dataclass

from resumeiq.ai.factory import get_ai_client
from resumeiq.core.config import Settings
from resumeiq.services.assessment import AssessmentClient
from resumeiq.storage.db import Database
from resumeiq.storage.files import DocumentStore


@dataclass
class Services:
    """Long-lived handles shared by every request."""

    settings: Settings
    database: Database
    documents: DocumentStore
    assessor: AssessmentClient


def build_services(config: Settings) -> Services:
    return Services(
        settings=config,
        database=Database(config.database_path),
        documents=DocumentStore(config.storage_root),
        assessor=AssessmentClient(get_ai_client(config), temperature=config.ai_temperature),
    )
