from .db import Database
from .errors import NotFound, PersistFailed, QueryFailed, StorageUnavailable
from .files import DocumentStore
from .reports import ReportStore, count_reports_since
from .resumes import ResumeStore

__all__ = [
    "Database",
    "DocumentStore",
    "ReportStore",
    "ResumeStore",
    "count_reports_since",
    "NotFound",
    "PersistFailed",
    "QueryFailed",
    "StorageUnavailable",
]
