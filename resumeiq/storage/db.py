from __future__ import annotations

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS resumes (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        file_path TEXT NOT NULL UNIQUE,
        created_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS reports (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        resume_id TEXT NOT NULL REFERENCES resumes (id),
        analysis_type TEXT NOT NULL CHECK (analysis_type IN ('role', 'jd')),
        role TEXT,
        job_description TEXT,
        score INTEGER NOT NULL CHECK (score BETWEEN 0 AND 100),
        match_score INTEGER CHECK (match_score BETWEEN 0 AND 100),
        strengths_json TEXT NOT NULL,
        weaknesses_json TEXT NOT NULL,
        suggestions_json TEXT NOT NULL,
        missing_keywords_json TEXT,
        created_at TEXT NOT NULL
    );
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_reports_created_at
    ON reports (created_at);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_reports_owner_created
    ON reports (user_id, created_at);
    """,
)


class Database:
    """Shared sqlite connection factory.

    One connection is opened lazily and reused by every request-scoped store;
    access is serialized with a lock because sqlite connections are not
    safe to use from several threads at once.
    """

    def __init__(self, path: str):
        self.path = path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()

    def _connect(self) -> sqlite3.Connection:
        if self.path != ":memory:":
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)

        conn = sqlite3.connect(
            self.path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA busy_timeout=5000;")
        conn.execute("PRAGMA foreign_keys=ON;")
        for statement in _SCHEMA:
            conn.execute(statement)
        logger.info("database_ready path=%s", self.path)
        return conn

    def connection(self) -> sqlite3.Connection:
        with self._lock:
            if self._conn is None:
                self._conn = self._connect()
            return self._conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self.connection()
        with self._lock:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.rollback()
                raise
            conn.commit()

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
