from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from resumeiq.storage.db import Database
from resumeiq.storage.reports import count_reports_since

logger = logging.getLogger(__name__)

DAILY_REPORT_LIMIT = 10


class QuotaDecision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


class QuotaCheckFailed(RuntimeError):
    pass


def start_of_utc_day(now: datetime) -> datetime:
    return now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)


class QuotaGuard:
    """Daily ceiling on report generations.

    The count and the later insert are not atomic, so concurrent requests can
    overshoot the limit slightly.
    """

    def __init__(
        self,
        db: Database,
        *,
        limit: int = DAILY_REPORT_LIMIT,
        owner_id: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._db = db
        self.limit = limit
        self.owner_id = owner_id
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def check_and_count(self) -> QuotaDecision:
        since = start_of_utc_day(self._clock())
        try:
            count = count_reports_since(self._db, since, owner_id=self.owner_id)
        except sqlite3.Error as exc:
            raise QuotaCheckFailed(f"daily report count failed: {exc}") from exc

        if count >= self.limit:
            logger.info(
                "quota_denied count=%s limit=%s scope=%s",
                count,
                self.limit,
                "owner" if self.owner_id else "global",
            )
            return QuotaDecision.DENY
        return QuotaDecision.ALLOW
