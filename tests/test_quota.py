import sqlite3
import tempfile
import unittest
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

from resumeiq.services.quota import QuotaCheckFailed, QuotaDecision, QuotaGuard, start_of_utc_day
from resumeiq.storage import Database, ResumeStore

NOW = datetime(2026, 3, 14, 15, 30, tzinfo=timezone.utc)


class QuotaGuardTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.db = Database(str(Path(self._tmp.name) / "quota.db"))
        self.resumes = {
            owner: ResumeStore(self.db, owner).create(f"{owner}/cv.pdf") for owner in ("owner-a", "owner-b")
        }

    def tearDown(self):
        self.db.close()
        self._tmp.cleanup()

    def _insert_reports(self, owner: str, count: int, created_at: datetime) -> None:
        with self.db.transaction() as conn:
            for _ in range(count):
                conn.execute(
                    """
                    INSERT INTO reports (
                        id, user_id, resume_id, analysis_type, role, score,
                        strengths_json, weaknesses_json, suggestions_json, created_at
                    ) VALUES (?, ?, ?, 'role', 'Dev', 50, '[]', '[]', '[]', ?)
                    """,
                    (str(uuid.uuid4()), owner, self.resumes[owner].id, created_at.isoformat()),
                )

    def _guard(self, **kwargs) -> QuotaGuard:
        return QuotaGuard(self.db, clock=lambda: NOW, **kwargs)

    def test_start_of_day_is_midnight_utc(self):
        local = datetime(2026, 3, 14, 1, 0, tzinfo=timezone(timedelta(hours=5)))
        self.assertEqual(start_of_utc_day(local), datetime(2026, 3, 13, tzinfo=timezone.utc))

    def test_allows_below_limit(self):
        self._insert_reports("owner-a", 9, NOW - timedelta(hours=1))
        self.assertIs(self._guard().check_and_count(), QuotaDecision.ALLOW)

    def test_denies_at_limit(self):
        self._insert_reports("owner-a", 10, NOW - timedelta(hours=1))
        self.assertIs(self._guard().check_and_count(), QuotaDecision.DENY)

    def test_reports_from_yesterday_do_not_count(self):
        self._insert_reports("owner-a", 10, start_of_utc_day(NOW) - timedelta(seconds=1))
        self.assertIs(self._guard().check_and_count(), QuotaDecision.ALLOW)

    def test_global_scope_counts_every_owner(self):
        self._insert_reports("owner-a", 5, NOW)
        self._insert_reports("owner-b", 5, NOW)
        self.assertIs(self._guard().check_and_count(), QuotaDecision.DENY)

    def test_owner_scope_counts_only_that_owner(self):
        self._insert_reports("owner-a", 2, NOW)
        self._insert_reports("owner-b", 10, NOW)
        self.assertIs(self._guard(owner_id="owner-a").check_and_count(), QuotaDecision.ALLOW)
        self.assertIs(self._guard(owner_id="owner-b").check_and_count(), QuotaDecision.DENY)

    def test_count_failure_is_not_a_deny(self):
        with patch(
            "resumeiq.services.quota.count_reports_since",
            side_effect=sqlite3.OperationalError("database is locked"),
        ):
            with self.assertRaises(QuotaCheckFailed):
                self._guard().check_and_count()


if __name__ == "__main__":
    unittest.main()
