import tempfile
import time
import unittest
from pathlib import Path

from resumeiq.schemas.report import ReportDraft
from resumeiq.storage import Database, NotFound, PersistFailed, ReportStore, ResumeStore


def role_draft(resume_id: str, role: str = "Backend Developer") -> ReportDraft:
    return ReportDraft(
        resume_id=resume_id,
        analysis_type="role",
        role=role,
        score=70,
        strengths=["a"],
        weaknesses=["b"],
        suggestions=["c"],
    )


class ReportStoreTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.db = Database(str(Path(self._tmp.name) / "reports.db"))
        self.resume = ResumeStore(self.db, "owner-a").create("owner-a/1-cv.pdf")
        self.store = ReportStore(self.db, "owner-a")
        self.other = ReportStore(self.db, "owner-b")

    def tearDown(self):
        self.db.close()
        self._tmp.cleanup()

    def test_create_assigns_id_and_created_at(self):
        report = self.store.create(role_draft(self.resume.id))
        self.assertTrue(report.id)
        self.assertEqual(report.owner_id, "owner-a")
        self.assertIsNotNone(report.created_at.tzinfo)

    def test_get_by_id_round_trips_lists(self):
        created = self.store.create(role_draft(self.resume.id))
        fetched = self.store.get_by_id(created.id)
        self.assertEqual(fetched.strengths, ["a"])
        self.assertIsNone(fetched.match_score)
        self.assertIsNone(fetched.missing_keywords)

    def test_list_is_newest_first_and_scoped_to_owner(self):
        first = self.store.create(role_draft(self.resume.id, "First"))
        time.sleep(0.002)
        second = self.store.create(role_draft(self.resume.id, "Second"))
        other_resume = ResumeStore(self.db, "owner-b").create("owner-b/1-cv.pdf")
        self.other.create(role_draft(other_resume.id, "Foreign"))

        summaries = self.store.list_by_owner()
        self.assertEqual([item.id for item in summaries], [second.id, first.id])
        self.assertNotIn("job_description", summaries[0].model_dump())
        self.assertNotIn("strengths", summaries[0].model_dump())

    def test_foreign_report_looks_like_missing_report(self):
        report = self.store.create(role_draft(self.resume.id))
        with self.assertRaises(NotFound):
            self.other.get_by_id(report.id)
        with self.assertRaises(NotFound):
            self.other.get_by_id("00000000-0000-0000-0000-000000000000")
        with self.assertRaises(NotFound):
            self.other.delete_by_id(report.id)
        self.assertEqual(self.store.get_by_id(report.id).id, report.id)

    def test_delete_twice_reports_not_found(self):
        report = self.store.create(role_draft(self.resume.id))
        self.store.delete_by_id(report.id)
        with self.assertRaises(NotFound):
            self.store.delete_by_id(report.id)
        with self.assertRaises(NotFound):
            self.store.get_by_id(report.id)

    def test_unknown_resume_reference_fails_to_persist(self):
        with self.assertRaises(PersistFailed):
            self.store.create(role_draft("missing-resume"))


if __name__ == "__main__":
    unittest.main()
