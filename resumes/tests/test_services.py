from django.test import SimpleTestCase

from analysis.exceptions import InvalidRequest, SessionNotFound
from resumes.services import JobTracker
from resumes.sessions import InMemorySessionStore, new_session


JOB = {
    "id": "job-1",
    "title": "Data Engineer",
    "company": "Globex",
    "location": "Remote",
    "url": "https://example.com/jobs/1",
    "matchScore": 88,
    "description": "Not tracked",
}


class JobTrackerTests(SimpleTestCase):
    """Saved jobs live on the session record and only change through update()."""

    def setUp(self) -> None:
        self.store = InMemorySessionStore()
        self.session = new_session("resume text", {"name": "Dana"})
        self.store.set(self.session["id"], self.session)
        self.tracker = JobTracker(store=self.store)

    def test_save_job_keeps_tracked_fields(self) -> None:
        entry = self.tracker.save_job(self.session["id"], JOB)

        self.assertEqual(entry["id"], "job-1")
        self.assertEqual(entry["status"], "SAVED")
        self.assertEqual(entry["company"], "Globex")
        self.assertNotIn("description", entry)
        self.assertIsNone(entry["applied_at"])
        self.assertEqual(self.tracker.saved_jobs(self.session["id"]), [entry])

    def test_save_job_preserves_other_session_fields(self) -> None:
        self.tracker.save_job(self.session["id"], JOB)
        record = self.store.get(self.session["id"])
        self.assertEqual(record["profile"], {"name": "Dana"})
        self.assertEqual(record["resume_text"], "resume text")

    def test_saving_again_updates_in_place(self) -> None:
        first = self.tracker.save_job(self.session["id"], JOB)
        second = self.tracker.save_job(self.session["id"], {**JOB, "title": "Senior Data Engineer"}, "applied")

        jobs = self.tracker.saved_jobs(self.session["id"])
        self.assertEqual(len(jobs), 1)
        self.assertEqual(jobs[0]["title"], "Senior Data Engineer")
        self.assertEqual(second["saved_at"], first["saved_at"])
        self.assertIsNotNone(second["applied_at"])

    def test_jobs_without_id_get_one(self) -> None:
        entry = self.tracker.save_job(self.session["id"], {"title": "Analyst"})
        self.assertTrue(entry["id"])

    def test_update_status_to_applied_stamps_date(self) -> None:
        self.tracker.save_job(self.session["id"], JOB)

        entry = self.tracker.update_job_status(self.session["id"], "job-1", "applied", notes="Referral from Sam")

        self.assertEqual(entry["status"], "APPLIED")
        self.assertEqual(entry["notes"], "Referral from Sam")
        self.assertIsNotNone(entry["applied_at"])

    def test_update_status_keeps_notes_when_omitted(self) -> None:
        self.tracker.save_job(self.session["id"], JOB)
        self.tracker.update_job_status(self.session["id"], "job-1", "INTERVIEWING", notes="Phone screen")
        entry = self.tracker.update_job_status(self.session["id"], "job-1", "OFFER")
        self.assertEqual(entry["notes"], "Phone screen")
        self.assertIsNone(entry["applied_at"])

    def test_invalid_status(self) -> None:
        self.tracker.save_job(self.session["id"], JOB)
        with self.assertRaises(InvalidRequest):
            self.tracker.update_job_status(self.session["id"], "job-1", "GHOSTED")

    def test_unknown_job(self) -> None:
        with self.assertRaises(InvalidRequest):
            self.tracker.update_job_status(self.session["id"], "job-404", "APPLIED")

    def test_unknown_session(self) -> None:
        with self.assertRaises(SessionNotFound):
            self.tracker.save_job("missing", JOB)
        self.assertEqual(self.tracker.saved_jobs("missing"), [])
        self.assertEqual(self.tracker.saved_jobs(None), [])

    def test_normalize_status(self) -> None:
        self.assertEqual(JobTracker.normalize_status(None), "SAVED")
        self.assertEqual(JobTracker.normalize_status(" withdrawn "), "WITHDRAWN")
