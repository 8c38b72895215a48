"""
Saved Job Service Layer
Tracks jobs a candidate saved from search results and their application status.
"""
import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional

from django.utils import timezone

from analysis.exceptions import InvalidRequest

from .sessions import SessionStore, get_session_store

logger = logging.getLogger(__name__)


class JobTracker:
    """Service for saved jobs stored on a resume session."""

    VALID_STATUSES = ['SAVED', 'APPLIED', 'INTERVIEWING', 'OFFER', 'REJECTED', 'WITHDRAWN']
    TRACKED_FIELDS = ['title', 'company', 'location', 'url', 'salary', 'matchScore']

    def __init__(self, store: Optional[SessionStore] = None):
        self.store = store or get_session_store()

    @staticmethod
    def normalize_status(status: Optional[str]) -> str:
        """
        Uppercase ``status`` and check it against VALID_STATUSES.

        Raises:
            InvalidRequest: unknown status
        """
        value = (status or 'SAVED').strip().upper()
        if value not in JobTracker.VALID_STATUSES:
            raise InvalidRequest(
                f"status must be one of: {', '.join(JobTracker.VALID_STATUSES)}"
            )
        return value

    def saved_jobs(self, session_id: Optional[str]) -> List[Dict[str, Any]]:
        """Return tracked jobs for a session; unknown sessions have none."""
        record = self.store.get(session_id) if session_id else None
        if record is None:
            return []
        return list(record.get('saved_jobs') or [])

    def save_job(self, session_id: str, job: Mapping[str, Any], status: Optional[str] = None) -> Dict[str, Any]:
        """
        Add ``job`` to the session's saved jobs.

        Saving a job id that is already tracked refreshes that entry instead
        of adding a duplicate.
        """
        record = self.store.require(session_id)
        status = self.normalize_status(status)
        now = timezone.now().isoformat()

        job_id = str(job.get('id') or '') or str(uuid.uuid4())
        saved_jobs = list(record.get('saved_jobs') or [])
        existing = next((entry for entry in saved_jobs if entry.get('id') == job_id), None)

        entry = dict(existing or {'id': job_id, 'saved_at': now, 'applied_at': None, 'notes': ''})
        for field in self.TRACKED_FIELDS:
            if field in job:
                entry[field] = job[field]
        entry['status'] = status
        entry['updated_at'] = now
        if status == 'APPLIED' and not entry.get('applied_at'):
            entry['applied_at'] = now

        if existing is None:
            saved_jobs.append(entry)
        else:
            saved_jobs[saved_jobs.index(existing)] = entry

        self.store.update(session_id, {'saved_jobs': saved_jobs})
        logger.info("Saved job %s on session %s as %s", job_id, session_id, status)
        return entry

    def update_job_status(self, session_id: str, job_id: str, status: str, notes: Optional[str] = None) -> Dict[str, Any]:
        """
        Change the status of a tracked job. APPLIED stamps ``applied_at``.

        Raises:
            SessionNotFound: unknown session
            InvalidRequest: unknown status or job id
        """
        record = self.store.require(session_id)
        status = self.normalize_status(status)

        saved_jobs = list(record.get('saved_jobs') or [])
        for index, entry in enumerate(saved_jobs):
            if entry.get('id') == job_id:
                break
        else:
            raise InvalidRequest(f"Job '{job_id}' is not saved on this session.")

        now = timezone.now().isoformat()
        entry = dict(saved_jobs[index])
        entry['status'] = status
        entry['updated_at'] = now
        if notes is not None:
            entry['notes'] = notes
        if status == 'APPLIED':
            entry['applied_at'] = now
        saved_jobs[index] = entry

        self.store.update(session_id, {'saved_jobs': saved_jobs})
        logger.info("Job %s on session %s moved to %s", job_id, session_id, status)
        return entry
