"""
Session correlator

Keeps an uploaded resume (and everything derived from it) addressable by a
session id across follow-on requests. Records are plain dicts; ``update``
performs a shallow merge where the last writer wins per top-level key.

Expiry is a deployment concern: the cache-backed store writes without a
timeout and relies on the cache's own eviction policy.
"""
import hashlib
import logging
import threading
from typing import Any, Dict, Mapping, Optional

from django.conf import settings
from django.core.cache import caches
from django.utils import timezone
from django.utils.module_loading import import_string

from analysis.exceptions import SessionNotFound

logger = logging.getLogger(__name__)


DEFAULT_SESSION_STORE = "resumes.sessions.CacheSessionStore"
CACHE_KEY_PREFIX = "careerfit:session:"


def new_session_id(resume_text: str, timestamp: str) -> str:
    """
    Session ids are the md5 hex digest of the resume text plus a timestamp.
    """
    return hashlib.md5(f"{resume_text}{timestamp}".encode("utf-8")).hexdigest()


def new_session(resume_text: str, profile: Optional[Mapping[str, Any]] = None, file_name: str = "") -> Dict[str, Any]:
    created_at = timezone.now().isoformat()
    return {
        "id": new_session_id(resume_text, created_at),
        "resume_text": resume_text,
        "profile": dict(profile) if profile is not None else None,
        "jobs": [],
        "saved_jobs": [],
        "file_name": file_name,
        "created_at": created_at,
    }


class SessionStore:
    """
    Interface for session backends.

    Subclasses implement ``get``, ``set`` and ``delete``; merging is shared.
    """

    def get(self, session_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def set(self, session_id: str, value: Mapping[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def delete(self, session_id: str) -> None:
        raise NotImplementedError

    def update(self, session_id: str, partial: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Shallow-merge ``partial`` into the stored record, creating it if absent.

        Keys not present in ``partial`` are preserved untouched. Concurrent
        updates are not serialized; the last writer wins per key.
        """
        current = self.get(session_id) or {}
        merged = {**current, **partial}
        return self.set(session_id, merged)

    def require(self, session_id: Optional[str]) -> Dict[str, Any]:
        record = self.get(session_id) if session_id else None
        if record is None:
            logger.info("Unknown session requested: %s", session_id)
            raise SessionNotFound()
        return record


class InMemorySessionStore(SessionStore):
    """
    Process-local dict store. Suitable for a single worker and for tests.
    """

    def __init__(self):
        self._records: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, session_id):
        with self._lock:
            record = self._records.get(session_id)
            return dict(record) if record is not None else None

    def set(self, session_id, value):
        record = dict(value)
        with self._lock:
            self._records[session_id] = record
        logger.debug("Stored session %s", session_id)
        return dict(record)

    def delete(self, session_id):
        with self._lock:
            self._records.pop(session_id, None)
        logger.debug("Deleted session %s", session_id)


class CacheSessionStore(SessionStore):
    """
    Store backed by the Django cache framework.
    """

    def __init__(self, alias: Optional[str] = None):
        self.alias = alias or getattr(settings, "CAREERFIT_SESSION_CACHE_ALIAS", "default")

    @property
    def cache(self):
        return caches[self.alias]

    def _key(self, session_id: str) -> str:
        return f"{CACHE_KEY_PREFIX}{session_id}"

    def get(self, session_id):
        return self.cache.get(self._key(session_id))

    def set(self, session_id, value):
        record = dict(value)
        self.cache.set(self._key(session_id), record, timeout=None)
        logger.debug("Stored session %s in cache '%s'", session_id, self.alias)
        return record

    def delete(self, session_id):
        self.cache.delete(self._key(session_id))
        logger.debug("Deleted session %s from cache '%s'", session_id, self.alias)


_store: Optional[SessionStore] = None
_store_lock = threading.Lock()


def get_session_store() -> SessionStore:
    """
    Return the configured session store, created once per process.
    """
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                path = getattr(settings, "CAREERFIT_SESSION_STORE", DEFAULT_SESSION_STORE)
                _store = import_string(path)()
                logger.info("Using session store %s", path)
    return _store


def reset_session_store() -> None:
    """
    Drop the cached store so the next call re-reads settings.
    """
    global _store
    with _store_lock:
        _store = None
