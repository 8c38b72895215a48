from django.test import SimpleTestCase, override_settings

from analysis.exceptions import SessionNotFound
from resumes.sessions import (
    CacheSessionStore,
    InMemorySessionStore,
    get_session_store,
    new_session,
    new_session_id,
    reset_session_store,
)


class SessionStoreContract:
    """Behaviour every session backend must share."""

    def make_store(self):
        raise NotImplementedError

    def setUp(self) -> None:
        self.store = self.make_store()

    def test_get_unknown_returns_none(self) -> None:
        self.assertIsNone(self.store.get("missing"))

    def test_set_and_get(self) -> None:
        self.store.set("s1", {"profile": {"name": "Dana"}})
        self.assertEqual(self.store.get("s1"), {"profile": {"name": "Dana"}})

    def test_update_preserves_unrelated_fields(self) -> None:
        profile = {"name": "Dana", "hardSkills": ["Python"]}
        jobs = [{"id": "j1", "title": "Data Engineer"}]
        self.store.set("s1", {"profile": profile})

        merged = self.store.update("s1", {"jobs": jobs})

        self.assertEqual(merged, {"profile": profile, "jobs": jobs})
        self.assertEqual(self.store.get("s1"), {"profile": profile, "jobs": jobs})

    def test_update_is_shallow_last_write_wins(self) -> None:
        self.store.set("s1", {"profile": {"name": "Dana", "location": "Berlin"}})
        self.store.update("s1", {"profile": {"name": "Dana R."}})
        self.assertEqual(self.store.get("s1"), {"profile": {"name": "Dana R."}})

    def test_update_creates_missing_record(self) -> None:
        self.store.update("s2", {"jobs": []})
        self.assertEqual(self.store.get("s2"), {"jobs": []})

    def test_delete(self) -> None:
        self.store.set("s1", {"profile": None})
        self.store.delete("s1")
        self.assertIsNone(self.store.get("s1"))
        self.store.delete("s1")

    def test_require(self) -> None:
        self.store.set("s1", {"id": "s1"})
        self.assertEqual(self.store.require("s1"), {"id": "s1"})
        with self.assertRaises(SessionNotFound):
            self.store.require("nope")
        with self.assertRaises(SessionNotFound):
            self.store.require(None)

    def test_returned_records_are_copies(self) -> None:
        self.store.set("s1", {"jobs": []})
        record = self.store.get("s1")
        record["profile"] = {"name": "mutated"}
        self.assertNotIn("profile", self.store.get("s1"))


class InMemorySessionStoreTests(SessionStoreContract, SimpleTestCase):
    def make_store(self):
        return InMemorySessionStore()


@override_settings(
    CACHES={
        "default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"},
        "sessions": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "careerfit-session-tests",
        },
    },
    CAREERFIT_SESSION_CACHE_ALIAS="sessions",
)
class CacheSessionStoreTests(SessionStoreContract, SimpleTestCase):
    def make_store(self):
        store = CacheSessionStore()
        store.cache.clear()
        return store

    def test_uses_configured_alias(self) -> None:
        self.assertEqual(self.store.alias, "sessions")


class SessionFactoryTests(SimpleTestCase):
    def test_session_id_is_md5_of_text_and_timestamp(self) -> None:
        self.assertEqual(new_session_id("", ""), "d41d8cd98f00b204e9800998ecf8427e")
        self.assertNotEqual(
            new_session_id("resume", "2024-01-01T00:00:00"),
            new_session_id("resume", "2024-01-01T00:00:01"),
        )

    def test_new_session_shape(self) -> None:
        session = new_session("resume text", {"name": "Dana"}, file_name="cv.pdf")
        self.assertEqual(
            set(session),
            {"id", "resume_text", "profile", "jobs", "saved_jobs", "file_name", "created_at"},
        )
        self.assertEqual(session["id"], new_session_id("resume text", session["created_at"]))
        self.assertEqual(session["jobs"], [])
        self.assertEqual(session["saved_jobs"], [])

    def test_profile_may_be_absent(self) -> None:
        self.assertIsNone(new_session("resume text")["profile"])


class SessionStoreSelectionTests(SimpleTestCase):
    def setUp(self) -> None:
        reset_session_store()
        self.addCleanup(reset_session_store)

    def test_default_backend_is_cache(self) -> None:
        self.assertIsInstance(get_session_store(), CacheSessionStore)

    @override_settings(CAREERFIT_SESSION_STORE="resumes.sessions.InMemorySessionStore")
    def test_backend_is_configurable_and_shared(self) -> None:
        store = get_session_store()
        self.assertIsInstance(store, InMemorySessionStore)
        self.assertIs(get_session_store(), store)
