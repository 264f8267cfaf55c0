"""
skill_eval/repository.py — Persistence boundary
===============================================
Create / read / update of requirement profiles, generated tests and attempts
by opaque identifier.  The workflow only needs lookup-by-id and
update-by-id; no transactions or cross-attempt consistency are assumed.

Implementations
---------------
  InMemoryRepository   dict-backed; objects are copied on the way in and out
                       so callers never share mutable state with the store.
  SqliteRepository     one table per entity, JSON blobs in TEXT columns,
                       WAL journal, a fresh connection per call.

Unknown ids raise ``NotFound``.  A completed attempt is final: updating it again
raises ``AttemptAlreadyCompleted``.
"""

from __future__ import annotations

import copy
import json
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import closing
from pathlib import Path
from typing import Optional

from skill_eval.errors import AttemptAlreadyCompleted, NotFound
from skill_eval.models import Attempt, GeneratedTest, RequirementProfile


class Repository(ABC):
    """Storage-agnostic persistence interface."""

    # ── Profiles ─────────────────────────────────────────────────────────────
    @abstractmethod
    def create_profile(self, profile: RequirementProfile) -> RequirementProfile: ...

    @abstractmethod
    def get_profile(self, profile_id: str) -> RequirementProfile: ...

    @abstractmethod
    def list_profiles(self, user_id: Optional[str] = None) -> list[RequirementProfile]: ...

    # ── Generated tests ──────────────────────────────────────────────────────
    @abstractmethod
    def create_test(self, test: GeneratedTest) -> GeneratedTest: ...

    @abstractmethod
    def get_test(self, test_id: str) -> GeneratedTest: ...

    @abstractmethod
    def get_test_by_profile_id(self, profile_id: str) -> Optional[GeneratedTest]: ...

    # ── Attempts ─────────────────────────────────────────────────────────────
    @abstractmethod
    def create_attempt(self, attempt: Attempt) -> Attempt: ...

    @abstractmethod
    def get_attempt(self, attempt_id: str) -> Attempt: ...

    @abstractmethod
    def update_attempt(self, attempt: Attempt) -> Attempt: ...

    @abstractmethod
    def list_attempts(self, user_id: Optional[str] = None) -> list[Attempt]: ...


# ─── In-memory ───────────────────────────────────────────────────────────────

class InMemoryRepository(Repository):

    def __init__(self) -> None:
        self._profiles: dict[str, RequirementProfile] = {}
        self._tests:    dict[str, GeneratedTest] = {}
        self._attempts: dict[str, Attempt] = {}
        self._lock = threading.Lock()

    def create_profile(self, profile: RequirementProfile) -> RequirementProfile:
        with self._lock:
            self._profiles[profile.id] = profile
        return profile

    def get_profile(self, profile_id: str) -> RequirementProfile:
        try:
            return self._profiles[profile_id]
        except KeyError:
            raise NotFound("Profile", profile_id) from None

    def list_profiles(self, user_id: Optional[str] = None) -> list[RequirementProfile]:
        return [p for p in self._profiles.values() if user_id is None or p.user_id == user_id]

    def create_test(self, test: GeneratedTest) -> GeneratedTest:
        with self._lock:
            self._tests[test.id] = copy.deepcopy(test)
        return test

    def get_test(self, test_id: str) -> GeneratedTest:
        try:
            return copy.deepcopy(self._tests[test_id])
        except KeyError:
            raise NotFound("Test", test_id) from None

    def get_test_by_profile_id(self, profile_id: str) -> Optional[GeneratedTest]:
        test = next((t for t in self._tests.values() if t.profile_id == profile_id), None)
        return copy.deepcopy(test) if test else None

    def create_attempt(self, attempt: Attempt) -> Attempt:
        with self._lock:
            self._attempts[attempt.id] = copy.deepcopy(attempt)
        return attempt

    def get_attempt(self, attempt_id: str) -> Attempt:
        try:
            return copy.deepcopy(self._attempts[attempt_id])
        except KeyError:
            raise NotFound("Attempt", attempt_id) from None

    def update_attempt(self, attempt: Attempt) -> Attempt:
        with self._lock:
            stored = self._attempts.get(attempt.id)
            if stored is None:
                raise NotFound("Attempt", attempt.id)
            if stored.is_completed:
                raise AttemptAlreadyCompleted(attempt.id)
            self._attempts[attempt.id] = copy.deepcopy(attempt)
        return attempt

    def list_attempts(self, user_id: Optional[str] = None) -> list[Attempt]:
        return [
            copy.deepcopy(a) for a in self._attempts.values()
            if user_id is None or a.user_id == user_id
        ]


# ─── SQLite ──────────────────────────────────────────────────────────────────

_SCHEMA = """
CREATE TABLE IF NOT EXISTS profiles (
    id           TEXT PRIMARY KEY,
    user_id      TEXT NOT NULL,
    profile_json TEXT NOT NULL,
    created_at   TEXT DEFAULT (datetime('now'))
);
CREATE TABLE IF NOT EXISTS tests (
    id          TEXT PRIMARY KEY,
    profile_id  TEXT NOT NULL,
    test_json   TEXT NOT NULL,
    created_at  TEXT DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_tests_profile ON tests(profile_id);
CREATE TABLE IF NOT EXISTS attempts (
    id            TEXT PRIMARY KEY,
    test_id       TEXT NOT NULL,
    user_id       TEXT NOT NULL,
    is_completed  INTEGER NOT NULL DEFAULT 0,
    attempt_json  TEXT NOT NULL,
    updated_at    TEXT DEFAULT (datetime('now'))
);
"""


class SqliteRepository(Repository):
    """SQLite-backed store; the database file is created on first use."""

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = str(db_path)
        self.init_db()

    def _get_conn(self) -> sqlite3.Connection:
        """Return a connection with row_factory set."""
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def init_db(self) -> None:
        """Create tables if they don't exist."""
        with closing(self._get_conn()) as conn:
            conn.executescript(_SCHEMA)
            conn.commit()

    def _fetch_one(self, sql: str, params: tuple) -> Optional[sqlite3.Row]:
        with closing(self._get_conn()) as conn:
            return conn.execute(sql, params).fetchone()

    def _fetch_all(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        with closing(self._get_conn()) as conn:
            return conn.execute(sql, params).fetchall()

    def _write(self, sql: str, params: tuple) -> int:
        with closing(self._get_conn()) as conn:
            cur = conn.execute(sql, params)
            conn.commit()
            return cur.rowcount

    # ── Profiles ─────────────────────────────────────────────────────────────

    def create_profile(self, profile: RequirementProfile) -> RequirementProfile:
        self._write(
            "INSERT INTO profiles (id, user_id, profile_json) VALUES (?, ?, ?)",
            (profile.id, profile.user_id, profile.model_dump_json()),
        )
        return profile

    def get_profile(self, profile_id: str) -> RequirementProfile:
        row = self._fetch_one("SELECT profile_json FROM profiles WHERE id = ?", (profile_id,))
        if row is None:
            raise NotFound("Profile", profile_id)
        return RequirementProfile.model_validate_json(row["profile_json"])

    def list_profiles(self, user_id: Optional[str] = None) -> list[RequirementProfile]:
        if user_id is None:
            rows = self._fetch_all("SELECT profile_json FROM profiles ORDER BY rowid")
        else:
            rows = self._fetch_all(
                "SELECT profile_json FROM profiles WHERE user_id = ? ORDER BY rowid", (user_id,)
            )
        return [RequirementProfile.model_validate_json(r["profile_json"]) for r in rows]

    # ── Generated tests ──────────────────────────────────────────────────────

    def create_test(self, test: GeneratedTest) -> GeneratedTest:
        self._write(
            "INSERT INTO tests (id, profile_id, test_json) VALUES (?, ?, ?)",
            (test.id, test.profile_id, json.dumps(test.to_dict())),
        )
        return test

    def get_test(self, test_id: str) -> GeneratedTest:
        row = self._fetch_one("SELECT test_json FROM tests WHERE id = ?", (test_id,))
        if row is None:
            raise NotFound("Test", test_id)
        return GeneratedTest.from_dict(json.loads(row["test_json"]))

    def get_test_by_profile_id(self, profile_id: str) -> Optional[GeneratedTest]:
        row = self._fetch_one(
            "SELECT test_json FROM tests WHERE profile_id = ? ORDER BY rowid LIMIT 1",
            (profile_id,),
        )
        return GeneratedTest.from_dict(json.loads(row["test_json"])) if row else None

    # ── Attempts ─────────────────────────────────────────────────────────────

    def create_attempt(self, attempt: Attempt) -> Attempt:
        self._write(
            "INSERT INTO attempts (id, test_id, user_id, is_completed, attempt_json) "
            "VALUES (?, ?, ?, ?, ?)",
            (attempt.id, attempt.test_id, attempt.user_id,
             int(attempt.is_completed), json.dumps(attempt.to_dict())),
        )
        return attempt

    def get_attempt(self, attempt_id: str) -> Attempt:
        row = self._fetch_one("SELECT attempt_json FROM attempts WHERE id = ?", (attempt_id,))
        if row is None:
            raise NotFound("Attempt", attempt_id)
        return Attempt.from_dict(json.loads(row["attempt_json"]))

    def update_attempt(self, attempt: Attempt) -> Attempt:
        updated = self._write(
            "UPDATE attempts SET is_completed = ?, attempt_json = ?, "
            "updated_at = datetime('now') WHERE id = ? AND is_completed = 0",
            (int(attempt.is_completed), json.dumps(attempt.to_dict()), attempt.id),
        )
        if not updated:
            if self._fetch_one("SELECT 1 FROM attempts WHERE id = ?", (attempt.id,)) is None:
                raise NotFound("Attempt", attempt.id)
            raise AttemptAlreadyCompleted(attempt.id)
        return attempt

    def list_attempts(self, user_id: Optional[str] = None) -> list[Attempt]:
        if user_id is None:
            rows = self._fetch_all("SELECT attempt_json FROM attempts ORDER BY rowid")
        else:
            rows = self._fetch_all(
                "SELECT attempt_json FROM attempts WHERE user_id = ? ORDER BY rowid", (user_id,)
            )
        return [Attempt.from_dict(json.loads(r["attempt_json"])) for r in rows]
