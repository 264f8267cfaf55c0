"""
Tests for the repository implementations (repository.py).
Every test runs against both the in-memory and the SQLite store.
"""
from datetime import datetime

import pytest
from factories import make_profile

from skill_eval.errors import AttemptAlreadyCompleted, NotFound
from skill_eval.models import Answer, Attempt
from skill_eval.question_set import build_test
from skill_eval.report import evaluate_attempt
from skill_eval.repository import InMemoryRepository, SqliteRepository
from skill_eval.scorer import score_attempt


@pytest.fixture(params=["memory", "sqlite"])
def repo(request, tmp_path):
    if request.param == "memory":
        return InMemoryRepository()
    return SqliteRepository(tmp_path / "skill_eval.db")


def _attempt(test_id, user_id="user-1"):
    return Attempt(id=f"a-{test_id}", test_id=test_id, user_id=user_id,
                   start_time=datetime(2024, 5, 1, 9, 30))


class TestProfiles:
    def test_round_trip(self, repo):
        profile = make_profile(refinement="async focus")
        repo.create_profile(profile)
        assert repo.get_profile(profile.id) == profile

    def test_list_filters_by_user(self, repo):
        mine, theirs = make_profile(user_id="u1"), make_profile(user_id="u2")
        repo.create_profile(mine)
        repo.create_profile(theirs)
        assert [p.id for p in repo.list_profiles("u1")] == [mine.id]
        assert len(repo.list_profiles()) == 2

    def test_unknown_id(self, repo):
        with pytest.raises(NotFound) as exc_info:
            repo.get_profile("missing")
        assert exc_info.value.kind == "Profile"
        assert exc_info.value.id == "missing"


class TestTests:
    def test_round_trip_and_lookup_by_profile(self, repo, backend):
        profile = make_profile()
        test = build_test(profile, backend)
        repo.create_test(test)
        assert repo.get_test(test.id) == test
        assert repo.get_test_by_profile_id(profile.id) == test
        assert repo.get_test_by_profile_id("other") is None

    def test_unknown_id(self, repo):
        with pytest.raises(NotFound):
            repo.get_test("missing")


class TestAttempts:
    def test_update_persists_completion(self, repo, backend):
        test = build_test(make_profile(), backend)
        repo.create_test(test)
        attempt = _attempt(test.id)
        repo.create_attempt(attempt)
        assert repo.get_attempt(attempt.id).is_completed is False

        answers = [Answer(question_id=q.id, answer="A definition", time_spent=5)
                   for q in test.questions]
        evaluations = score_attempt(test.questions, answers, backend, max_workers=1)
        attempt.complete(answers, evaluate_attempt(test.questions, evaluations),
                         end_time=datetime(2024, 5, 1, 10, 0))
        repo.update_attempt(attempt)

        stored = repo.get_attempt(attempt.id)
        assert stored == attempt
        assert stored.is_completed
        assert stored.score == attempt.evaluation.overall_score

    def test_completed_attempt_is_final(self, repo):
        attempt = _attempt("t1")
        repo.create_attempt(attempt)
        attempt.complete([], evaluate_attempt([], []))
        repo.update_attempt(attempt)
        with pytest.raises(AttemptAlreadyCompleted):
            repo.update_attempt(attempt)
        assert repo.get_attempt(attempt.id).is_completed

    def test_update_unknown_raises(self, repo):
        with pytest.raises(NotFound):
            repo.update_attempt(_attempt("nope"))

    def test_list_filters_by_user(self, repo):
        repo.create_attempt(_attempt("t1", "u1"))
        repo.create_attempt(_attempt("t2", "u2"))
        assert [a.test_id for a in repo.list_attempts("u2")] == ["t2"]
        assert len(repo.list_attempts()) == 2


def test_in_memory_store_is_isolated_from_callers():
    repo = InMemoryRepository()
    attempt = _attempt("t1")
    repo.create_attempt(attempt)
    attempt.is_completed = True
    assert repo.get_attempt(attempt.id).is_completed is False
