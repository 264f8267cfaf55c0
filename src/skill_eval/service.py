"""
service.py — Assessment workflow orchestration
==============================================
Ties the pure engine to its collaborators (generator, evaluator, storage).

  create_profile   validate + persist a RequirementProfile
  generate_test    refinement → slots → questions → metadata (idempotent per profile)
  start_attempt    open an uncompleted attempt for a user
  submit_attempt   score answers → aggregate → report; closes the attempt once
  analytics        cross-attempt statistics for a user
  export           snapshot of a user's profiles and attempts

User ids are explicit parameters; there is no process-wide current user.

Usage::

    service = AssessmentService(InMemoryRepository(), MockBackend(), MockBackend())
    profile = service.create_profile("u1", role="Backend Developer", ...)
    test    = service.generate_test(profile.id)
    attempt = service.start_attempt(test.id, "u1")
    attempt = service.submit_attempt(attempt.id, answers)
    attempt.evaluation.overall_score
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, Optional

from skill_eval.analytics import Analytics, compute_analytics, export_data
from skill_eval.backends.base import AnswerEvaluator, QuestionGenerator
from skill_eval.errors import AttemptAlreadyCompleted
from skill_eval.models import (
    Answer,
    Attempt,
    GeneratedTest,
    RequirementProfile,
    new_id,
)
from skill_eval.question_set import build_test
from skill_eval.report import evaluate_attempt
from skill_eval.repository import Repository
from skill_eval.scorer import score_attempt

logger = logging.getLogger(__name__)


def _to_answer(raw: Answer | dict[str, Any]) -> Answer:
    if isinstance(raw, Answer):
        return raw
    return Answer(
        question_id=str(raw["question_id"]),
        answer=str(raw.get("answer") or ""),
        time_spent=int(raw.get("time_spent") or 0),
    )


class AssessmentService:
    """Profile → test → attempt → report workflow over an injected repository."""

    def __init__(
        self,
        repository: Repository,
        generator: QuestionGenerator,
        evaluator: AnswerEvaluator,
        max_workers: int = 4,
    ) -> None:
        self.repository  = repository
        self.generator   = generator
        self.evaluator   = evaluator
        self.max_workers = max_workers

    # ── Profiles ─────────────────────────────────────────────────────────────

    def create_profile(self, user_id: str, **fields: Any) -> RequirementProfile:
        """Validate and store a profile.  Raises ``InvalidProfile``."""
        profile = RequirementProfile.from_input({**fields, "user_id": user_id})
        self.repository.create_profile(profile)
        logger.info("Created profile %s for user %s (%s)", profile.id, user_id, profile.role)
        return profile

    def get_profile(self, profile_id: str) -> RequirementProfile:
        return self.repository.get_profile(profile_id)

    # ── Tests ────────────────────────────────────────────────────────────────

    def generate_test(self, profile_id: str) -> GeneratedTest:
        """Return the test for *profile_id*, generating it on first request."""
        profile  = self.repository.get_profile(profile_id)
        existing = self.repository.get_test_by_profile_id(profile_id)
        if existing is not None:
            logger.debug("Reusing test %s for profile %s", existing.id, profile_id)
            return existing

        test = build_test(profile, self.generator)
        self.repository.create_test(test)
        return test

    def get_test(self, test_id: str) -> GeneratedTest:
        return self.repository.get_test(test_id)

    # ── Attempts ─────────────────────────────────────────────────────────────

    def start_attempt(
        self, test_id: str, user_id: str, start_time: Optional[datetime] = None
    ) -> Attempt:
        self.repository.get_test(test_id)   # NotFound for unknown tests
        attempt = Attempt(
            id=new_id(),
            test_id=test_id,
            user_id=user_id,
            start_time=start_time or datetime.now(),
        )
        self.repository.create_attempt(attempt)
        logger.info("Started attempt %s on test %s for user %s", attempt.id, test_id, user_id)
        return attempt

    def submit_attempt(
        self,
        attempt_id: str,
        answers: Iterable[Answer | dict[str, Any]],
        end_time: Optional[datetime] = None,
    ) -> Attempt:
        """
        Score *answers*, attach the EvaluationResult and close the attempt.

        Always completes with a report: upstream failures show up as zero
        scores on the affected questions.  A second submission raises
        ``AttemptAlreadyCompleted``; the repository enforces this too, so of
        two overlapping submissions only the first write is kept.
        """
        attempt = self.repository.get_attempt(attempt_id)
        if attempt.is_completed:
            raise AttemptAlreadyCompleted(attempt_id)
        test = self.repository.get_test(attempt.test_id)

        answer_list = [_to_answer(a) for a in answers]
        evaluations = score_attempt(
            test.questions, answer_list, self.evaluator, max_workers=self.max_workers
        )
        evaluation = evaluate_attempt(test.questions, evaluations)

        attempt.complete(answer_list, evaluation, end_time=end_time)
        self.repository.update_attempt(attempt)
        logger.info(
            "Attempt %s scored %d%% over %d question(s)",
            attempt_id, evaluation.overall_score, len(test.questions),
        )
        return attempt

    def get_attempt(self, attempt_id: str) -> Attempt:
        return self.repository.get_attempt(attempt_id)

    # ── History / analytics ──────────────────────────────────────────────────

    def list_history(self, user_id: str) -> dict[str, list]:
        return {
            "attempts": self.repository.list_attempts(user_id),
            "profiles": self.repository.list_profiles(user_id),
        }

    def analytics(self, user_id: Optional[str] = None) -> Analytics:
        return compute_analytics(self.repository.list_attempts(user_id))

    def export(self, user_id: Optional[str] = None) -> dict[str, Any]:
        return export_data(
            self.repository.list_profiles(user_id),
            self.repository.list_attempts(user_id),
        )
