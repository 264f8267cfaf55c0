"""
scorer.py — Per-answer scoring
==============================
Wraps the AnswerEvaluator so that every question always yields a bounded
PerQuestionEvaluation, whatever the upstream does.

  absent answer          → 0, "No answer provided"   (no upstream call)
  evaluator success      → score clamped into [0, max_score], feedback verbatim
  evaluator failure      → 0, "Evaluation failed"    (logged, never retried)

``score_attempt`` fans the per-question calls out over a thread pool and
fans them back in by question position, so completion order never matters.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from skill_eval.backends.base import AnswerEvaluator
from skill_eval.models import Answer, PerQuestionEvaluation, Question

logger = logging.getLogger(__name__)

NO_ANSWER_FEEDBACK         = "No answer provided"
EVALUATION_FAILED_FEEDBACK = "Evaluation failed"


def clamp_score(raw: object, max_score: int) -> float:
    """Coerce *raw* to a number within [0, max_score]; raises ValueError if impossible."""
    if isinstance(raw, bool):
        raise ValueError(f"score must be numeric, got {raw!r}")
    value = float(raw)   # TypeError / ValueError for non-numeric input
    if math.isnan(value):
        raise ValueError("score is NaN")
    return min(max(value, 0.0), float(max_score))


def score_answer(
    question: Question,
    answer: Optional[Answer],
    evaluator: AnswerEvaluator,
) -> PerQuestionEvaluation:
    """Score one answer; never raises for upstream problems."""
    max_score = question.points

    if answer is None:
        return PerQuestionEvaluation(
            question_id=question.id,
            score=0,
            feedback=NO_ANSWER_FEEDBACK,
            max_score=max_score,
        )

    try:
        result   = evaluator.evaluate(question, answer.answer, max_score)
        score    = clamp_score(result["score"], max_score)
        feedback = result.get("feedback")
        if not isinstance(feedback, str):
            raise TypeError(f"feedback must be a string, got {type(feedback).__name__}")
    except Exception as exc:
        logger.warning("Failed to evaluate answer for question %s: %s", question.id, exc)
        return PerQuestionEvaluation(
            question_id=question.id,
            score=0,
            feedback=EVALUATION_FAILED_FEEDBACK,
            max_score=max_score,
        )

    logger.debug("Question %s scored %s/%s", question.id, score, max_score)
    return PerQuestionEvaluation(
        question_id=question.id,
        score=score,
        feedback=feedback,
        max_score=max_score,
    )


def match_answers(
    questions: list[Question], answers: Iterable[Answer]
) -> list[Optional[Answer]]:
    """Align answers with questions by ``question_id`` (last answer wins)."""
    by_id = {a.question_id: a for a in answers}
    known = {q.id for q in questions}
    stray = set(by_id) - known
    if stray:
        logger.info("Ignoring %d answer(s) for unknown question ids", len(stray))
    return [by_id.get(q.id) for q in questions]


def score_attempt(
    questions: list[Question],
    answers: Iterable[Answer],
    evaluator: AnswerEvaluator,
    max_workers: int = 4,
) -> list[PerQuestionEvaluation]:
    """
    Score every question of an attempt.

    Returns one evaluation per question, in question order.
    """
    matched = match_answers(questions, answers)
    if not questions:
        return []
    if max_workers <= 1:
        return [score_answer(q, a, evaluator) for q, a in zip(questions, matched)]

    workers = min(max_workers, len(questions))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(score_answer, q, a, evaluator)
            for q, a in zip(questions, matched)
        ]
        return [f.result() for f in futures]
