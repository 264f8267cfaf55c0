"""
aggregator.py — Skill aggregation
=================================
Groups per-question scores by skill tag.

For every (question, evaluation) pair and every skill on the question:

    scores         += evaluation.score       (summed exactly with math.fsum)
    max_score      += evaluation.max_score
    question_count += 1

then per skill:

    percentage = round(100 × total_score / max_score)   (half-up; 0 if max is 0)
    rating     = rating_for(percentage)
    feedback   = "<rating> understanding of <skill> concepts and practical application."

Accumulation is commutative, so the aggregate values do not depend on the
order of the pairs.  The returned dict keeps first-encountered skill order.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from skill_eval.errors import LengthMismatch
from skill_eval.models import PerQuestionEvaluation, Question, SkillAggregate

logger = logging.getLogger(__name__)

# (threshold, label) — first match wins
RATING_THRESHOLDS: list[tuple[int, str]] = [
    (90, "Excellent"),
    (80, "Very Good"),
    (70, "Good"),
    (60, "Average"),
]
LOWEST_RATING = "Needs Improvement"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percentage(score: float, max_score: float) -> int:
    """round(100 × score / max_score), or 0 when there is nothing to score."""
    if max_score <= 0:
        return 0
    return round_half_up(100 * score / max_score)


def rating_for(pct: float) -> str:
    """Map a percentage onto its performance label."""
    for threshold, label in RATING_THRESHOLDS:
        if pct >= threshold:
            return label
    return LOWEST_RATING


def skill_feedback(skill: str, pct: float) -> str:
    return f"{rating_for(pct)} understanding of {skill} concepts and practical application."


@dataclass
class _Running:
    scores:         list[float] = field(default_factory=list)
    max_score:      int = 0
    question_count: int = 0

    @property
    def total_score(self) -> float:
        # fsum is exactly rounded, so the total does not depend on pair order
        return math.fsum(self.scores)


def aggregate_by_skill(
    questions: list[Question],
    evaluations: list[PerQuestionEvaluation],
) -> dict[str, SkillAggregate]:
    """Return skill → SkillAggregate; ``questions[i]`` pairs with ``evaluations[i]``."""
    if len(questions) != len(evaluations):
        raise LengthMismatch(len(questions), len(evaluations))

    running: dict[str, _Running] = {}
    for question, evaluation in zip(questions, evaluations):
        for skill in question.skills:
            acc = running.setdefault(skill, _Running())
            acc.scores.append(evaluation.score)
            acc.max_score      += evaluation.max_score
            acc.question_count += 1

    breakdown: dict[str, SkillAggregate] = {}
    for skill, acc in running.items():
        zero_max = acc.max_score <= 0
        if zero_max:
            logger.warning("Skill %s has no available points; reporting 0%%", skill)
        total_score = acc.total_score
        pct = percentage(total_score, acc.max_score)
        breakdown[skill] = SkillAggregate(
            skill=skill,
            total_score=total_score,
            max_score=acc.max_score,
            question_count=acc.question_count,
            percentage=pct,
            rating=rating_for(pct),
            feedback=skill_feedback(skill, pct),
            zero_max=zero_max,
        )
    return breakdown
