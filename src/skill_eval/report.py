"""
report.py — Report synthesis
============================
Turns the skill aggregates into the final EvaluationResult.

  overall_score    round(100 × Σscore / Σmax), 0 when Σmax is 0
  strengths        skills ≥ 80 %  (fallback: one "dedication" line)
  weaknesses       skills < 70 %  (may be empty)
  recommendations  skills < 80 %  (fallback: "Advanced Learning Path")
  detailed         overall rating + top-2 / bottom-2 skills

Pure functions, no I/O: the same inputs always produce an equal result.
"""

from __future__ import annotations

import math

from skill_eval.aggregator import aggregate_by_skill, percentage, rating_for
from skill_eval.errors import LengthMismatch
from skill_eval.models import (
    EvaluationResult,
    PerQuestionEvaluation,
    Question,
    Recommendation,
    SkillAggregate,
)

STRENGTH_THRESHOLD       = 80
WEAKNESS_THRESHOLD       = 70
RECOMMENDATION_THRESHOLD = 80

FALLBACK_STRENGTH = "Shows dedication to completing the assessment thoroughly"
FALLBACK_RECOMMENDATION = Recommendation(
    title="Advanced Learning Path",
    description="Continue building expertise with advanced topics and real-world projects",
)


def strengths_for(breakdown: dict[str, SkillAggregate]) -> list[str]:
    strengths = [
        f"Strong proficiency in {skill} with {agg.percentage}% accuracy"
        for skill, agg in breakdown.items()
        if agg.percentage >= STRENGTH_THRESHOLD
    ]
    return strengths or [FALLBACK_STRENGTH]


def weaknesses_for(breakdown: dict[str, SkillAggregate]) -> list[str]:
    return [
        f"{skill} concepts need more practice and understanding"
        for skill, agg in breakdown.items()
        if agg.percentage < WEAKNESS_THRESHOLD
    ]


def recommendations_for(breakdown: dict[str, SkillAggregate]) -> list[Recommendation]:
    recs = [
        Recommendation(
            title=f"Improve {skill} Skills",
            description=f"Focus on strengthening {skill} fundamentals and practical application",
            resources=[
                f"{skill} official documentation",
                f"Online courses and tutorials for {skill}",
                f"Practice projects using {skill}",
            ],
        )
        for skill, agg in breakdown.items()
        if agg.percentage < RECOMMENDATION_THRESHOLD
    ]
    return recs or [FALLBACK_RECOMMENDATION]


def detailed_feedback(overall: int, breakdown: dict[str, SkillAggregate]) -> str:
    text = f"Overall performance: {rating_for(overall)}."
    if not breakdown:
        return text

    # sorted() is stable: ties keep first-encountered order
    items  = list(breakdown.items())
    top    = [s for s, _ in sorted(items, key=lambda kv: -kv[1].percentage)[:2]]
    bottom = [s for s, _ in sorted(items, key=lambda kv: kv[1].percentage)[:2]]
    return (
        f"{text} Strong performance in {' and '.join(top)}. "
        f"Consider focusing improvement efforts on {' and '.join(bottom)} "
        "to achieve a more well-rounded skill set."
    )


def synthesize(
    breakdown: dict[str, SkillAggregate],
    total_score: float,
    total_max: float,
    question_evaluations: list[PerQuestionEvaluation] | None = None,
) -> EvaluationResult:
    """Build the EvaluationResult from skill aggregates and attempt totals."""
    overall = percentage(total_score, total_max)
    return EvaluationResult(
        overall_score=overall,
        skill_breakdown=dict(breakdown),
        strengths=strengths_for(breakdown),
        weaknesses=weaknesses_for(breakdown),
        recommendations=recommendations_for(breakdown),
        detailed_feedback=detailed_feedback(overall, breakdown),
        question_evaluations=list(question_evaluations or []),
    )


def evaluate_attempt(
    questions: list[Question],
    evaluations: list[PerQuestionEvaluation],
) -> EvaluationResult:
    """Aggregate by skill, total the attempt and synthesize the report."""
    if len(questions) != len(evaluations):
        raise LengthMismatch(len(questions), len(evaluations))
    breakdown   = aggregate_by_skill(questions, evaluations)
    total_score = math.fsum(e.score for e in evaluations)
    total_max   = sum(e.max_score for e in evaluations)
    return synthesize(breakdown, total_score, total_max, evaluations)
