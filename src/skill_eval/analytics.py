"""
Cross-attempt analytics and data export.

compute_analytics(attempts)
    Totals, average / best overall score over completed attempts, and per
    skill: average percentage, number of assessments and trend (last − first,
    in attempt order).

export_data(profiles, attempts)
    JSON-serialisable snapshot of everything a user has created.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Optional

from skill_eval.aggregator import round_half_up
from skill_eval.models import Attempt, RequirementProfile

EXPORT_VERSION = "1.0"


@dataclass
class SkillAnalytics:
    skill:       str
    average:     int
    assessments: int
    trend:       int   # last − first percentage; 0 with a single assessment


@dataclass
class Analytics:
    total_assessments:     int
    completed_assessments: int
    average_score:         int
    best_score:            int
    skill_analytics:       list[SkillAnalytics] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def compute_analytics(attempts: list[Attempt]) -> Analytics:
    completed = [a for a in attempts if a.is_completed]
    scores    = [a.score or 0 for a in completed]

    skill_scores: dict[str, list[int]] = {}
    for attempt in completed:
        if attempt.evaluation is None:
            continue
        for skill, agg in attempt.evaluation.skill_breakdown.items():
            skill_scores.setdefault(skill, []).append(agg.percentage)

    return Analytics(
        total_assessments=len(attempts),
        completed_assessments=len(completed),
        average_score=round_half_up(sum(scores) / len(scores)) if scores else 0,
        best_score=max(scores, default=0),
        skill_analytics=[
            SkillAnalytics(
                skill=skill,
                average=round_half_up(sum(pcts) / len(pcts)),
                assessments=len(pcts),
                trend=pcts[-1] - pcts[0] if len(pcts) > 1 else 0,
            )
            for skill, pcts in skill_scores.items()
        ],
    )


def export_data(
    profiles: list[RequirementProfile],
    attempts: list[Attempt],
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    return {
        "profiles":    [p.model_dump(mode="json") for p in profiles],
        "attempts":    [a.to_dict() for a in attempts],
        "export_date": (now or datetime.now()).isoformat(),
        "version":     EXPORT_VERSION,
    }
