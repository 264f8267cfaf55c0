"""
slot_planner.py — Question Slot Planner
=======================================
Turns a RequirementProfile into the ordered list of question slots that the
question generator will fill.

  slot count = ceil(duration / 10)          one slot per ~10 minutes
  slot i     → type  = question_types[i mod len(question_types)]
               skill = tech_stack[i mod len(tech_stack)]

Round-robin assignment guarantees every declared type and skill appears at
least once when there are enough slots, and spreads slots evenly otherwise.
Every slot starts at "medium" difficulty (20 points); generated content may
override that later.
"""

from __future__ import annotations

import math

from skill_eval.errors import InvalidProfile
from skill_eval.models import (
    DEFAULT_DIFFICULTY,
    QuestionSlot,
    RequirementProfile,
    points_for_difficulty,
    time_estimate_for,
)

MINUTES_PER_SLOT = 10


def slot_count(duration: int) -> int:
    """Number of slots for a test of *duration* minutes (never below 1)."""
    return max(1, math.ceil(duration / MINUTES_PER_SLOT))


def plan_slots(profile: RequirementProfile) -> list[QuestionSlot]:
    """Return the ordered question slots for *profile*.  Pure."""
    skills = list(profile.tech_stack)
    types  = [getattr(t, "value", t) for t in profile.question_types]

    violations = []
    if not skills:
        violations.append("tech_stack: at least one technology must be selected")
    if not types:
        violations.append("question_types: at least one question type must be selected")
    if violations:
        raise InvalidProfile(violations)

    slots: list[QuestionSlot] = []
    for i in range(slot_count(profile.duration)):
        q_type = types[i % len(types)]
        slots.append(QuestionSlot(
            index=i,
            type=q_type,
            skill=skills[i % len(skills)],
            difficulty=DEFAULT_DIFFICULTY,
            time_estimate=time_estimate_for(q_type),
            points=points_for_difficulty(DEFAULT_DIFFICULTY),
        ))
    return slots
