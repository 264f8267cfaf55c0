"""
question_set.py — Question-set assembly
=======================================
Plans slots for a RequirementProfile, asks the generator to fill each one,
and packages the surviving questions with their metadata.

  refinement  → optional structured guidelines from the free-text refinement
                (failure is ignored; generation continues without them)
  slots       → plan_slots(profile)
  questions   → generator.generate(...) per slot; ``None`` / errors drop it
  metadata    → total count, total time, skill & difficulty distributions

A test may end up with fewer questions than planned slots; dropped slots are
not retried.  If every slot is dropped, ``GenerationFailed`` is raised.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Optional

from skill_eval.backends.base import QuestionGenerator
from skill_eval.errors import GenerationFailed
from skill_eval.models import (
    GeneratedTest,
    GeneratedTestMetadata,
    Question,
    RequirementProfile,
    new_id,
)
from skill_eval.slot_planner import plan_slots

logger = logging.getLogger(__name__)


def build_metadata(questions: list[Question]) -> GeneratedTestMetadata:
    skill_counts: Counter[str] = Counter()
    for q in questions:
        skill_counts.update(q.skills)
    difficulty_counts = Counter(q.difficulty for q in questions)
    return GeneratedTestMetadata(
        total_questions=len(questions),
        total_time=sum(q.time_estimate for q in questions),
        skill_distribution=dict(skill_counts),
        difficulty_distribution=dict(difficulty_counts),
    )


def refine(profile: RequirementProfile, generator: QuestionGenerator) -> Optional[str]:
    """Structured guidelines for *profile*'s refinement text, or ``None``."""
    if not profile.refinement:
        return None
    try:
        return generator.refine_requirements(profile.refinement, profile)
    except Exception as exc:
        logger.warning("Requirement refinement failed, continuing without it: %s", exc)
        return None


def generate_questions(
    profile: RequirementProfile, generator: QuestionGenerator
) -> list[Question]:
    refined = refine(profile, generator) or profile.refinement
    level   = profile.experience_level.value

    questions: list[Question] = []
    for slot in plan_slots(profile):
        try:
            question = generator.generate(slot, profile.role, level, refined)
        except Exception as exc:
            logger.warning("Slot %d (%s/%s) dropped: %s", slot.index, slot.type, slot.skill, exc)
            continue
        if question is None:
            logger.info("Slot %d (%s/%s) dropped: no content", slot.index, slot.type, slot.skill)
            continue
        questions.append(question)
    return questions


def build_test(profile: RequirementProfile, generator: QuestionGenerator) -> GeneratedTest:
    """Return a GeneratedTest for *profile*; raises ``GenerationFailed`` if empty."""
    questions = generate_questions(profile, generator)
    if not questions:
        raise GenerationFailed(f"Failed to generate questions for profile {profile.id}")

    metadata = build_metadata(questions)
    logger.info(
        "Generated %d question(s), %d min, for profile %s",
        metadata.total_questions, metadata.total_time, profile.id,
    )
    return GeneratedTest(
        id=new_id(),
        profile_id=profile.id,
        questions=questions,
        metadata=metadata,
    )
