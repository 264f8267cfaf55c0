"""
Contracts for the two text-generation collaborators.

QuestionGenerator
    Fills one QuestionSlot with content.  Returning ``None`` (or raising)
    drops the slot; the test is assembled from whatever succeeded.

AnswerEvaluator
    Scores one free-text answer against its question and returns
    ``{"score": number, "feedback": str}``.  May raise; the scorer turns any
    failure into a zero score.

The workflow only depends on these two classes, so any backend (LLM-powered
or rule-based) can sit behind them.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from skill_eval.models import (
    Difficulty,
    Question,
    QuestionSlot,
    QuestionType,
    RequirementProfile,
    new_id,
    points_for_difficulty,
)


# ─── Wire models ─────────────────────────────────────────────────────────────

class GeneratedContent(BaseModel):
    """Question content as returned by a generator backend."""
    title:           str
    body:            str = ""
    options:         list[str] = Field(default_factory=list)
    difficulty:      Difficulty = Difficulty.MEDIUM
    explanation:     Optional[str] = None
    expected_answer: Optional[str] = None

    @field_validator("difficulty", mode="before")
    @classmethod
    def _normalise_difficulty(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip().lower() in {d.value for d in Difficulty}:
            return v.strip().lower()
        return Difficulty.MEDIUM


class EvaluatorReply(BaseModel):
    """Validated ``evaluate`` result.  Out-of-range scores are clamped later."""
    score:    float
    feedback: str = "Answer evaluated"

    @field_validator("score")
    @classmethod
    def _finite(cls, v: float) -> float:
        if math.isnan(v) or math.isinf(v):
            raise ValueError("score must be a finite number")
        return v


def build_question(slot: QuestionSlot, content: GeneratedContent) -> Question:
    """Combine a slot with generated content; difficulty drives points."""
    difficulty = content.difficulty.value
    options = None
    if slot.type == QuestionType.MCQ.value:
        options = tuple(content.options)
    return Question(
        id=new_id("q"),
        type=slot.type,
        title=content.title.strip(),
        content=content.body.strip() or content.title.strip(),
        skills=(slot.skill,),
        difficulty=difficulty,
        time_estimate=slot.time_estimate,
        points=points_for_difficulty(difficulty),
        options=options,
        expected_answer=content.expected_answer,
        explanation=content.explanation,
    )


# ─── Collaborator contracts ──────────────────────────────────────────────────

class QuestionGenerator(ABC):

    @abstractmethod
    def generate(
        self,
        slot: QuestionSlot,
        role: str,
        experience_level: str,
        refinement: Optional[str] = None,
    ) -> Optional[Question]:
        """Return a Question for *slot*, or ``None`` when generation failed."""

    def refine_requirements(
        self, text: str, profile: RequirementProfile
    ) -> Optional[str]:
        """Turn free-text refinement into structured guidelines (optional)."""
        return None


class AnswerEvaluator(ABC):

    @abstractmethod
    def evaluate(self, question: Question, answer_text: str, max_points: int) -> dict[str, Any]:
        """Return ``{"score": number, "feedback": str}`` for one answer."""
