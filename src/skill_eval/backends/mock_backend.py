"""
mock_backend.py – Rule-based question generator and answer evaluator.

Mirrors the contract of the Azure OpenAI backend so the whole workflow runs
(and is testable) without credentials.  Output is fully deterministic:

  • Question text is templated from type, skill, role and level.
  • Difficulty follows experience level (junior → easy, mid → medium,
    senior → hard).
  • MCQ answers are graded by option letter; free-text answers by how many
    of the expected key points they mention.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from skill_eval.backends.base import (
    AnswerEvaluator,
    GeneratedContent,
    QuestionGenerator,
    build_question,
)
from skill_eval.models import Question, QuestionSlot, QuestionType, RequirementProfile

# ── Templates ─────────────────────────────────────────────────────────────────

_LEVEL_DIFFICULTY: dict[str, str] = {
    "junior": "easy",
    "mid":    "medium",
    "senior": "hard",
}

_OPTION_LETTERS = "ABCD"

# Key points a good free-text answer should touch, per question type.
_KEY_POINTS: dict[str, list[str]] = {
    QuestionType.CODING.value:   ["complexity", "edge cases", "tests", "readability"],
    QuestionType.THEORY.value:   ["definition", "example", "trade-offs", "use cases"],
    QuestionType.SCENARIO.value: ["requirements", "design", "scalability", "monitoring"],
}

_WORD = re.compile(r"[a-z0-9+#.\-]+")


def _level(experience_level: Any) -> str:
    return str(getattr(experience_level, "value", experience_level)).lower()


class MockBackend(QuestionGenerator, AnswerEvaluator):
    """Deterministic stand-in for both text-generation collaborators."""

    # ── Generation ───────────────────────────────────────────────────────────

    def generate(
        self,
        slot: QuestionSlot,
        role: str,
        experience_level: str,
        refinement: Optional[str] = None,
    ) -> Optional[Question]:
        level      = _level(experience_level)
        difficulty = _LEVEL_DIFFICULTY.get(level, "medium")
        skill      = slot.skill
        focus      = f" Focus: {refinement}" if refinement else ""

        if slot.type == QuestionType.MCQ.value:
            correct = _OPTION_LETTERS[slot.index % 4]
            options = [
                f"{letter}) Statement {letter} about {skill}" for letter in _OPTION_LETTERS
            ]
            content = GeneratedContent(
                title=f"Which statement about {skill} is correct for a {level} {role}?",
                body=f"Choose the single best option.{focus}",
                options=options,
                difficulty=difficulty,
                expected_answer=correct,
                explanation=f"Option {correct} describes {skill} accurately.",
            )
        elif slot.type == QuestionType.CODING.value:
            content = GeneratedContent(
                title=f"Implement a small {skill} utility",
                body=(
                    f"As a {level} {role}, write a {skill} function that solves a "
                    f"typical day-to-day task. Discuss complexity and edge cases.{focus}"
                ),
                difficulty=difficulty,
                expected_answer=", ".join(_KEY_POINTS[slot.type]),
            )
        elif slot.type == QuestionType.SCENARIO.value:
            content = GeneratedContent(
                title=f"Design a {skill} solution under production load",
                body=(
                    f"A team relies on {skill} for a critical service. As a {level} "
                    f"{role}, describe how you would approach it.{focus}"
                ),
                difficulty=difficulty,
                expected_answer=", ".join(_KEY_POINTS[slot.type]),
            )
        else:
            content = GeneratedContent(
                title=f"Explain a core concept of {skill}",
                body=f"Explain it as a {level} {role} would to a colleague.{focus}",
                difficulty=difficulty,
                expected_answer=", ".join(_KEY_POINTS[QuestionType.THEORY.value]),
            )
        return build_question(slot, content)

    def refine_requirements(self, text: str, profile: RequirementProfile) -> Optional[str]:
        return " ".join(text.split())

    # ── Evaluation ───────────────────────────────────────────────────────────

    def evaluate(self, question: Question, answer_text: str, max_points: int) -> dict[str, Any]:
        answer = answer_text.strip()
        if not answer:
            return {"score": 0, "feedback": "Empty answer."}

        if question.type == QuestionType.MCQ.value and question.expected_answer:
            chosen = answer[0].upper()
            if chosen == question.expected_answer.upper():
                return {"score": max_points, "feedback": "Correct option selected."}
            return {
                "score": 0,
                "feedback": f"Incorrect. The correct option is {question.expected_answer}.",
            }

        points = _key_points_for(question)
        words  = {w.strip(".") for w in _WORD.findall(answer.lower())}
        hit    = [p for p in points if all(w in words for w in p.split())]
        missed = [p for p in points if p not in hit]
        score  = int(max_points * len(hit) / len(points) + 0.5) if points else 0

        if not missed:
            feedback = "Covers all expected points."
        elif hit:
            feedback = f"Covers {', '.join(hit)}; missing {', '.join(missed)}."
        else:
            feedback = f"Missing expected points: {', '.join(missed)}."
        return {"score": score, "feedback": feedback}


def _key_points_for(question: Question) -> list[str]:
    if question.expected_answer:
        return [p.strip().lower() for p in question.expected_answer.split(",") if p.strip()]
    return _KEY_POINTS.get(question.type, _KEY_POINTS[QuestionType.THEORY.value])
