"""
openai_backend.py — Azure OpenAI question generator & answer evaluator
======================================================================
Implements both collaborator contracts with a single AzureOpenAI client in
JSON mode.  Each call uses a schema-anchored system prompt so the reply is
directly parseable and validated with Pydantic.

  generate()             one call per slot, temperature 0.7 for variety
  evaluate()             one call per answered question, temperature 0.1
  refine_requirements()  one call per profile with a refinement text

Failure handling
----------------
  Transport errors, timeouts, invalid JSON and schema mismatches are raised
  as ``UpstreamUnavailable``.  ``generate`` / ``refine_requirements`` absorb
  them and return ``None`` (the slot is dropped / refinement skipped);
  ``evaluate`` lets them propagate to the scorer, which records a zero score.
  The client is built with ``max_retries=0``: a failed call is never retried.
"""

from __future__ import annotations

import json
import logging
import textwrap
from typing import Any, Optional

import openai
from openai import AzureOpenAI
from pydantic import ValidationError

from skill_eval.backends.base import (
    AnswerEvaluator,
    EvaluatorReply,
    GeneratedContent,
    QuestionGenerator,
    build_question,
)
from skill_eval.config import AzureOpenAIConfig, get_settings
from skill_eval.errors import UpstreamUnavailable
from skill_eval.models import Question, QuestionSlot, QuestionType, RequirementProfile

logger = logging.getLogger(__name__)


# ─── Prompts ─────────────────────────────────────────────────────────────────

_QUESTION_JSON_SCHEMA = {
    "title":           "string (the question itself, one sentence)",
    "body":            "string (full question text / scenario / problem statement)",
    "options":         ["string (exactly 4 for mcq, prefixed 'A) '..'D) '; empty otherwise)"],
    "difficulty":      "easy | medium | hard",
    "expected_answer": "string (correct letter for mcq; key points otherwise)",
    "explanation":     "string (brief rationale)",
}

_TYPE_GUIDANCE: dict[str, str] = {
    QuestionType.MCQ.value: (
        "a multiple choice question with exactly four options A–D and one correct answer"
    ),
    QuestionType.CODING.value: (
        "a coding problem with input format, expected output and one worked example"
    ),
    QuestionType.THEORY.value: (
        "an open-ended theory question whose expected_answer lists the key points to cover"
    ),
    QuestionType.SCENARIO.value: (
        "a realistic scenario followed by what must be solved or designed"
    ),
}

_GENERATOR_SYSTEM_PROMPT = textwrap.dedent("""
    You are an expert technical assessment designer.

    Write ONE assessment question for the candidate described by the user.

    ## Output
    Respond with ONLY a valid JSON object matching this schema exactly:
""") + json.dumps(_QUESTION_JSON_SCHEMA, indent=2) + (
    "\n\nDo NOT include any explanation, markdown, or extra text outside the JSON."
)

_EVALUATOR_SYSTEM_PROMPT = textwrap.dedent("""
    You are a strict but fair technical interviewer grading one answer.

    Judge technical accuracy, completeness and clarity.  The score must be a
    number between 0 and the MAX_POINTS given by the user.

    ## Output
    Respond with ONLY a valid JSON object:
    {"score": number, "feedback": "string (2-3 sentences: what was done well, what to improve)"}
""")

_REFINEMENT_SYSTEM_PROMPT = textwrap.dedent("""
    You are an AI assessment designer.  Convert the user's natural-language
    requirements into concise structured guidelines covering question
    difficulty distribution, specific topics to focus on, question format
    preferences and assessment priorities.

    Respond with ONLY a valid JSON object: {"guidelines": "string"}
""")


class AzureOpenAIBackend(QuestionGenerator, AnswerEvaluator):
    """Question generation and answer scoring via Azure OpenAI JSON mode."""

    def __init__(
        self,
        config: AzureOpenAIConfig | None = None,
        timeout: float | None = None,
        client: Any = None,
    ) -> None:
        settings  = get_settings()
        self._cfg = config or settings.openai
        if client is not None:
            self._client = client
        else:
            if not self._cfg.is_configured:
                raise EnvironmentError(
                    "Azure OpenAI is not configured. "
                    "Set AZURE_OPENAI_ENDPOINT + AZURE_OPENAI_API_KEY."
                )
            self._client = AzureOpenAI(
                azure_endpoint=self._cfg.endpoint,
                api_key=self._cfg.api_key,
                api_version=self._cfg.api_version,
                timeout=timeout or settings.scoring.request_timeout,
                max_retries=0,
            )

    # ── Transport ────────────────────────────────────────────────────────────

    def _call_json(self, system: str, user: str, temperature: float) -> dict[str, Any]:
        try:
            response = self._client.chat.completions.create(
                model=self._cfg.deployment,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user",   "content": user},
                ],
                temperature=temperature,
                max_tokens=1200,
            )
            raw_json = response.choices[0].message.content or ""
            data = json.loads(raw_json)
        except openai.OpenAIError as exc:
            raise UpstreamUnavailable(f"Azure OpenAI call failed: {exc}") from exc
        except (json.JSONDecodeError, IndexError, AttributeError) as exc:
            raise UpstreamUnavailable(f"Malformed Azure OpenAI response: {exc}") from exc
        if not isinstance(data, dict):
            raise UpstreamUnavailable("Azure OpenAI response is not a JSON object")
        return data

    # ── QuestionGenerator ────────────────────────────────────────────────────

    def generate(
        self,
        slot: QuestionSlot,
        role: str,
        experience_level: str,
        refinement: Optional[str] = None,
    ) -> Optional[Question]:
        level = str(getattr(experience_level, "value", experience_level))
        user_msg = textwrap.dedent(f"""
            Question type: {_TYPE_GUIDANCE.get(slot.type, slot.type)}
            Skill: {slot.skill}
            Role: {role}
            Experience level: {level}
            Requirements: {refinement or "Standard technical assessment"}
        """).strip()
        try:
            data    = self._call_json(_GENERATOR_SYSTEM_PROMPT, user_msg, temperature=0.7)
            content = GeneratedContent.model_validate(data)
        except (UpstreamUnavailable, ValidationError) as exc:
            logger.warning("Failed to generate %s question for %s: %s", slot.type, slot.skill, exc)
            return None
        if slot.type == QuestionType.MCQ.value and len(content.options) < 2:
            logger.warning("Dropping mcq slot %d for %s: no options returned", slot.index, slot.skill)
            return None
        return build_question(slot, content)

    def refine_requirements(self, text: str, profile: RequirementProfile) -> Optional[str]:
        user_msg = textwrap.dedent(f"""
            Role: {profile.role}
            Experience Level: {profile.experience_level.value}
            Tech Stack: {", ".join(profile.tech_stack)}
            Duration: {profile.duration} minutes
            Natural Language Requirements: "{text}"
        """).strip()
        try:
            data = self._call_json(_REFINEMENT_SYSTEM_PROMPT, user_msg, temperature=0.3)
        except UpstreamUnavailable as exc:
            logger.warning("Failed to parse natural language requirements: %s", exc)
            return None
        guidelines = data.get("guidelines")
        return guidelines.strip() if isinstance(guidelines, str) and guidelines.strip() else None

    # ── AnswerEvaluator ──────────────────────────────────────────────────────

    def evaluate(self, question: Question, answer_text: str, max_points: int) -> dict[str, Any]:
        user_msg = textwrap.dedent(f"""
            QUESTION_TYPE: {question.type}
            SKILLS: {", ".join(question.skills)}
            QUESTION: {question.title}
            QUESTION_CONTENT: {question.content}
            OPTIONS: {"; ".join(question.options or []) or "N/A"}
            REFERENCE: {question.expected_answer or "N/A"}
            STUDENT_ANSWER: {answer_text}
            MAX_POINTS: {max_points}
        """).strip()
        data = self._call_json(_EVALUATOR_SYSTEM_PROMPT, user_msg, temperature=0.1)
        try:
            reply = EvaluatorReply.model_validate(data)
        except ValidationError as exc:
            raise UpstreamUnavailable(f"Malformed evaluation: {exc}") from exc
        return {"score": reply.score, "feedback": reply.feedback}
