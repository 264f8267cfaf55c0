"""
Typed failures raised by the assessment workflow.

Planning, aggregation and lookup errors propagate to the caller.
``UpstreamUnavailable`` is raised by generation / evaluation backends and is
absorbed per question by the scorer, so it never fails a whole attempt.
"""

from __future__ import annotations


class SkillEvalError(Exception):
    """Base class for every error raised by skill_eval."""


class InvalidProfile(SkillEvalError, ValueError):
    """Requirement profile is malformed or has empty required fields."""

    def __init__(self, violations: list[str] | str) -> None:
        if isinstance(violations, str):
            violations = [violations]
        self.violations = list(violations)
        super().__init__("Invalid requirement profile: " + "; ".join(self.violations))


class LengthMismatch(SkillEvalError, ValueError):
    """Question and evaluation sequences are not aligned."""

    def __init__(self, n_questions: int, n_evaluations: int) -> None:
        self.n_questions   = n_questions
        self.n_evaluations = n_evaluations
        super().__init__(
            f"Expected {n_questions} evaluations, got {n_evaluations}"
        )


class UpstreamUnavailable(SkillEvalError, RuntimeError):
    """The question generator or answer evaluator call failed."""


class GenerationFailed(SkillEvalError):
    """Every planned slot was dropped, so no test could be assembled."""


class NotFound(SkillEvalError, LookupError):
    """Lookup of a profile / test / attempt by an unknown id."""

    def __init__(self, kind: str, obj_id: str) -> None:
        self.kind = kind
        self.id   = obj_id
        super().__init__(f"{kind} not found: {obj_id}")


class AttemptAlreadyCompleted(SkillEvalError):
    """An attempt may be submitted exactly once."""

    def __init__(self, attempt_id: str) -> None:
        self.attempt_id = attempt_id
        super().__init__(f"Attempt {attempt_id} has already been submitted")
