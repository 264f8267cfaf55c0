"""
Data models for the Skill Assessment workflow.

The requirement profile (blueprint) is a validated Pydantic model because it
is built from raw user input; everything downstream of validation is a plain
dataclass, frozen where the entity is immutable once created.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from skill_eval.errors import AttemptAlreadyCompleted, InvalidProfile


# ─── Enumerations ────────────────────────────────────────────────────────────

class ExperienceLevel(str, Enum):
    """Seniority the assessment is pitched at."""
    JUNIOR = "junior"
    MID    = "mid"
    SENIOR = "senior"


class QuestionType(str, Enum):
    """Format of a single question."""
    MCQ      = "mcq"       # multiple choice, 4 options
    CODING   = "coding"    # implement something
    THEORY   = "theory"    # open-ended explanation
    SCENARIO = "scenario"  # design / troubleshoot a situation


class Difficulty(str, Enum):
    EASY   = "easy"
    MEDIUM = "medium"
    HARD   = "hard"


# ─── Lookup tables ───────────────────────────────────────────────────────────

# Minutes a candidate is expected to spend on one question of each type.
TIME_ESTIMATE_MINUTES: dict[str, int] = {
    QuestionType.MCQ.value:      3,
    QuestionType.CODING.value:   15,
    QuestionType.THEORY.value:   8,
    QuestionType.SCENARIO.value: 12,
}
DEFAULT_TIME_ESTIMATE = 5

POINTS_BY_DIFFICULTY: dict[str, int] = {
    Difficulty.EASY.value:   10,
    Difficulty.MEDIUM.value: 20,
    Difficulty.HARD.value:   30,
}
DEFAULT_DIFFICULTY = Difficulty.MEDIUM.value

MIN_DURATION = 15
MAX_DURATION = 180


def time_estimate_for(question_type: str) -> int:
    """Return the fixed time estimate (minutes) for *question_type*."""
    return TIME_ESTIMATE_MINUTES.get(_value(question_type), DEFAULT_TIME_ESTIMATE)


def points_for_difficulty(difficulty: str) -> int:
    """Return the points a question of *difficulty* is worth (20 when unknown)."""
    return POINTS_BY_DIFFICULTY.get(
        _value(difficulty).lower(), POINTS_BY_DIFFICULTY[DEFAULT_DIFFICULTY]
    )


def _value(v: Any) -> str:
    return v.value if isinstance(v, Enum) else str(v)


def new_id(prefix: str = "") -> str:
    uid = str(uuid.uuid4())
    return f"{prefix}_{uid}" if prefix else uid


def _now() -> datetime:
    return datetime.now()


# ─── Requirement profile (blueprint) ─────────────────────────────────────────

class RequirementProfile(BaseModel):
    """
    Structured description of the assessment a user wants.

    Immutable once created.  Build it from raw input with ``from_input`` so
    that validation failures surface as ``InvalidProfile``.
    """
    model_config = ConfigDict(frozen=True)

    id:               str = Field(default_factory=new_id)
    user_id:          str = ""
    role:             str = Field(min_length=1)
    experience_level: ExperienceLevel
    tech_stack:       list[str] = Field(min_length=1,
                                        description="Ordered skill tags")
    question_types:   list[QuestionType] = Field(min_length=1)
    duration:         int = Field(ge=MIN_DURATION, le=MAX_DURATION,
                                  description="Minutes")
    refinement:       Optional[str] = None
    created_at:       datetime = Field(default_factory=_now)

    @field_validator("role")
    @classmethod
    def _role_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Role is required")
        return v.strip()

    @field_validator("tech_stack")
    @classmethod
    def _skills_not_blank(cls, v: list[str]) -> list[str]:
        cleaned = [s.strip() for s in v]
        if any(not s for s in cleaned):
            raise ValueError("Skill tags must be non-empty strings")
        return cleaned

    @field_validator("refinement")
    @classmethod
    def _blank_refinement_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    @classmethod
    def from_input(cls, data: dict[str, Any]) -> "RequirementProfile":
        """Validate raw input, raising ``InvalidProfile`` on any bad field."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            violations = [
                f"{'.'.join(str(p) for p in err['loc']) or 'profile'}: {err['msg']}"
                for err in exc.errors()
            ]
            raise InvalidProfile(violations) from exc


# ─── Question set ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class QuestionSlot:
    """A planned placeholder for one question, before content exists."""
    index:         int
    type:          str
    skill:         str
    difficulty:    str = DEFAULT_DIFFICULTY
    time_estimate: int = DEFAULT_TIME_ESTIMATE
    points:        int = POINTS_BY_DIFFICULTY[DEFAULT_DIFFICULTY]


@dataclass(frozen=True)
class Question:
    """A slot with its content filled in.  Immutable after creation."""
    id:              str
    type:            str
    title:           str
    content:         str
    skills:          tuple[str, ...]
    difficulty:      str = DEFAULT_DIFFICULTY
    time_estimate:   int = DEFAULT_TIME_ESTIMATE
    points:          int = POINTS_BY_DIFFICULTY[DEFAULT_DIFFICULTY]
    options:         Optional[tuple[str, ...]] = None  # mcq only
    expected_answer: Optional[str] = None
    explanation:     Optional[str] = None

    def __post_init__(self) -> None:
        # lists from callers or JSON are frozen into tuples
        object.__setattr__(self, "skills", tuple(self.skills))
        if self.options is not None:
            object.__setattr__(self, "options", tuple(self.options))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Question":
        return cls(**data)


@dataclass(frozen=True)
class GeneratedTestMetadata:
    total_questions:         int
    total_time:              int
    skill_distribution:      dict[str, int] = field(default_factory=dict)
    difficulty_distribution: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class GeneratedTest:
    """Ordered question list generated for one requirement profile."""
    id:         str
    profile_id: str
    questions:  list[Question]
    metadata:   GeneratedTestMetadata
    created_at: datetime = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["created_at"] = self.created_at.isoformat()
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GeneratedTest":
        return cls(
            id=data["id"],
            profile_id=data["profile_id"],
            questions=[Question.from_dict(q) for q in data["questions"]],
            metadata=GeneratedTestMetadata(**data["metadata"]),
            created_at=datetime.fromisoformat(data["created_at"]),
        )


# ─── Answers & evaluation ────────────────────────────────────────────────────

@dataclass(frozen=True)
class Answer:
    question_id: str
    answer:      str
    time_spent:  int = 0    # seconds


@dataclass(frozen=True)
class PerQuestionEvaluation:
    question_id: str
    score:       float
    feedback:    str
    max_score:   int


@dataclass(frozen=True)
class SkillAggregate:
    """Accumulated score for one skill across every question tagged with it."""
    skill:          str
    total_score:    float
    max_score:      int
    question_count: int
    percentage:     int
    rating:         str
    feedback:       str
    zero_max:       bool = False   # True when no points were available


@dataclass(frozen=True)
class Recommendation:
    title:       str
    description: str
    resources:   Optional[list[str]] = None


@dataclass(frozen=True)
class EvaluationResult:
    """Final skill-by-skill report for one completed attempt."""
    overall_score:        int
    skill_breakdown:      dict[str, SkillAggregate]
    strengths:            list[str]
    weaknesses:           list[str]
    recommendations:      list[Recommendation]
    detailed_feedback:    str
    question_evaluations: list[PerQuestionEvaluation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EvaluationResult":
        return cls(
            overall_score=data["overall_score"],
            skill_breakdown={
                k: SkillAggregate(**v) for k, v in data["skill_breakdown"].items()
            },
            strengths=list(data["strengths"]),
            weaknesses=list(data["weaknesses"]),
            recommendations=[Recommendation(**r) for r in data["recommendations"]],
            detailed_feedback=data["detailed_feedback"],
            question_evaluations=[
                PerQuestionEvaluation(**e) for e in data.get("question_evaluations", [])
            ],
        )


# ─── Attempt ─────────────────────────────────────────────────────────────────

@dataclass
class Attempt:
    """
    One user's run through a generated test.

    Created uncompleted on start; completed exactly once on submission via
    ``complete()``; never mutated after that.
    """
    id:           str
    test_id:      str
    user_id:      str
    start_time:   datetime
    answers:      list[Answer] = field(default_factory=list)
    end_time:     Optional[datetime] = None
    is_completed: bool = False
    score:        Optional[int] = None
    evaluation:   Optional[EvaluationResult] = None

    def complete(
        self,
        answers: list[Answer],
        evaluation: EvaluationResult,
        end_time: Optional[datetime] = None,
    ) -> None:
        if self.is_completed:
            raise AttemptAlreadyCompleted(self.id)
        self.answers      = list(answers)
        self.evaluation   = evaluation
        self.score        = evaluation.overall_score
        self.end_time     = end_time or _now()
        self.is_completed = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id":           self.id,
            "test_id":      self.test_id,
            "user_id":      self.user_id,
            "start_time":   self.start_time.isoformat(),
            "answers":      [asdict(a) for a in self.answers],
            "end_time":     self.end_time.isoformat() if self.end_time else None,
            "is_completed": self.is_completed,
            "score":        self.score,
            "evaluation":   self.evaluation.to_dict() if self.evaluation else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Attempt":
        return cls(
            id=data["id"],
            test_id=data["test_id"],
            user_id=data["user_id"],
            start_time=datetime.fromisoformat(data["start_time"]),
            answers=[Answer(**a) for a in data.get("answers", [])],
            end_time=(
                datetime.fromisoformat(data["end_time"]) if data.get("end_time") else None
            ),
            is_completed=bool(data.get("is_completed")),
            score=data.get("score"),
            evaluation=(
                EvaluationResult.from_dict(data["evaluation"])
                if data.get("evaluation") else None
            ),
        )
