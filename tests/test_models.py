"""
Tests for data models: RequirementProfile validation, lookup tables,
and Attempt lifecycle / serialisation.
"""
from datetime import datetime

import pytest
from factories import make_profile, make_question, make_evaluation

from skill_eval.errors import AttemptAlreadyCompleted, InvalidProfile
from skill_eval.models import (
    Attempt,
    EvaluationResult,
    ExperienceLevel,
    GeneratedTest,
    Question,
    QuestionType,
    points_for_difficulty,
    time_estimate_for,
)
from skill_eval.question_set import build_metadata
from skill_eval.report import evaluate_attempt


# ─── RequirementProfile ───────────────────────────────────────────────────────

class TestRequirementProfile:
    def test_basic_construction(self):
        p = make_profile()
        assert p.role == "Full-Stack Developer"
        assert p.experience_level is ExperienceLevel.MID
        assert p.question_types == [QuestionType.MCQ, QuestionType.THEORY]
        assert p.duration == 30

    def test_profile_is_immutable(self):
        p = make_profile()
        with pytest.raises(Exception):
            p.duration = 60

    def test_blank_refinement_becomes_none(self):
        assert make_profile(refinement="   ").refinement is None

    @pytest.mark.parametrize("field,value", [
        ("role", ""),
        ("role", "   "),
        ("experience_level", "principal"),
        ("tech_stack", []),
        ("tech_stack", ["React", " "]),
        ("question_types", []),
        ("question_types", ["essay"]),
        ("duration", 14),
        ("duration", 181),
    ])
    def test_invalid_fields_rejected(self, field, value):
        data = {
            "role": "Dev", "experience_level": "mid", "tech_stack": ["React"],
            "question_types": ["mcq"], "duration": 30,
        }
        data[field] = value
        with pytest.raises(InvalidProfile) as exc_info:
            make_profile_from(data)
        assert any(v.startswith(field) for v in exc_info.value.violations)

    def test_invalid_profile_is_value_error(self):
        with pytest.raises(ValueError):
            make_profile(duration=5)

    @pytest.mark.parametrize("duration", [15, 180])
    def test_duration_bounds_inclusive(self, duration):
        assert make_profile(duration=duration).duration == duration


def make_profile_from(data):
    from skill_eval.models import RequirementProfile
    return RequirementProfile.from_input(data)


# ─── Lookup tables ────────────────────────────────────────────────────────────

class TestLookupTables:
    @pytest.mark.parametrize("qtype,minutes", [
        ("mcq", 3), ("coding", 15), ("theory", 8), ("scenario", 12), ("oral", 5),
    ])
    def test_time_estimates(self, qtype, minutes):
        assert time_estimate_for(qtype) == minutes

    @pytest.mark.parametrize("difficulty,points", [
        ("easy", 10), ("medium", 20), ("hard", 30), ("HARD", 30), ("extreme", 20),
    ])
    def test_points_for_difficulty(self, difficulty, points):
        assert points_for_difficulty(difficulty) == points


# ─── Attempt ──────────────────────────────────────────────────────────────────

def _result():
    q = make_question(skills=["React"], points=20)
    return [q], evaluate_attempt([q], [make_evaluation(q, 15)])


class TestAttempt:
    def test_complete_sets_terminal_state(self):
        questions, result = _result()
        attempt = Attempt(id="a1", test_id="t1", user_id="u1", start_time=datetime(2026, 1, 1))
        attempt.complete([], result, end_time=datetime(2026, 1, 1, 1))
        assert attempt.is_completed
        assert attempt.score == result.overall_score == 75
        assert attempt.end_time == datetime(2026, 1, 1, 1)

    def test_complete_twice_raises(self):
        _, result = _result()
        attempt = Attempt(id="a1", test_id="t1", user_id="u1", start_time=datetime.now())
        attempt.complete([], result)
        with pytest.raises(AttemptAlreadyCompleted):
            attempt.complete([], result)

    def test_dict_round_trip(self):
        _, result = _result()
        attempt = Attempt(id="a1", test_id="t1", user_id="u1", start_time=datetime(2026, 1, 1))
        attempt.complete([], result, end_time=datetime(2026, 1, 1, 1))
        restored = Attempt.from_dict(attempt.to_dict())
        assert restored == attempt
        assert isinstance(restored.evaluation, EvaluationResult)


class TestQuestion:
    def test_list_fields_are_frozen(self):
        skills, options = ["React"], ["A) one", "B) two"]
        q = Question(id="q1", type="mcq", title="T", content="C",
                     skills=skills, options=options)
        skills.append("Vue")
        options.clear()
        assert q.skills == ("React",)
        assert q.options == ("A) one", "B) two")
        with pytest.raises(AttributeError):
            q.skills.append("Vue")
        with pytest.raises(TypeError):
            q.options[0] = "C) three"

    def test_from_dict_restores_tuples(self):
        q = Question.from_dict({"id": "q1", "type": "theory", "title": "T", "content": "C",
                                "skills": ["Go", "SQL"], "options": None})
        assert q.skills == ("Go", "SQL")
        assert q.options is None


class TestGeneratedTest:
    def test_dict_round_trip(self):
        questions = [make_question(skills=["Go"], qtype="mcq"), make_question(skills=["SQL"])]
        test = GeneratedTest(
            id="t1", profile_id="p1", questions=questions,
            metadata=build_metadata(questions), created_at=datetime(2026, 1, 1),
        )
        assert GeneratedTest.from_dict(test.to_dict()) == test
