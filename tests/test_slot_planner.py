"""
Tests for the question slot planner (slot_planner.py).
Validates slot count, round-robin type/skill assignment, defaults and
precondition failures.
"""
import math

import pytest
from factories import make_profile

from skill_eval.errors import InvalidProfile
from skill_eval.models import RequirementProfile
from skill_eval.slot_planner import plan_slots, slot_count


class TestSlotCount:
    @pytest.mark.parametrize("duration", [15, 20, 29, 30, 31, 45, 60, 99, 100, 179, 180])
    def test_ceil_of_duration_over_ten(self, duration):
        slots = plan_slots(make_profile(duration=duration))
        assert len(slots) == math.ceil(duration / 10)
        assert len(slots) >= 1

    def test_every_valid_duration(self):
        for d in range(15, 181):
            assert slot_count(d) == math.ceil(d / 10)

    def test_never_below_one(self):
        assert slot_count(0) == 1


class TestRoundRobin:
    def test_skills_in_declared_order(self):
        slots = plan_slots(make_profile(tech_stack=["A", "B", "C"], duration=30))
        assert [s.skill for s in slots] == ["A", "B", "C"]

    def test_types_cycle(self):
        slots = plan_slots(make_profile(question_types=["mcq", "coding"], duration=50))
        assert [s.type for s in slots] == ["mcq", "coding", "mcq", "coding", "mcq"]

    def test_skills_wrap_around(self):
        slots = plan_slots(make_profile(tech_stack=["A", "B"], duration=45))
        assert [s.skill for s in slots] == ["A", "B", "A", "B", "A"]

    def test_every_skill_and_type_covered_when_enough_slots(self):
        profile = make_profile(
            tech_stack=["A", "B", "C", "D"],
            question_types=["mcq", "coding", "theory", "scenario"],
            duration=60,
        )
        slots = plan_slots(profile)
        assert {s.skill for s in slots} == {"A", "B", "C", "D"}
        assert {s.type for s in slots} == {"mcq", "coding", "theory", "scenario"}

    def test_indexes_are_sequential(self):
        slots = plan_slots(make_profile(duration=60))
        assert [s.index for s in slots] == list(range(6))


class TestSlotDefaults:
    def test_medium_difficulty_and_points(self):
        for slot in plan_slots(make_profile(duration=90)):
            assert slot.difficulty == "medium"
            assert slot.points == 20

    def test_time_estimate_from_type(self):
        profile = make_profile(question_types=["mcq", "coding", "theory", "scenario"], duration=40)
        assert [s.time_estimate for s in plan_slots(profile)] == [3, 15, 8, 12]

    def test_pure_function(self):
        profile = make_profile(duration=70)
        assert plan_slots(profile) == plan_slots(profile)


class TestPreconditions:
    def test_empty_tech_stack_raises(self):
        profile = RequirementProfile.model_construct(
            role="Dev", experience_level="mid", tech_stack=[],
            question_types=["mcq"], duration=30,
        )
        with pytest.raises(InvalidProfile):
            plan_slots(profile)

    def test_empty_question_types_raises(self):
        profile = RequirementProfile.model_construct(
            role="Dev", experience_level="mid", tech_stack=["React"],
            question_types=[], duration=30,
        )
        with pytest.raises(InvalidProfile) as exc_info:
            plan_slots(profile)
        assert "question_types" in str(exc_info.value)
