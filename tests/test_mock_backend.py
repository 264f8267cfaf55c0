"""
Tests for the rule-based backend (backends/mock_backend.py) and backend
selection (backends/__init__.py).
"""
import dataclasses

from factories import make_profile

from skill_eval.backends import get_backend
from skill_eval.backends.mock_backend import MockBackend
from skill_eval.config import get_settings
from skill_eval.models import QuestionSlot, time_estimate_for
from skill_eval.slot_planner import plan_slots


def _slot(index=0, qtype="theory", skill="React"):
    return QuestionSlot(index=index, type=qtype, skill=skill,
                        time_estimate=time_estimate_for(qtype))


class TestGenerate:
    def test_mcq_has_four_options_and_a_letter(self, backend):
        q = backend.generate(_slot(index=1, qtype="mcq"), "Frontend Dev", "mid")
        assert len(q.options) == 4
        assert q.expected_answer == "B"
        assert q.options[1].startswith("B) ")
        assert q.skills == ("React",)
        assert q.time_estimate == 3

    def test_free_text_has_no_options(self, backend):
        q = backend.generate(_slot(qtype="coding"), "Backend Dev", "senior")
        assert q.options is None
        assert q.difficulty == "hard"
        assert q.points == 30

    def test_difficulty_follows_level(self, backend):
        junior = backend.generate(_slot(), "Dev", "junior")
        assert (junior.difficulty, junior.points) == ("easy", 10)

    def test_deterministic_content(self, backend):
        a = backend.generate(_slot(qtype="scenario"), "SRE", "mid", "Focus on outages")
        b = backend.generate(_slot(qtype="scenario"), "SRE", "mid", "Focus on outages")
        assert dataclasses.replace(a, id="x") == dataclasses.replace(b, id="x")
        assert "Focus on outages" in a.content

    def test_refine_collapses_whitespace(self, backend):
        assert backend.refine_requirements("  more\n async   ", make_profile()) == "more async"


class TestEvaluate:
    def test_mcq_correct_letter(self, backend):
        q = backend.generate(_slot(index=2, qtype="mcq"), "Dev", "mid")
        assert backend.evaluate(q, "c) something", q.points)["score"] == q.points
        assert backend.evaluate(q, "A", q.points)["score"] == 0

    def test_free_text_key_point_coverage(self, backend):
        q = backend.generate(_slot(qtype="theory"), "Dev", "mid")
        full = backend.evaluate(q, "Definition, an example, trade-offs and use cases.", 20)
        half = backend.evaluate(q, "A definition and an example.", 20)
        assert full == {"score": 20, "feedback": "Covers all expected points."}
        assert half["score"] == 10
        assert "missing trade-offs, use cases" in half["feedback"]

    def test_empty_answer(self, backend):
        q = backend.generate(_slot(), "Dev", "mid")
        assert backend.evaluate(q, "   ", 20)["score"] == 0

    def test_whole_plan_generates(self, backend):
        profile = make_profile(question_types=["mcq", "coding", "theory", "scenario"], duration=60)
        questions = [backend.generate(s, profile.role, "mid") for s in plan_slots(profile)]
        assert all(q is not None for q in questions)


class TestGetBackend:
    def test_mock_when_forced(self):
        assert isinstance(get_backend(get_settings()), MockBackend)

    def test_mock_without_credentials(self, monkeypatch):
        monkeypatch.setenv("FORCE_MOCK_MODE", "false")
        monkeypatch.setenv("AZURE_OPENAI_ENDPOINT", "<your-endpoint>")
        monkeypatch.setenv("AZURE_OPENAI_API_KEY", "")
        assert isinstance(get_backend(), MockBackend)
