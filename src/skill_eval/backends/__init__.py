"""
Generation / evaluation backends.

  base.py            QuestionGenerator + AnswerEvaluator contracts
  openai_backend.py  Azure OpenAI JSON-mode implementation (live mode)
  mock_backend.py    Deterministic rule-based implementation
"""

from __future__ import annotations

from skill_eval.backends.base import AnswerEvaluator, QuestionGenerator
from skill_eval.backends.mock_backend import MockBackend
from skill_eval.config import Settings, get_settings


def get_backend(settings: Settings | None = None):
    """Return the highest available backend: Azure OpenAI in live mode, else mock."""
    settings = settings or get_settings()
    if settings.live_mode:
        from skill_eval.backends.openai_backend import AzureOpenAIBackend
        return AzureOpenAIBackend(settings.openai, timeout=settings.scoring.request_timeout)
    return MockBackend()


__all__ = ["AnswerEvaluator", "QuestionGenerator", "MockBackend", "get_backend"]
