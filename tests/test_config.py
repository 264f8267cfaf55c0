"""
Smoke tests for config / settings loading.
Run: python -m pytest tests/ -v
"""
import os

import pytest

from skill_eval.config import get_settings, _is_placeholder


class TestIsPlaceholder:
    def test_empty_string_is_placeholder(self):
        assert _is_placeholder("")

    def test_angle_bracket_is_placeholder(self):
        assert _is_placeholder("<your-key-here>")

    def test_your_prefix_is_placeholder(self):
        assert _is_placeholder("your-endpoint")

    def test_literal_PLACEHOLDER_is_placeholder(self):
        assert _is_placeholder("PLACEHOLDER")

    def test_real_value_not_placeholder(self):
        assert not _is_placeholder("https://my-resource.openai.azure.com")


class TestSettingsLoading:
    def test_get_settings_returns_object(self):
        s = get_settings()
        assert hasattr(s, "openai")
        assert hasattr(s, "scoring")
        assert hasattr(s, "app")

    def test_force_mock_defaults_false(self, monkeypatch):
        monkeypatch.delenv("FORCE_MOCK_MODE", raising=False)
        assert not get_settings().app.force_mock_mode

    def test_live_mode_false_without_credentials(self, monkeypatch):
        monkeypatch.delenv("FORCE_MOCK_MODE", raising=False)
        monkeypatch.delenv("AZURE_OPENAI_ENDPOINT", raising=False)
        monkeypatch.delenv("AZURE_OPENAI_API_KEY", raising=False)
        assert not get_settings().live_mode

    def test_live_mode_true_with_real_credentials(self, monkeypatch):
        monkeypatch.setenv("FORCE_MOCK_MODE", "false")
        monkeypatch.setenv("AZURE_OPENAI_ENDPOINT", "https://res.openai.azure.com/")
        monkeypatch.setenv("AZURE_OPENAI_API_KEY", "abc123defgh456")
        s = get_settings()
        assert s.live_mode
        assert s.openai.endpoint == "https://res.openai.azure.com"

    def test_force_mock_overrides_credentials(self, monkeypatch):
        monkeypatch.setenv("FORCE_MOCK_MODE", "true")
        monkeypatch.setenv("AZURE_OPENAI_ENDPOINT", "https://res.openai.azure.com")
        monkeypatch.setenv("AZURE_OPENAI_API_KEY", "abc123defgh456")
        assert not get_settings().live_mode

    @pytest.mark.parametrize("raw,expected", [("8", 8), ("0", 1), ("", 4)])
    def test_max_workers(self, monkeypatch, raw, expected):
        monkeypatch.setenv("SCORING_MAX_WORKERS", raw)
        assert get_settings().scoring.max_workers == expected

    def test_status_summary_keys(self, monkeypatch):
        monkeypatch.setenv("FORCE_MOCK_MODE", "true")
        summary = get_settings().status_summary()
        assert "Azure OpenAI" in summary
        assert summary["Backend"] == "Mock (rule-based)"

    def test_status_summary_reports_storage_and_backend(self, monkeypatch):
        monkeypatch.setenv("FORCE_MOCK_MODE", "yes")
        monkeypatch.setenv("SKILL_EVAL_DB_PATH", "history.db")
        summary = get_settings().status_summary()
        assert summary["Storage"] == "history.db"
        assert summary["Backend"] == "Mock (rule-based)"
