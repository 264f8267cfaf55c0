"""
config.py — Central settings for the Skill Assessment workflow
==============================================================
Every setting comes from the process environment, optionally seeded from a
``.env`` file (see .env.example).

  AZURE_OPENAI_*            credentials + deployment for the live backend
  SCORING_MAX_WORKERS       parallel answer evaluations per attempt
  SCORING_REQUEST_TIMEOUT   seconds per upstream call
  FORCE_MOCK_MODE           pin the rule-based backend even with credentials
  SKILL_EVAL_DB_PATH        SQLite file; unset keeps everything in memory
  LOG_LEVEL                 root log level for the CLI

The Azure OpenAI backend is chosen only when both the endpoint and the key
hold real values; template values copied from .env.example do not count.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Values already in the environment win over the .env file
load_dotenv(override=False)


# ─── Environment readers ─────────────────────────────────────────────────────

# Shapes of the unfilled values shipped in .env.example
_TEMPLATE_PREFIXES = ("your-",)
_TEMPLATE_LITERALS = {"PLACEHOLDER"}


def _is_placeholder(value: str) -> bool:
    """True for empty values and values still in their template form."""
    if not value:
        return True
    return (
        "<" in value
        or value in _TEMPLATE_LITERALS
        or value.startswith(_TEMPLATE_PREFIXES)
    )


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    return int(raw) if raw else default


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    return float(raw) if raw else default


def _env_flag(name: str) -> bool:
    return _env(name).lower() in {"1", "true", "yes"}


# ─── Sections ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AzureOpenAIConfig:
    endpoint:    str
    api_key:     str
    deployment:  str
    api_version: str

    @property
    def is_configured(self) -> bool:
        """Both the endpoint and the key are filled in with real values."""
        return not any(_is_placeholder(v) for v in (self.endpoint, self.api_key))


@dataclass(frozen=True)
class ScoringConfig:
    max_workers:     int     # parallel answer evaluations per attempt
    request_timeout: float   # seconds per upstream call


@dataclass(frozen=True)
class AppConfig:
    force_mock_mode: bool
    db_path:         str     # empty → in-memory repository
    log_level:       str


@dataclass(frozen=True)
class Settings:
    openai:  AzureOpenAIConfig
    scoring: ScoringConfig
    app:     AppConfig

    @property
    def live_mode(self) -> bool:
        """Questions and scores come from Azure OpenAI rather than the mock backend."""
        if self.app.force_mock_mode:
            return False
        return self.openai.is_configured

    def status_summary(self) -> dict[str, str]:
        """Startup lines for the CLI: credentials, active backend, storage."""
        credentials = "🟢 Live" if self.openai.is_configured else "⚪ Not configured"
        backend     = "Azure OpenAI" if self.live_mode else "Mock (rule-based)"
        storage     = self.app.db_path or "in-memory"
        return {"Azure OpenAI": credentials, "Backend": backend, "Storage": storage}


def get_settings() -> Settings:
    """Read a fresh Settings snapshot from the environment."""
    return Settings(
        openai=AzureOpenAIConfig(
            endpoint    = _env("AZURE_OPENAI_ENDPOINT").rstrip("/"),
            api_key     = _env("AZURE_OPENAI_API_KEY"),
            deployment  = _env("AZURE_OPENAI_DEPLOYMENT", "gpt-4o"),
            api_version = _env("AZURE_OPENAI_API_VERSION", "2024-12-01-preview"),
        ),
        scoring=ScoringConfig(
            max_workers     = max(1, _env_int("SCORING_MAX_WORKERS", 4)),
            request_timeout = _env_float("SCORING_REQUEST_TIMEOUT", 30.0),
        ),
        app=AppConfig(
            force_mock_mode = _env_flag("FORCE_MOCK_MODE"),
            db_path         = _env("SKILL_EVAL_DB_PATH"),
            log_level       = _env("LOG_LEVEL", "INFO").upper() or "INFO",
        ),
    )
