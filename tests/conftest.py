"""
Shared pytest fixtures for the skill_eval test suite.
All fixtures use mock mode — no Azure credentials required.
Factory helpers live in tests/factories.py so they can be imported
directly by test modules as well as being used here.
"""
import sys
import os

_tests_dir = os.path.dirname(__file__)
_src_dir   = os.path.join(_tests_dir, "..", "src")
for _p in (_tests_dir, _src_dir):
    if _p not in sys.path:
        sys.path.insert(0, _p)

# Force mock mode — never call Azure during tests
os.environ["FORCE_MOCK_MODE"] = "true"
os.environ.setdefault("AZURE_OPENAI_ENDPOINT", "<placeholder>")
os.environ.setdefault("AZURE_OPENAI_API_KEY",  "<placeholder>")


import pytest

from factories import make_profile

from skill_eval.backends.mock_backend import MockBackend
from skill_eval.repository import InMemoryRepository
from skill_eval.service import AssessmentService


# ─── pytest fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def backend():
    return MockBackend()


@pytest.fixture
def profile_fullstack():
    return make_profile()


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def service(repository, backend):
    return AssessmentService(repository, backend, backend, max_workers=4)
