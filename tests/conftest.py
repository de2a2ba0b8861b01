"""
Pytest configuration and shared fixtures for HirePrep tests.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from hireprep.ai.base import AIProvider
from hireprep.ai.coach import InterviewCoach
from hireprep.config import Config
from hireprep.database import Database
from hireprep.storage import InMemoryStorage, SQLiteStorage

ENV_VARS = [
    "HIREPREP_CONFIG",
    "HIREPREP_STORAGE_BACKEND",
    "DATABASE_PATH",
    "AI_PROVIDER",
    "AI_MODEL",
    "PORT",
    "LOG_LEVEL",
    "ANTHROPIC_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """
    Isolate every test from the developer's environment.

    Clears HirePrep/AI environment variables, points the default config file
    at an empty temp dir and resets the cached global config.
    """
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("hireprep.config.DEFAULT_CONFIG_PATH", tmp_path / "config.yaml")
    monkeypatch.setattr("hireprep.config._config", None)


class TickingClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture(params=["memory", "sqlite"])
def storage(request, tmp_path, clock):
    """
    Storage backend under test. Every repository test runs against both
    backends so their behaviour stays identical.

    Yields:
        Storage: InMemoryStorage or SQLiteStorage on a temp database file
    """
    if request.param == "memory":
        backend = InMemoryStorage(clock=clock)
    else:
        backend = SQLiteStorage(Database(tmp_path / "hireprep.db"), clock=clock)
    yield backend
    backend.close()


@pytest.fixture
def memory_config():
    """Config using in-memory storage and no retries."""
    return Config(data={"storage": {"backend": "memory"}, "ai": {"max_retries": 0}})


@pytest.fixture
def mock_provider():
    """
    Mocked AI provider returning well-formed output.

    Returns:
        Mock: Provider with generate_questions/evaluate_answer stubs
    """
    provider = Mock(spec=AIProvider)
    provider.provider_name = "gemini"
    provider.model_name = "gemini-test"
    provider.generate_questions.return_value = [
        "How would you design a job queue?",
        "Tell me about a production incident you handled.",
    ]
    provider.evaluate_answer.return_value = {
        "clarity": 4,
        "relevance": 5,
        "suggestions": ["Quantify the impact", "Mention the trade-offs"],
        "overall": "Solid, well structured answer.",
    }
    return provider


@pytest.fixture
def coach(memory_config, mock_provider):
    return InterviewCoach(memory_config, provider=mock_provider, sleep=lambda seconds: None)


@pytest.fixture
def app(memory_config, coach, clock, tmp_path):
    """
    Flask app wired to in-memory storage and the mocked coach.
    """
    from hireprep import create_app

    app = create_app(memory_config, storage=InMemoryStorage(clock=clock), coach=coach)
    app.config["TESTING"] = True
    app.config["DIST_DIR"] = str(tmp_path / "dist")
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sample_application():
    return {
        "company": "Acme",
        "role": "Engineer",
        "status": "applied",
        "tag": "target",
    }
