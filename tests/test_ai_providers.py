"""
Tests for AI provider response parsing, the provider factory and the
Claude/Gemini adapters (SDK clients are mocked).
"""

from unittest.mock import Mock, patch

import pytest

from hireprep.ai.base import AIProvider
from hireprep.ai.factory import get_provider, get_provider_info
from hireprep.ai.prompts import (
    build_feedback_prompt,
    build_feedback_system_prompt,
    build_interview_questions_prompt,
)


class EchoProvider(AIProvider):
    """Minimal concrete provider for exercising the shared helpers."""

    provider_name = "echo"
    model_name = "echo-1"

    def generate_questions(self, role, company=None):
        return []

    def evaluate_answer(self, question, answer, role=None):
        return {}


@pytest.fixture
def echo():
    return EchoProvider()


def test_parse_json_plain(echo):
    assert echo._parse_json_response('{"clarity": 4}') == {"clarity": 4}


def test_parse_json_in_code_fence(echo):
    """Test extraction from a ```json fenced block."""
    text = 'Here you go:\n```json\n{"overall": "Nice"}\n```\nGood luck!'

    assert echo._parse_json_response(text) == {"overall": "Nice"}


def test_parse_json_with_preamble(echo):
    text = 'Sure! {"clarity": 3, "relevance": 2} Let me know.'

    assert echo._parse_json_response(text) == {"clarity": 3, "relevance": 2}


def test_parse_json_raises_on_garbage(echo):
    with pytest.raises(ValueError):
        echo._parse_json_response("no json here")
    with pytest.raises(ValueError):
        echo._parse_json_response("")


def test_parse_questions_from_json_object(echo):
    text = '{"questions": ["What is REST?", "  ", "Why Python?"]}'

    assert echo._parse_questions(text) == ["What is REST?", "Why Python?"]


def test_parse_questions_from_numbered_list(echo):
    """Test the plain-text fallback keeps question-like lines only."""
    text = (
        "Here are some questions:\n"
        "1. How do you prioritise competing deadlines?\n"
        "2. What does good code review look like to you?\n"
        "3. Thanks"
    )

    assert echo._parse_questions(text) == [
        "How do you prioritise competing deadlines?",
        "What does good code review look like to you?",
    ]


def test_parse_questions_limits_count(echo):
    text = '["Q1 long enough?", "Q2?", "Q3?", "Q4?", "Q5?", "Q6?"]'

    assert len(echo._parse_questions(text)) == 5


def test_prompts_include_inputs():
    """Test that prompt builders embed the role, company and answer."""
    questions_prompt = build_interview_questions_prompt("Site Reliability Engineer", "Acme")
    feedback_prompt = build_feedback_prompt("Why Acme?", "Because of the mission.")

    assert "Site Reliability Engineer" in questions_prompt
    assert "Acme" in questions_prompt
    assert "Because of the mission." in feedback_prompt
    assert "Data Analyst" in build_feedback_system_prompt("Data Analyst")


def test_factory_rejects_unknown_provider():
    with pytest.raises(ValueError, match="Unknown AI provider"):
        get_provider({"ai": {"provider": "openai"}})


def test_factory_requires_api_key():
    """Test that a provider without its key fails at construction."""
    with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
        get_provider({"ai": {"provider": "claude"}})


def test_provider_info_reports_keys(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "test-google-key")

    info = get_provider_info()

    assert info["gemini"]["has_key"] is True
    assert info["claude"]["has_key"] is False


def test_claude_provider_uses_timeout_and_parses(monkeypatch):
    """Test the Claude adapter's client settings and response handling."""
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-anthropic-key")

    with patch("hireprep.ai.claude.anthropic.Anthropic") as client_class:
        client = client_class.return_value
        client.messages.create.return_value = Mock(
            content=[Mock(text='```json\n{"questions": ["Why Claude?"]}\n```')]
        )

        provider = get_provider({"ai": {"provider": "claude", "timeout_seconds": 7}})
        questions = provider.generate_questions("Engineer")

    assert provider.provider_name == "claude"
    assert questions == ["Why Claude?"]
    client_class.assert_called_once_with(api_key="test-anthropic-key", timeout=7.0, max_retries=0)


def test_claude_provider_evaluate_answer_sends_system_prompt(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-anthropic-key")

    with patch("hireprep.ai.claude.anthropic.Anthropic") as client_class:
        client = client_class.return_value
        client.messages.create.return_value = Mock(
            content=[Mock(text='{"clarity": 4, "relevance": 4, "suggestions": ["x"], "overall": "y"}')]
        )

        provider = get_provider({"ai": {"provider": "claude", "model": "claude-test"}})
        result = provider.evaluate_answer("Q?", "A.", "Engineer")

    kwargs = client.messages.create.call_args.kwargs
    assert kwargs["model"] == "claude-test"
    assert "Engineer" in kwargs["system"]
    assert result["clarity"] == 4


def test_claude_provider_propagates_errors(monkeypatch):
    """Test that SDK errors propagate so the coach can fall back."""
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-anthropic-key")

    with patch("hireprep.ai.claude.anthropic.Anthropic") as client_class:
        client_class.return_value.messages.create.side_effect = TimeoutError("timed out")
        provider = get_provider({"ai": {"provider": "claude"}})

        with pytest.raises(TimeoutError):
            provider.evaluate_answer("Q?", "A.")


def test_gemini_provider_requests_json_with_timeout(monkeypatch):
    """Test the Gemini adapter's request options and parsing."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-gemini-key")

    with patch("hireprep.ai.gemini.genai") as genai:
        model = genai.GenerativeModel.return_value
        model.generate_content.return_value = Mock(text='{"questions": ["Why Gemini?"]}')

        provider = get_provider({"ai": {"provider": "gemini", "timeout_seconds": 5}})
        questions = provider.generate_questions("Engineer", "Acme")

    genai.configure.assert_called_once_with(api_key="test-gemini-key")
    assert provider.model_name == "gemini-2.5-flash"
    assert questions == ["Why Gemini?"]
    kwargs = model.generate_content.call_args.kwargs
    assert kwargs["request_options"] == {"timeout": 5.0}
    assert kwargs["generation_config"] == {"response_mime_type": "application/json"}


def test_gemini_provider_accepts_google_api_key(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "test-google-key")

    with patch("hireprep.ai.gemini.genai") as genai:
        get_provider({"ai": {"provider": "gemini"}})

    genai.configure.assert_called_once_with(api_key="test-google-key")
