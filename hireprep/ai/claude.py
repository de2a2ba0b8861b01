"""
Claude AI Provider - Anthropic Claude implementation
"""

import os
from typing import Any, Dict, List, Optional

import anthropic

from hireprep.logging_config import get_logger

from .base import AIProvider
from .prompts import (
    build_feedback_prompt,
    build_feedback_system_prompt,
    build_interview_questions_prompt,
)

logger = get_logger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class ClaudeProvider(AIProvider):
    """Claude AI provider using the Anthropic API."""

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize Claude provider.

        Args:
            config: Configuration dict with optional 'ai.model' and
                'ai.timeout_seconds' settings
        """
        config = config or {}
        ai_config = config.get("ai", {})
        self._model = ai_config.get("model") or DEFAULT_MODEL

        api_key = os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY not found. Set it in .env or environment variables."
            )

        # Retries are handled by the coach; the client must fail fast
        self._client = anthropic.Anthropic(
            api_key=api_key,
            timeout=float(ai_config.get("timeout_seconds", 20)),
            max_retries=0,
        )

    @property
    def provider_name(self) -> str:
        return "claude"

    @property
    def model_name(self) -> str:
        return self._model

    def _generate(self, prompt: str, system: Optional[str] = None, max_tokens: int = 1000) -> str:
        """Generate a response using Claude."""
        kwargs: Dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system

        try:
            response = self._client.messages.create(**kwargs)
            return response.content[0].text.strip()
        except Exception as e:
            logger.error(f"Claude generation error: {e}")
            raise

    def generate_questions(self, role: str, company: Optional[str] = None) -> List[str]:
        """Generate interview questions for a role."""
        prompt = build_interview_questions_prompt(role, company)
        response = self._generate(prompt, max_tokens=800)
        return self._parse_questions(response)

    def evaluate_answer(
        self, question: str, answer: str, role: Optional[str] = None
    ) -> Dict[str, Any]:
        """Score an interview answer."""
        response = self._generate(
            build_feedback_prompt(question, answer),
            system=build_feedback_system_prompt(role),
            max_tokens=600,
        )
        return self._parse_json_response(response)
