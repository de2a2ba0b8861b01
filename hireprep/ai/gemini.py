"""
Gemini AI Provider - Google Gemini implementation
"""

import os
from typing import Any, Dict, List, Optional

import google.generativeai as genai

from hireprep.logging_config import get_logger

from .base import AIProvider
from .prompts import (
    build_feedback_prompt,
    build_feedback_system_prompt,
    build_interview_questions_prompt,
)

logger = get_logger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

JSON_RESPONSE = {"response_mime_type": "application/json"}


class GeminiProvider(AIProvider):
    """Gemini AI provider using the google-generativeai SDK."""

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize Gemini provider.

        Args:
            config: Configuration dict with optional 'ai.model' and
                'ai.timeout_seconds' settings
        """
        config = config or {}
        ai_config = config.get("ai", {})
        self._model = ai_config.get("model") or DEFAULT_MODEL
        self._timeout = float(ai_config.get("timeout_seconds", 20))

        api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
        if not api_key:
            raise ValueError(
                "GEMINI_API_KEY not found. Set GEMINI_API_KEY or GOOGLE_API_KEY in .env."
            )

        genai.configure(api_key=api_key)

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def model_name(self) -> str:
        return self._model

    def _generate(self, prompt: str, system: Optional[str] = None) -> str:
        """Generate a JSON response using Gemini."""
        try:
            model = genai.GenerativeModel(self._model, system_instruction=system)
            response = model.generate_content(
                prompt,
                generation_config=JSON_RESPONSE,
                request_options={"timeout": self._timeout},
            )
            return (response.text or "").strip()
        except Exception as e:
            logger.error(f"Gemini generation error: {e}")
            raise

    def generate_questions(self, role: str, company: Optional[str] = None) -> List[str]:
        """Generate interview questions for a role."""
        response = self._generate(build_interview_questions_prompt(role, company))
        return self._parse_questions(response)

    def evaluate_answer(
        self, question: str, answer: str, role: Optional[str] = None
    ) -> Dict[str, Any]:
        """Score an interview answer."""
        response = self._generate(
            build_feedback_prompt(question, answer),
            system=build_feedback_system_prompt(role),
        )
        return self._parse_json_response(response)
