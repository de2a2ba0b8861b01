"""
Base AI Provider - Abstract base class for AI providers

Defines the interface every provider (Claude, Gemini) implements for
interview question generation and answer evaluation. Providers raise on
any failure; the coach layer decides what to do about it.
"""

import json
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from hireprep.logging_config import get_logger

logger = get_logger(__name__)


class AIProvider(ABC):
    """
    Abstract base class for AI providers.

    All providers must return data in the same format so the practice flow
    works identically regardless of which AI is used.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of this AI provider.

        Returns:
            str: Provider name (e.g., 'claude', 'gemini')
        """

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the model identifier being used."""

    @abstractmethod
    def generate_questions(self, role: str, company: Optional[str] = None) -> List[str]:
        """
        Generate interview questions for a role.

        Args:
            role: Job title the candidate is practicing for
            company: Optional company name for company-specific questions

        Returns:
            list[str]: Up to five questions

        Example:
            >>> provider.generate_questions("Backend Engineer", "Acme")
            ["How would you design a rate limiter for Acme's public API?", ...]
        """

    @abstractmethod
    def evaluate_answer(
        self, question: str, answer: str, role: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Score a candidate's answer.

        Args:
            question: The interview question
            answer: The candidate's free-text answer
            role: Optional role for context

        Returns:
            dict: {
                "clarity": int,  # 1-5
                "relevance": int,  # 1-5
                "suggestions": list[str],  # 2-3 actionable tips
                "overall": str  # summary feedback
            }
        """

    def _parse_json_response(self, text: str) -> Any:
        """
        Extract JSON from an AI response that might include markdown fences or preamble.

        Args:
            text: Raw AI response text

        Returns:
            Parsed JSON value (object or array)

        Raises:
            ValueError: If no valid JSON can be extracted

        Example:
            >>> provider._parse_json_response('```json\\n{"key": "value"}\\n```')
            {"key": "value"}
        """
        if not text:
            raise ValueError("Empty response text")

        text = text.strip()

        try:
            return json.loads(text)
        except json.JSONDecodeError:
            pass

        patterns = [
            r"```json\s*([\s\S]*?)\s*```",  # json code fence
            r"```\s*([\s\S]*?)\s*```",  # generic code fence
            r"\{[\s\S]*\}",  # outermost braces
            r"\[[\s\S]*\]",  # outermost brackets
        ]
        for pattern in patterns:
            match = re.search(pattern, text)
            if not match:
                continue
            candidate = match.group(1) if match.groups() else match.group()
            try:
                return json.loads(candidate)
            except json.JSONDecodeError:
                continue

        raise ValueError(
            f"Could not extract valid JSON from response. "
            f"Raw text (first 500 chars): {text[:500]}"
        )

    def _parse_questions(self, text: str, limit: int = 5) -> List[str]:
        """
        Extract questions from a model response.

        Prefers a JSON ``{"questions": [...]}`` object or a bare JSON array;
        falls back to splitting a numbered or bulleted list and keeping the
        lines that read like questions.
        """
        try:
            parsed = self._parse_json_response(text)
        except ValueError:
            parsed = None

        if isinstance(parsed, dict):
            parsed = parsed.get("questions")
        if isinstance(parsed, list):
            questions = [q.strip() for q in parsed if isinstance(q, str) and q.strip()]
            return questions[:limit]

        pieces = re.split(r"\d+[.)]\s|\n\s*[-*]\s", text or "")
        questions = [p.strip() for p in pieces if len(p.strip()) > 10 and "?" in p]
        return questions[:limit]
