"""
AI module for interview practice.

Supports multiple AI providers (Claude, Gemini) through a unified interface,
with local fallbacks when no provider is usable.

Usage:
    from hireprep.ai import get_coach

    coach = get_coach()
    questions = coach.generate_interview_questions("Backend Engineer", "Acme")
"""

from .base import AIProvider
from .coach import (
    InterviewCoach,
    generate_interview_questions,
    get_coach,
    normalize_feedback,
    normalize_questions,
    provide_feedback,
)
from .factory import PROVIDERS, get_provider, get_provider_info
from .fallback import fallback_feedback, fallback_questions

__all__ = [
    "AIProvider",
    "InterviewCoach",
    "PROVIDERS",
    "fallback_feedback",
    "fallback_questions",
    "generate_interview_questions",
    "get_coach",
    "get_provider",
    "get_provider_info",
    "normalize_feedback",
    "normalize_questions",
    "provide_feedback",
]
