"""
Shared AI Prompt Templates

Prompt templates shared across all AI providers. Using the same prompts
ensures a consistent output format regardless of which AI backend is used.
"""

from .interview_questions import build_interview_questions_prompt, QUESTION_COUNT
from .answer_feedback import build_feedback_system_prompt, build_feedback_prompt

__all__ = [
    'build_interview_questions_prompt',
    'build_feedback_system_prompt',
    'build_feedback_prompt',
    'QUESTION_COUNT',
]
