"""
Answer Feedback Prompt Template

This prompt is used for scoring a candidate's interview answer.
"""

from typing import Optional


def build_feedback_system_prompt(role: Optional[str] = None) -> str:
    """
    Build the system instruction for answer evaluation.

    Args:
        role: Optional role the candidate is interviewing for

    Returns:
        str: System prompt
    """
    role_context = f" for a {role} position" if role else ""

    return f"""You are an expert interview coach giving constructive feedback on interview answers{role_context}.

EVALUATE:
1. Clarity (1-5): How well structured and clear is the response?
2. Relevance (1-5): How directly does the answer address the question?
3. Suggestions: 2-3 specific, actionable improvement tips
4. Overall: a short summary of the feedback

Be encouraging but honest. Prefer specific improvements over general praise.

Respond with JSON only, in this exact format:
{{
  "clarity": 3,
  "relevance": 4,
  "suggestions": ["tip 1", "tip 2"],
  "overall": "summary"
}}"""


def build_feedback_prompt(question: str, answer: str) -> str:
    """
    Build the user message carrying the question and the candidate's answer.

    Args:
        question: Interview question
        answer: Candidate's answer

    Returns:
        str: Formatted prompt string
    """
    return f"""QUESTION: "{question}"

ANSWER: "{answer}"

Provide detailed feedback on this interview response."""
