"""
Interview Questions Prompt Template

This prompt is used for generating practice interview questions.
"""

from typing import Optional

QUESTION_COUNT = 5


def build_interview_questions_prompt(role: str, company: Optional[str] = None) -> str:
    """
    Build the prompt for interview question generation.

    Args:
        role: Job title the candidate is practicing for
        company: Optional company name

    Returns:
        str: Formatted prompt string
    """
    company_context = f" at {company}" if company else ""

    return f"""Generate {QUESTION_COUNT} realistic interview questions for a {role} position{company_context}.

COVER:
- Technical skills specific to the role
- Behavioral questions suited to the position level
- Challenges specific to the company (only if a company is named)
- Current industry practices and trends

RULES:
1. Each question must be answerable in a few minutes of conversation
2. Questions should let the candidate demonstrate expertise and problem solving
3. Each question must end with a question mark

Return JSON only, in this exact format:
{{"questions": ["question 1", "question 2", "question 3", "question 4", "question 5"]}}"""
