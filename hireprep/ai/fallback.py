"""
Local fallbacks used whenever an AI provider can't give a usable answer.

Both functions are deterministic and never raise, so the practice flow keeps
working with no API key, no network, or a misbehaving model.
"""

import re
from typing import List, Optional, Set

from hireprep.models import Feedback

SHORT_ANSWER_CHARS = 50

# Common words that say nothing about whether an answer is on topic
STOP_WORDS = frozenset(
    {
        "about", "after", "also", "been", "before", "being", "could", "does",
        "each", "from", "have", "into", "just", "like", "make", "more", "most",
        "much", "only", "over", "some", "such", "than", "that", "their", "them",
        "then", "there", "these", "they", "this", "very", "were", "what", "when",
        "where", "which", "while", "will", "with", "would", "your", "yours",
        "tell", "describe", "time",
    }
)

MORE_DETAIL_TIP = "Try to provide more detailed examples in your answer"
STAR_TIP = (
    "Consider using the STAR method (Situation, Task, Action, Result) for "
    "behavioral questions"
)
ROLE_TIP = "Connect your answer back to the specific requirements of the role"

SHORT_OVERALL = (
    "Your answer could benefit from more detail and specific examples. Try to "
    "elaborate on your experience and provide concrete instances."
)
MEDIUM_OVERALL = (
    "Good foundation for an answer. Consider adding more specific examples and "
    "connecting your response directly to the role requirements."
)
LONG_OVERALL = (
    "A well-developed answer. Tighten the structure so the key result stands "
    "out, and make sure each example maps to what the role needs."
)


def fallback_questions(role: str, company: Optional[str] = None) -> List[str]:
    """Five generic practice questions for ``role``."""
    role = (role or "").strip().lower() or "this"
    company = (company or "").strip()
    position = f"{role} position at {company}" if company else f"{role} position"

    return [
        f"Tell me about your experience with {role} responsibilities.",
        f"What interests you most about this {position}?",
        "Describe a challenging project you've worked on recently.",
        "How do you stay updated with industry trends and best practices?",
        "What are your career goals in the next 2-3 years?",
    ]


def keywords(text: str) -> Set[str]:
    """Lower-cased words of four or more letters, minus stop words."""
    words = re.findall(r"[a-z]{4,}", (text or "").lower())
    return {w for w in words if w not in STOP_WORDS}


def score_clarity(answer: str) -> int:
    length = len((answer or "").strip())
    if length > 100:
        return 3
    if length > SHORT_ANSWER_CHARS:
        return 2
    return 1


def score_relevance(question: str, answer: str) -> int:
    question_words = keywords(question)
    if not question_words:
        return 2
    overlap = len(question_words & keywords(answer)) / len(question_words)
    if overlap >= 0.5:
        return 4
    if overlap > 0:
        return 3
    return 2


def fallback_feedback(question: str, answer: str) -> Feedback:
    """
    Heuristic feedback from answer length and keyword overlap.

    Example:
        >>> fallback_feedback("Why do you want this job?", "Money.").clarity
        1
    """
    length = len((answer or "").strip())

    suggestions = []
    if length < SHORT_ANSWER_CHARS:
        suggestions.append(MORE_DETAIL_TIP)
    suggestions.extend([STAR_TIP, ROLE_TIP])

    if length < SHORT_ANSWER_CHARS:
        overall = SHORT_OVERALL
    elif length <= 100:
        overall = MEDIUM_OVERALL
    else:
        overall = LONG_OVERALL

    return Feedback(
        clarity=score_clarity(answer),
        relevance=score_relevance(question, answer),
        suggestions=suggestions,
        overall=overall,
    )
