"""
Interview coach - the only entry point the API uses for AI work.

Wraps the configured provider with rate limiting, retries and a circuit
breaker, validates what comes back, and substitutes the local fallback for
any failure. Nothing raised by a provider reaches the caller.
"""

import math
import threading
import time
from typing import Any, Callable, List, Optional

from hireprep.config import Config, get_config
from hireprep.logging_config import get_logger
from hireprep.models import Feedback, round_half_up
from hireprep.resilience import (
    CircuitBreaker,
    RateLimiter,
    RateLimitExceeded,
    retry_with_backoff,
)

from .base import AIProvider
from .factory import get_provider
from .fallback import fallback_feedback, fallback_questions

logger = get_logger(__name__)

MAX_QUESTIONS = 5
MAX_SUGGESTIONS = 4
MIN_SCORE = 1
MAX_SCORE = 5


def _clamp_score(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} is not a number: {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{name} is not finite")
    return max(MIN_SCORE, min(MAX_SCORE, int(round_half_up(value))))


def normalize_feedback(raw: Any) -> Feedback:
    """
    Validate a provider's feedback dict.

    Scores are rounded and clamped to 1-5 and suggestions trimmed to four
    non-empty strings.

    Raises:
        ValueError: If the shape can't be salvaged
    """
    if not isinstance(raw, dict):
        raise ValueError(f"Feedback must be an object, got {type(raw).__name__}")

    suggestions = raw.get("suggestions")
    if not isinstance(suggestions, list):
        raise ValueError("suggestions must be a list")
    suggestions = [s.strip() for s in suggestions if isinstance(s, str) and s.strip()]
    if not suggestions:
        raise ValueError("suggestions is empty")

    overall = raw.get("overall")
    if not isinstance(overall, str) or not overall.strip():
        raise ValueError("overall must be a non-empty string")

    return Feedback(
        clarity=_clamp_score(raw.get("clarity"), "clarity"),
        relevance=_clamp_score(raw.get("relevance"), "relevance"),
        suggestions=suggestions[:MAX_SUGGESTIONS],
        overall=overall.strip(),
    )


def normalize_questions(raw: Any) -> List[str]:
    """Keep up to five non-empty question strings; raise ValueError if none remain."""
    if not isinstance(raw, list):
        raise ValueError(f"Questions must be a list, got {type(raw).__name__}")
    questions = [q.strip() for q in raw if isinstance(q, str) and q.strip()]
    if not questions:
        raise ValueError("No questions returned")
    return questions[:MAX_QUESTIONS]


class InterviewCoach:
    """
    Question generation and answer feedback with a guaranteed result.

    Args:
        config: Application config (defaults to the global one)
        provider: Pre-built provider; otherwise built lazily from config
        rate_limiter: Shared limiter for outgoing AI calls
        circuit_breaker: Shared breaker for the provider
        sleep: Sleep used between retries
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        provider: Optional[AIProvider] = None,
        rate_limiter: Optional[RateLimiter] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config or get_config()
        self._provider = provider
        self._provider_lock = threading.Lock()
        self.rate_limiter = rate_limiter or RateLimiter(self.config.ai_calls_per_minute)
        self.circuit_breaker = circuit_breaker or CircuitBreaker(
            failure_threshold=5, recovery_timeout=60.0
        )
        self._sleep = sleep

    @property
    def provider(self) -> AIProvider:
        """The AI provider, constructed on first use."""
        with self._provider_lock:
            if self._provider is None:
                self._provider = get_provider(self.config.to_dict())
                logger.info(
                    f"Using AI provider {self._provider.provider_name} "
                    f"({self._provider.model_name})"
                )
            return self._provider

    def _call(self, operation: str, func: Callable[[], Any]) -> Any:
        if not self.rate_limiter.try_acquire():
            raise RateLimitExceeded(f"AI rate limit reached for {operation}")

        retrying = retry_with_backoff(
            max_retries=self.config.ai_max_retries,
            base_delay=0.5,
            max_delay=4.0,
            sleep=self._sleep,
        )(func)
        return self.circuit_breaker.call(retrying)

    def generate_interview_questions(self, role: str, company: Optional[str] = None) -> List[str]:
        """
        Up to five practice questions for a role.

        Example:
            >>> coach.generate_interview_questions("Data Analyst", "Acme")
            ['Walk me through how you would ...', ...]
        """

        def attempt() -> List[str]:
            return normalize_questions(self.provider.generate_questions(role, company))

        try:
            return self._call("questions", attempt)
        except Exception as e:
            logger.warning(f"Question generation failed, using fallback questions: {e}")
            return fallback_questions(role, company)

    def provide_feedback(self, question: str, answer: str, role: Optional[str] = None) -> Feedback:
        """Score an answer; heuristic feedback when the provider can't."""

        def attempt() -> Feedback:
            return normalize_feedback(self.provider.evaluate_answer(question, answer, role))

        try:
            return self._call("feedback", attempt)
        except Exception as e:
            logger.warning(f"Answer feedback failed, using fallback feedback: {e}")
            return fallback_feedback(question, answer)


# Global coach instance
_coach: Optional[InterviewCoach] = None
_coach_lock = threading.Lock()


def get_coach() -> InterviewCoach:
    """Process-wide coach built from the global config."""
    global _coach
    with _coach_lock:
        if _coach is None:
            _coach = InterviewCoach()
        return _coach


def generate_interview_questions(role: str, company: Optional[str] = None) -> List[str]:
    return get_coach().generate_interview_questions(role, company)


def provide_feedback(question: str, answer: str, role: Optional[str] = None) -> Feedback:
    return get_coach().provide_feedback(question, answer, role)
