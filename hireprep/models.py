"""
Models - Records and input validation for HirePrep

Defines the Application, InterviewSession and Feedback records, the listing
filter and statistics value objects, and the validation rules every storage
backend applies before touching its store.

Records serialize to the camelCase JSON shape the web client expects
(``jobUrl``, ``interviewNotes``, ``createdAt``...). Inputs accept either
camelCase or snake_case keys.
"""

import copy
import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Mapping, Optional, Sequence

from hireprep.exceptions import ValidationError

STATUSES = ("applied", "interview", "offer", "rejected")
TAGS = ("dream", "target", "backup")

DEFAULT_STATUS = "applied"
DEFAULT_TAG = "target"

# Filter value meaning "do not filter on this field"
FILTER_ALL = "all"

DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0

# Wire name -> attribute name for fields a client may set
APPLICATION_FIELDS = {
    "company": "company",
    "role": "role",
    "status": "status",
    "tag": "tag",
    "jobUrl": "job_url",
    "job_url": "job_url",
    "notes": "notes",
}


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


def format_timestamp(value: datetime) -> str:
    """ISO-8601 with fixed microsecond precision so strings sort chronologically."""
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def round_half_up(value: float, places: int = 0) -> float:
    """Round half away from zero (Python's round() is banker's rounding)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass
class Application:
    """A tracked job application."""

    id: str
    company: str
    role: str
    status: str = DEFAULT_STATUS
    tag: str = DEFAULT_TAG
    job_url: str = ""
    notes: str = ""
    interview_notes: List[Dict[str, Any]] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def copy(self) -> "Application":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "company": self.company,
            "role": self.role,
            "status": self.status,
            "tag": self.tag,
            "jobUrl": self.job_url,
            "notes": self.notes,
            "interviewNotes": copy.deepcopy(self.interview_notes),
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }


@dataclass
class InterviewSession:
    """One practice interview exchange tied to an application."""

    id: str
    application_id: str
    questions: List[Any] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)

    def copy(self) -> "InterviewSession":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "applicationId": self.application_id,
            "questions": copy.deepcopy(self.questions),
            "createdAt": format_timestamp(self.created_at),
        }


@dataclass
class Feedback:
    """Structured evaluation of an interview answer."""

    clarity: int
    relevance: int
    suggestions: List[str]
    overall: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clarity": self.clarity,
            "relevance": self.relevance,
            "suggestions": list(self.suggestions),
            "overall": self.overall,
        }


@dataclass(frozen=True)
class ApplicationFilter:
    """Normalized listing options. Build it with ``build_filter``."""

    status: Optional[str] = None
    tag: Optional[str] = None
    search: Optional[str] = None
    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET

    def matches(self, application: Application) -> bool:
        if self.status and application.status != self.status:
            return False
        if self.tag and application.tag != self.tag:
            return False
        if self.search:
            return matches_search(application.company, self.search) or matches_search(
                application.role, self.search
            )
        return True


@dataclass
class ApplicationPage:
    items: List[Application]
    total: int


@dataclass
class Stats:
    total: int
    interviews: int
    offers: int
    response_rate: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "interviews": self.interviews,
            "offers": self.offers,
            "responseRate": self.response_rate,
        }


def matches_search(value: Optional[str], needle: str) -> bool:
    """Case-insensitive plain substring match."""
    if value is None:
        return False
    return needle.casefold() in value.casefold()


def sort_key(record) -> tuple:
    """Key for newest-first ordering; sort with ``reverse=True``."""
    return (record.created_at, record.id)


# ===== VALIDATION =====


def _normalize_enum(value: Any, allowed: Sequence[str], field_name: str) -> str:
    if not isinstance(value, str) or value.strip().lower() not in allowed:
        raise ValidationError(
            f"Invalid {field_name}: {value!r}",
            [f"{field_name} must be one of: {', '.join(allowed)}"],
        )
    return value.strip().lower()


def _require_text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} is required", [f"{key} must be a non-empty string"])
    return value.strip()


def _optional_text(value: Any, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"Invalid {field_name}", [f"{field_name} must be a string"])
    return value


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def validate_application_input(data: Any) -> Dict[str, Any]:
    """
    Validate fields for a new application.

    Args:
        data: Mapping with company, role and optional status, tag, jobUrl, notes

    Returns:
        Dict keyed by attribute name with defaults applied

    Raises:
        ValidationError: On missing required fields or invalid enum values
    """
    if not isinstance(data, Mapping):
        raise ValidationError("Application data must be an object")

    fields = {
        "company": _require_text(data, "company"),
        "role": _require_text(data, "role"),
        "status": DEFAULT_STATUS,
        "tag": DEFAULT_TAG,
    }

    if data.get("status") is not None:
        fields["status"] = _normalize_enum(data["status"], STATUSES, "status")
    if data.get("tag") is not None:
        fields["tag"] = _normalize_enum(data["tag"], TAGS, "tag")

    fields["job_url"] = _optional_text(_pick(data, "jobUrl", "job_url"), "jobUrl")
    fields["notes"] = _optional_text(data.get("notes"), "notes")
    return fields


def validate_application_patch(data: Any) -> Dict[str, Any]:
    """
    Validate a partial update. Only recognized keys present in ``data`` are
    returned; unknown keys such as ``id`` are ignored.
    """
    if not isinstance(data, Mapping):
        raise ValidationError("Update data must be an object")

    changes: Dict[str, Any] = {}
    for key, value in data.items():
        attr = APPLICATION_FIELDS.get(key)
        if attr is None:
            continue
        if attr in ("company", "role"):
            changes[attr] = _require_text(data, key)
        elif attr == "status":
            changes[attr] = _normalize_enum(value, STATUSES, "status")
        elif attr == "tag":
            changes[attr] = _normalize_enum(value, TAGS, "tag")
        else:
            changes[attr] = _optional_text(value, key)
    return changes


def validate_session_input(application_id: Any, questions: Any) -> List[Any]:
    """
    Validate session input and return a JSON-normalized copy of the questions,
    so every backend stores exactly what it can serialize.
    """
    if not isinstance(application_id, str) or not application_id.strip():
        raise ValidationError("applicationId is required")
    if isinstance(questions, (str, bytes, Mapping)) or not isinstance(questions, Sequence):
        raise ValidationError("questions must be a list")
    try:
        return json.loads(json.dumps(list(questions)))
    except (TypeError, ValueError):
        raise ValidationError("questions must contain only JSON values")


def _filter_value(value: Any, allowed: Sequence[str], field_name: str) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, str) and value.strip().lower() == FILTER_ALL:
        return None
    return _normalize_enum(value, allowed, field_name)


def _as_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field_name}", [f"{field_name} must be an integer"])
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}", [f"{field_name} must be an integer"])


def build_filter(
    status: Any = None,
    tag: Any = None,
    search: Any = None,
    limit: Any = None,
    offset: Any = None,
) -> ApplicationFilter:
    """
    Validate listing options and return a normalized filter.

    ``"All"`` (any case) or an empty value disables the status/tag filter.
    """
    status = _filter_value(status, STATUSES, "status")
    tag = _filter_value(tag, TAGS, "tag")

    if search is not None and not isinstance(search, str):
        raise ValidationError("Invalid search", ["search must be a string"])
    search = search.strip() if search else None

    limit = DEFAULT_LIMIT if limit is None else _as_int(limit, "limit")
    if limit < 1:
        raise ValidationError("Invalid limit", ["limit must be a positive integer"])

    offset = DEFAULT_OFFSET if offset is None else _as_int(offset, "offset")
    if offset < 0:
        raise ValidationError("Invalid offset", ["offset must be a non-negative integer"])

    return ApplicationFilter(status=status, tag=tag, search=search or None, limit=limit, offset=offset)


def coerce_filter(options: Any) -> ApplicationFilter:
    """Accept an ApplicationFilter, a mapping of options, or None."""
    if options is None:
        return build_filter()
    if isinstance(options, ApplicationFilter):
        return build_filter(
            options.status, options.tag, options.search, options.limit, options.offset
        )
    if isinstance(options, Mapping):
        return build_filter(
            options.get("status"),
            options.get("tag"),
            options.get("search"),
            options.get("limit"),
            options.get("offset"),
        )
    raise ValidationError("Filter must be an object")


# ===== SESSION SUMMARIES =====


def _average_score(questions: List[Any], key: str) -> Optional[float]:
    scores = []
    for item in questions:
        if not isinstance(item, Mapping):
            continue
        feedback = item.get("feedback")
        if not isinstance(feedback, Mapping):
            continue
        score = feedback.get(key)
        if isinstance(score, (int, float)) and not isinstance(score, bool):
            scores.append(score)
    if not scores:
        return None
    return round_half_up(sum(scores) / len(scores), 1)


def build_session_summary(session: InterviewSession) -> Dict[str, Any]:
    """Compact record appended to an application's interviewNotes."""
    return {
        "sessionId": session.id,
        "questionCount": len(session.questions),
        "averageClarity": _average_score(session.questions, "clarity"),
        "averageRelevance": _average_score(session.questions, "relevance"),
        "createdAt": format_timestamp(session.created_at),
    }


def compute_response_rate(interviews: int, offers: int, applied: int) -> int:
    """round_half_up((interviews + offers) / applied * 100), or 0 with nothing applied."""
    if applied <= 0:
        return 0
    # Integer form of floor(x + 0.5) avoids float error at exact halves
    return (200 * (interviews + offers) + applied) // (2 * applied)
