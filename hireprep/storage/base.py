"""
Base Storage - Repository interface for applications and interview sessions

Validation, id/timestamp assignment and statistics live here so every
backend behaves identically. Backends implement only the primitive
operations (the underscore-prefixed abstract methods) against their store.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from hireprep.exceptions import ValidationError
from hireprep.logging_config import get_logger
from hireprep.models import (
    Application,
    ApplicationFilter,
    ApplicationPage,
    InterviewSession,
    Stats,
    build_session_summary,
    coerce_filter,
    compute_response_rate,
    new_id,
    utcnow,
    validate_application_input,
    validate_application_patch,
    validate_session_input,
)

logger = get_logger(__name__)

FILTER_KEYS = ("status", "tag", "search", "limit", "offset")


class Storage(ABC):
    """
    Abstract repository over Applications and InterviewSessions.

    Callers always receive copies of records, never references into the
    store. Bad input raises ValidationError before the store is touched;
    store failures raise StorageUnavailableError.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Args:
            clock: Callable returning the current UTC datetime (injectable for tests)
        """
        self._clock = clock or utcnow

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Short backend identifier, e.g. 'sqlite' or 'memory'."""

    # ===== APPLICATIONS =====

    def get_application(self, application_id: str) -> Optional[Application]:
        """Return the application, or None when the id does not exist."""
        if not application_id or not isinstance(application_id, str):
            return None
        return self._get_application(application_id)

    def list_applications(self, options: Any = None, **filters: Any) -> ApplicationPage:
        """
        List applications newest first.

        Args:
            options: ApplicationFilter or mapping with status, tag, search,
                limit, offset
            **filters: The same keys as keyword arguments; they override
                the matching keys in ``options``

        Returns:
            ApplicationPage with at most ``limit`` items and the total number
            of matching records before pagination
        """
        if filters:
            unknown = sorted(set(filters) - set(FILTER_KEYS))
            if unknown:
                raise ValidationError(
                    "Invalid filter", [f"unknown filter: {key}" for key in unknown]
                )
            options = {**asdict(coerce_filter(options)), **filters}
        return self._query_applications(coerce_filter(options))

    def create_application(self, data: Mapping[str, Any]) -> Application:
        """
        Validate and persist a new application.

        Raises:
            ValidationError: If company/role are missing or enums are invalid
        """
        fields = validate_application_input(data)
        now = self._clock()
        application = Application(
            id=new_id(),
            interview_notes=[],
            created_at=now,
            updated_at=now,
            **fields,
        )
        self._insert_application(application)
        logger.info(
            f"Created application: {application.role} at {application.company} (id: {application.id})"
        )
        return application.copy()

    def update_application(
        self, application_id: str, fields: Mapping[str, Any]
    ) -> Optional[Application]:
        """
        Apply a partial update. ``updated_at`` always refreshes, even when no
        value changes.

        Returns:
            The updated application, or None when the id does not exist
        """
        changes = validate_application_patch(fields)
        if not application_id or not isinstance(application_id, str):
            return None
        updated = self._update_application(application_id, changes, self._clock())
        if updated is not None:
            logger.debug(f"Updated application {application_id}: {sorted(changes)}")
        return updated

    def delete_application(self, application_id: str) -> bool:
        """Delete an application and every session referencing it."""
        if not application_id or not isinstance(application_id, str):
            return False
        deleted = self._delete_application(application_id)
        if deleted:
            logger.info(f"Deleted application {application_id} and its sessions")
        return deleted

    # ===== SESSIONS =====

    def create_session(self, application_id: str, questions: Any) -> InterviewSession:
        """
        Persist a practice session.

        The application does not have to exist. When it does, a summary of
        the session is appended to its interview notes in the same operation.

        Raises:
            ValidationError: If application_id is empty or questions is not a list
        """
        questions = validate_session_input(application_id, questions)
        now = self._clock()
        session = InterviewSession(
            id=new_id(),
            application_id=application_id,
            questions=questions,
            created_at=now,
        )
        attached = self._insert_session(session, build_session_summary(session), now)
        logger.info(
            f"Created interview session {session.id} with {len(questions)} questions "
            f"for application {application_id}" + ("" if attached else " (application not found)")
        )
        return session.copy()

    def list_sessions_by_application(self, application_id: str) -> List[InterviewSession]:
        """Sessions for an application, newest first. Empty when there are none."""
        if not application_id or not isinstance(application_id, str):
            return []
        return self._sessions_for(application_id)

    # ===== STATISTICS =====

    def get_stats(self) -> Stats:
        """
        Aggregate counts over all applications.

        response_rate = round((interviews + offers) / applied * 100), rounding
        halves up, or 0 when nothing is in the 'applied' status.
        """
        counts = self._count_by_status()
        interviews = counts.get("interview", 0)
        offers = counts.get("offer", 0)
        applied = counts.get("applied", 0)
        return Stats(
            total=sum(counts.values()),
            interviews=interviews,
            offers=offers,
            response_rate=compute_response_rate(interviews, offers, applied),
        )

    # ===== LIFECYCLE =====

    @abstractmethod
    def ping(self) -> None:
        """Raise StorageUnavailableError if the store cannot be reached."""

    @abstractmethod
    def close(self) -> None:
        """Release backend resources."""

    # ===== BACKEND PRIMITIVES =====

    @abstractmethod
    def _get_application(self, application_id: str) -> Optional[Application]:
        pass

    @abstractmethod
    def _query_applications(self, options: ApplicationFilter) -> ApplicationPage:
        """Filter, order by (created_at, id) descending, then paginate."""

    @abstractmethod
    def _insert_application(self, application: Application) -> None:
        pass

    @abstractmethod
    def _update_application(
        self, application_id: str, changes: Dict[str, Any], now: datetime
    ) -> Optional[Application]:
        pass

    @abstractmethod
    def _delete_application(self, application_id: str) -> bool:
        """Delete the application and, if it existed, its sessions atomically."""

    @abstractmethod
    def _insert_session(
        self, session: InterviewSession, summary: Dict[str, Any], now: datetime
    ) -> bool:
        """
        Insert the session and append ``summary`` to the application's
        interview notes if it exists. Returns whether the application existed.
        """

    @abstractmethod
    def _sessions_for(self, application_id: str) -> List[InterviewSession]:
        pass

    @abstractmethod
    def _count_by_status(self) -> Dict[str, int]:
        pass
