"""
In-Memory Storage - Transient backend for development and tests

Keeps records in dictionaries guarded by a single lock. Behaves exactly
like the SQLite backend except that nothing survives a restart.
"""

import copy
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

from hireprep.models import (
    Application,
    ApplicationFilter,
    ApplicationPage,
    InterviewSession,
    sort_key,
)

from .base import Storage


class InMemoryStorage(Storage):
    """Very small in-memory store to keep the API usable without a database."""

    def __init__(self, clock=None):
        super().__init__(clock)
        self._applications: Dict[str, Application] = {}
        self._sessions: Dict[str, InterviewSession] = {}
        self._lock = threading.Lock()

    @property
    def backend_name(self) -> str:
        return "memory"

    def ping(self) -> None:
        return None

    def close(self) -> None:
        with self._lock:
            self._applications.clear()
            self._sessions.clear()

    def _get_application(self, application_id: str) -> Optional[Application]:
        with self._lock:
            application = self._applications.get(application_id)
            return application.copy() if application else None

    def _query_applications(self, options: ApplicationFilter) -> ApplicationPage:
        with self._lock:
            matches = [app for app in self._applications.values() if options.matches(app)]
            matches.sort(key=sort_key, reverse=True)
            page = matches[options.offset : options.offset + options.limit]
            return ApplicationPage(items=[app.copy() for app in page], total=len(matches))

    def _insert_application(self, application: Application) -> None:
        with self._lock:
            self._applications[application.id] = application.copy()

    def _update_application(
        self, application_id: str, changes: Dict[str, Any], now: datetime
    ) -> Optional[Application]:
        with self._lock:
            application = self._applications.get(application_id)
            if application is None:
                return None
            for attr, value in changes.items():
                setattr(application, attr, value)
            application.updated_at = now
            return application.copy()

    def _delete_application(self, application_id: str) -> bool:
        with self._lock:
            if self._applications.pop(application_id, None) is None:
                return False
            orphaned = [
                session_id
                for session_id, session in self._sessions.items()
                if session.application_id == application_id
            ]
            for session_id in orphaned:
                del self._sessions[session_id]
            return True

    def _insert_session(
        self, session: InterviewSession, summary: Dict[str, Any], now: datetime
    ) -> bool:
        with self._lock:
            self._sessions[session.id] = session.copy()
            application = self._applications.get(session.application_id)
            if application is None:
                return False
            application.interview_notes.append(copy.deepcopy(summary))
            application.updated_at = now
            return True

    def _sessions_for(self, application_id: str) -> List[InterviewSession]:
        with self._lock:
            sessions = [s for s in self._sessions.values() if s.application_id == application_id]
            sessions.sort(key=sort_key, reverse=True)
            return [s.copy() for s in sessions]

    def _count_by_status(self) -> Dict[str, int]:
        with self._lock:
            counts: Dict[str, int] = {}
            for application in self._applications.values():
                counts[application.status] = counts.get(application.status, 0) + 1
            return counts
