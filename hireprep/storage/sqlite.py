"""
SQLite Storage - Durable backend for HirePrep

Stores applications and interview sessions in a SQLite file. JSON columns
hold interview notes and session questions.
"""

import json
import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Optional

from hireprep.database import Database
from hireprep.models import (
    Application,
    ApplicationFilter,
    ApplicationPage,
    InterviewSession,
    format_timestamp,
    parse_timestamp,
)

from .base import Storage

# Attribute name -> column name for patchable fields
UPDATABLE_COLUMNS = {
    "company": "company",
    "role": "role",
    "status": "status",
    "tag": "tag",
    "job_url": "job_url",
    "notes": "notes",
}

ORDER_BY = "ORDER BY created_at DESC, id DESC"

# Largest value SQLite binds as an INTEGER parameter
SQLITE_MAX_INT = 2**63 - 1


def _row_to_application(row: sqlite3.Row) -> Application:
    return Application(
        id=row["id"],
        company=row["company"],
        role=row["role"],
        status=row["status"],
        tag=row["tag"],
        job_url=row["job_url"],
        notes=row["notes"],
        interview_notes=json.loads(row["interview_notes"] or "[]"),
        created_at=parse_timestamp(row["created_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
    )


def _row_to_session(row: sqlite3.Row) -> InterviewSession:
    return InterviewSession(
        id=row["id"],
        application_id=row["application_id"],
        questions=json.loads(row["questions"] or "[]"),
        created_at=parse_timestamp(row["created_at"]),
    )


class SQLiteStorage(Storage):
    """Repository backed by a SQLite database file."""

    def __init__(self, database: Database, clock=None):
        """
        Args:
            database: Connection holder; connects lazily on first operation
            clock: Optional callable returning the current UTC datetime
        """
        super().__init__(clock)
        self.database = database

    @property
    def backend_name(self) -> str:
        return "sqlite"

    def ping(self) -> None:
        self.database.ping()

    def close(self) -> None:
        self.database.close()

    def _get_application(self, application_id: str) -> Optional[Application]:
        with self.database.transaction() as conn:
            row = conn.execute(
                "SELECT * FROM applications WHERE id = ?", (application_id,)
            ).fetchone()
        return _row_to_application(row) if row else None

    def _query_applications(self, options: ApplicationFilter) -> ApplicationPage:
        clauses = []
        params: List[Any] = []

        if options.status:
            clauses.append("status = ?")
            params.append(options.status)
        if options.tag:
            clauses.append("tag = ?")
            params.append(options.tag)
        if options.search:
            clauses.append("(contains_ci(company, ?) OR contains_ci(role, ?))")
            params.extend([options.search, options.search])

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with self.database.transaction() as conn:
            total = conn.execute(f"SELECT COUNT(*) FROM applications {where}", params).fetchone()[0]
            if options.offset > SQLITE_MAX_INT:
                return ApplicationPage(items=[], total=total)
            rows = conn.execute(
                f"SELECT * FROM applications {where} {ORDER_BY} LIMIT ? OFFSET ?",
                params + [min(options.limit, SQLITE_MAX_INT), options.offset],
            ).fetchall()

        return ApplicationPage(items=[_row_to_application(row) for row in rows], total=total)

    def _insert_application(self, application: Application) -> None:
        with self.database.transaction() as conn:
            conn.execute(
                """
                INSERT INTO applications (
                    id, company, role, status, tag, job_url, notes,
                    interview_notes, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    application.id,
                    application.company,
                    application.role,
                    application.status,
                    application.tag,
                    application.job_url,
                    application.notes,
                    json.dumps(application.interview_notes),
                    format_timestamp(application.created_at),
                    format_timestamp(application.updated_at),
                ),
            )

    def _update_application(
        self, application_id: str, changes: Dict[str, Any], now: datetime
    ) -> Optional[Application]:
        # Build update query dynamically
        updates = []
        params: List[Any] = []
        for attr, value in changes.items():
            updates.append(f"{UPDATABLE_COLUMNS[attr]} = ?")
            params.append(value)

        updates.append("updated_at = ?")
        params.append(format_timestamp(now))
        params.append(application_id)

        with self.database.transaction() as conn:
            cursor = conn.execute(
                f"UPDATE applications SET {', '.join(updates)} WHERE id = ?", params
            )
            if cursor.rowcount == 0:
                return None
            row = conn.execute(
                "SELECT * FROM applications WHERE id = ?", (application_id,)
            ).fetchone()
        return _row_to_application(row)

    def _delete_application(self, application_id: str) -> bool:
        with self.database.transaction() as conn:
            cursor = conn.execute("DELETE FROM applications WHERE id = ?", (application_id,))
            if cursor.rowcount == 0:
                return False
            conn.execute(
                "DELETE FROM interview_sessions WHERE application_id = ?", (application_id,)
            )
        return True

    def _insert_session(
        self, session: InterviewSession, summary: Dict[str, Any], now: datetime
    ) -> bool:
        with self.database.transaction() as conn:
            conn.execute(
                """
                INSERT INTO interview_sessions (id, application_id, questions, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (
                    session.id,
                    session.application_id,
                    json.dumps(session.questions),
                    format_timestamp(session.created_at),
                ),
            )

            row = conn.execute(
                "SELECT interview_notes FROM applications WHERE id = ?",
                (session.application_id,),
            ).fetchone()
            if row is None:
                return False

            notes = json.loads(row["interview_notes"] or "[]")
            notes.append(summary)
            conn.execute(
                "UPDATE applications SET interview_notes = ?, updated_at = ? WHERE id = ?",
                (json.dumps(notes), format_timestamp(now), session.application_id),
            )
        return True

    def _sessions_for(self, application_id: str) -> List[InterviewSession]:
        with self.database.transaction() as conn:
            rows = conn.execute(
                f"SELECT * FROM interview_sessions WHERE application_id = ? {ORDER_BY}",
                (application_id,),
            ).fetchall()
        return [_row_to_session(row) for row in rows]

    def _count_by_status(self) -> Dict[str, int]:
        with self.database.transaction() as conn:
            rows = conn.execute(
                "SELECT status, COUNT(*) AS count FROM applications GROUP BY status"
            ).fetchall()
        return {row["status"]: row["count"] for row in rows}
