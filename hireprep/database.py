"""
Database - SQLite connection management for HirePrep

The connection is established lazily on first use, cached for the life of
the process, dropped after a store failure so the next call reconnects,
and closed explicitly on teardown.
"""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from hireprep.exceptions import StorageUnavailableError
from hireprep.logging_config import get_logger

logger = get_logger(__name__)

NOT_CONFIGURED_MESSAGE = (
    "Database not configured or unreachable. "
    "Set storage.database_path in config.yaml or DATABASE_PATH in your .env file."
)

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS applications (
        id TEXT PRIMARY KEY,
        company TEXT NOT NULL,
        role TEXT NOT NULL,
        status TEXT NOT NULL DEFAULT 'applied'
            CHECK (status IN ('applied', 'interview', 'offer', 'rejected')),
        tag TEXT NOT NULL DEFAULT 'target'
            CHECK (tag IN ('dream', 'target', 'backup')),
        job_url TEXT NOT NULL DEFAULT '',
        notes TEXT NOT NULL DEFAULT '',
        interview_notes TEXT NOT NULL DEFAULT '[]',
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_applications_created ON applications (created_at DESC, id DESC)",
    "CREATE INDEX IF NOT EXISTS idx_applications_status ON applications (status)",
    """
    CREATE TABLE IF NOT EXISTS interview_sessions (
        id TEXT PRIMARY KEY,
        application_id TEXT NOT NULL,
        questions TEXT NOT NULL DEFAULT '[]',
        created_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_sessions_application ON interview_sessions (application_id)",
]


def _contains_ci(value: Optional[str], needle: Optional[str]) -> int:
    """SQL function: case-insensitive substring test using Python casefolding."""
    if value is None or needle is None:
        return 0
    return int(needle.casefold() in value.casefold())


class Database:
    """Lazily opened, cached SQLite connection."""

    def __init__(self, path: Optional[Union[str, Path]], timeout: float = 30.0):
        """
        Args:
            path: Database file path, or None when no database is configured
            timeout: Seconds to wait on a locked database before failing
        """
        self.path = str(path) if path else None
        self.timeout = timeout
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    @property
    def is_configured(self) -> bool:
        return self.path is not None

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    def _connect(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn

        if not self.path:
            raise StorageUnavailableError(NOT_CONFIGURED_MESSAGE)

        conn = None
        try:
            conn = sqlite3.connect(self.path, timeout=self.timeout, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            if self.path != ":memory:":
                # WAL mode for better concurrency
                conn.execute("PRAGMA journal_mode=WAL")
            conn.create_function("contains_ci", 2, _contains_ci, deterministic=True)
            init_schema(conn)
        except sqlite3.Error as e:
            if conn is not None:
                conn.close()
            logger.error(f"Failed to open database at {self.path}: {e}")
            raise StorageUnavailableError(NOT_CONFIGURED_MESSAGE, cause=e)

        logger.info(f"Connected to SQLite database: {self.path}")
        self._conn = conn
        return conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run a unit of work on the shared connection.

        Commits on success and rolls back on error. sqlite3 errors reset the
        cached connection and surface as StorageUnavailableError.
        """
        with self._lock:
            conn = self._connect()
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                logger.error(f"Database error, resetting connection: {e}")
                self._reset()
                raise StorageUnavailableError(f"Database operation failed: {e}", cause=e)
            except Exception:
                conn.rollback()
                raise

    def ping(self) -> None:
        with self.transaction() as conn:
            conn.execute("SELECT 1").fetchone()

    def _reset(self) -> None:
        conn, self._conn = self._conn, None
        if conn is None:
            return
        try:
            conn.rollback()
            conn.close()
        except sqlite3.Error as e:
            logger.warning(f"Error while closing broken connection: {e}")

    def close(self) -> None:
        """Close the cached connection; the next call reconnects."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                logger.info("Database connection closed")


def init_schema(conn: sqlite3.Connection) -> None:
    """
    Create tables and indexes if they don't exist, then run migrations.

    Args:
        conn: SQLite connection
    """
    for statement in SCHEMA:
        conn.execute(statement)
    run_migrations(conn)
    conn.commit()


def run_migrations(conn: sqlite3.Connection) -> None:
    """
    Add columns introduced after the first schema version.

    Uses PRAGMA table_info() to check for missing columns and adds them
    with ALTER TABLE.
    """
    columns = {row[1] for row in conn.execute("PRAGMA table_info(applications)").fetchall()}

    if "interview_notes" not in columns:
        logger.info("Migrating database: adding 'interview_notes' column to applications...")
        conn.execute("ALTER TABLE applications ADD COLUMN interview_notes TEXT NOT NULL DEFAULT '[]'")

    if "job_url" not in columns:
        logger.info("Migrating database: adding 'job_url' column to applications...")
        conn.execute("ALTER TABLE applications ADD COLUMN job_url TEXT NOT NULL DEFAULT ''")
