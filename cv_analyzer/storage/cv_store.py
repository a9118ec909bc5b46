from __future__ import annotations

import logging
import os
import sqlite3
import threading
from datetime import datetime, timezone
from typing import Protocol

from cv_analyzer.schemas.cv import CVRecord

logger = logging.getLogger(__name__)


class CVStoreError(RuntimeError):
    pass


class CVStore(Protocol):
    def create(self, user_id: str, filename: str, content: str) -> CVRecord:
        """Persist a CV and return the stored record with its id."""

    def get(self, cv_id: int) -> CVRecord | None:
        ...

    def list_by_user(self, user_id: str) -> list[CVRecord]:
        ...

    def delete(self, cv_id: int) -> bool:
        ...

    def count(self) -> int:
        ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


_COLUMNS = "id, user_id, filename, content, created_at, updated_at"


def _row_to_record(row: tuple) -> CVRecord:
    return CVRecord(
        id=row[0],
        user_id=row[1],
        filename=row[2],
        content=row[3],
        created_at=datetime.fromisoformat(row[4]),
        updated_at=datetime.fromisoformat(row[5]),
    )


class SqliteCVStore:
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _connection(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn

        directory = os.path.dirname(self._db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        conn = sqlite3.connect(
            self._db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA busy_timeout=5000;")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS cvs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                filename TEXT NOT NULL,
                content TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_cvs_user_id ON cvs (user_id);")
        self._conn = conn
        return conn

    def init_db(self) -> None:
        try:
            with self._lock:
                self._connection()
        except sqlite3.Error as exc:
            raise CVStoreError(f"Unable to open CV store at '{self._db_path}': {exc}") from exc

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def create(self, user_id: str, filename: str, content: str) -> CVRecord:
        now = _utc_now().isoformat()
        try:
            with self._lock:
                conn = self._connection()
                cur = conn.execute(
                    """
                    INSERT INTO cvs (user_id, filename, content, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (user_id, filename, content, now, now),
                )
                cv_id = cur.lastrowid
                row = conn.execute(f"SELECT {_COLUMNS} FROM cvs WHERE id = ?", (cv_id,)).fetchone()
        except sqlite3.Error as exc:
            raise CVStoreError(f"Failed to store CV: {exc}") from exc

        if row is None:
            raise CVStoreError("Failed to store CV: record not found after insert.")
        logger.info("cv_stored cv_id=%s user_id=%s", cv_id, user_id)
        return _row_to_record(row)

    def get(self, cv_id: int) -> CVRecord | None:
        try:
            with self._lock:
                row = self._connection().execute(
                    f"SELECT {_COLUMNS} FROM cvs WHERE id = ?", (cv_id,)
                ).fetchone()
        except sqlite3.Error as exc:
            raise CVStoreError(f"Failed to load CV {cv_id}: {exc}") from exc
        return _row_to_record(row) if row else None

    def list_by_user(self, user_id: str) -> list[CVRecord]:
        try:
            with self._lock:
                rows = self._connection().execute(
                    f"SELECT {_COLUMNS} FROM cvs WHERE user_id = ? ORDER BY id DESC", (user_id,)
                ).fetchall()
        except sqlite3.Error as exc:
            raise CVStoreError(f"Failed to list CVs: {exc}") from exc
        return [_row_to_record(row) for row in rows]

    def delete(self, cv_id: int) -> bool:
        try:
            with self._lock:
                cur = self._connection().execute("DELETE FROM cvs WHERE id = ?", (cv_id,))
        except sqlite3.Error as exc:
            raise CVStoreError(f"Failed to delete CV {cv_id}: {exc}") from exc
        return cur.rowcount > 0

    def count(self) -> int:
        try:
            with self._lock:
                row = self._connection().execute("SELECT COUNT(*) FROM cvs").fetchone()
        except sqlite3.Error as exc:
            raise CVStoreError(f"Failed to count CVs: {exc}") from exc
        return int(row[0]) if row else 0
