# src/tasksync/server/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .object_ids import new_object_id

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StoredTask:
    id: str
    text: str
    is_complete: bool
    created_at: float
    updated_at: float

    def to_wire(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "isComplete": self.is_complete}


class TaskStore:
    """
    SQLite task store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Ids are object ids (see object_ids.py) stored as TEXT; their string order
    is their creation order, which is what pagination sorts on.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    text TEXT NOT NULL,
                    is_complete INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("is_complete", "INTEGER NOT NULL DEFAULT 0")
            add_col("created_at", "REAL NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> StoredTask:
        return StoredTask(
            id=str(row["id"]),
            text=str(row["text"] or ""),
            is_complete=bool(row["is_complete"]),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def add_task(self, text: str) -> StoredTask:
        now = time.time()
        task = StoredTask(
            id=new_object_id(now),
            text=text,
            is_complete=False,
            created_at=now,
            updated_at=now,
        )

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO tasks(id, text, is_complete, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (task.id, task.text, int(task.is_complete), task.created_at, task.updated_at),
            )
            conn.commit()
        finally:
            conn.close()

        logger.debug("Task added id=%s", task.id)
        return task

    def get_task(self, task_id: str) -> StoredTask | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks WHERE id = ?", (task_id,))
            row = cur.fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def list_tasks(self, *, limit: int, max_id: str | None = None) -> list[StoredTask]:
        """
        Newest first (id descending), at most `limit` rows.

        With max_id, only ids <= max_id are returned: the range read used to
        resume a listing at a page boundary.
        """
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            if max_id is None:
                cur.execute(
                    "SELECT * FROM tasks ORDER BY id DESC LIMIT ?",
                    (int(limit),),
                )
            else:
                cur.execute(
                    "SELECT * FROM tasks WHERE id <= ? ORDER BY id DESC LIMIT ?",
                    (max_id, int(limit)),
                )
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def update_task(
        self,
        task_id: str,
        *,
        text: str | None = None,
        is_complete: bool | None = None,
    ) -> bool:
        """
        Set the given fields. Returns False when no task has this id.
        An update with no fields still reports whether the task exists.
        """
        fields: list[str] = []
        params: list[Any] = []

        if text is not None:
            fields.append("text = ?")
            params.append(text)

        if is_complete is not None:
            fields.append("is_complete = ?")
            params.append(int(bool(is_complete)))

        if not fields:
            return self.get_task(task_id) is not None

        fields.append("updated_at = ?")
        params.append(time.time())
        params.append(task_id)

        sql = f"UPDATE tasks SET {', '.join(fields)} WHERE id = ?"

        conn = self._get_conn()
        try:
            cur = conn.execute(sql, params)
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def delete_task(self, task_id: str) -> StoredTask | None:
        """Delete and return the task, or None when it does not exist."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks WHERE id = ?", (task_id,))
            row = cur.fetchone()
            if row is None:
                return None
            cur.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            conn.commit()
            return self._row_to_task(row)
        finally:
            conn.close()
