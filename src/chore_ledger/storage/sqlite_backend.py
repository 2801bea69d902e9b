# src/chore_ledger/storage/sqlite_backend.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from datetime import date
from pathlib import Path

from ..core.models import Member, Priority, Snapshot, Task, TaskStatus
from ..errors import StorageUnavailable

logger = logging.getLogger(__name__)


class SqliteSnapshotBackend:
    """
    SQLite snapshot backend.

    Two tables: tasks (keyed by id) and members (keyed by name).
    save() rewrites both tables inside one transaction, so a snapshot is
    either fully persisted or not at all.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "chores.sqlite3", *, timeout: float = 5.0) -> None:
        self._db_path = Path(db_path)
        self._timeout = float(timeout)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._ensure_schema()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"cannot open {self._db_path}: {e}") from e
        logger.info("SqliteSnapshotBackend ready db=%s", self._db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=self._timeout)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    assigned_to TEXT NOT NULL,
                    due_date TEXT NOT NULL,
                    priority TEXT NOT NULL DEFAULT 'Medium',
                    status TEXT NOT NULL DEFAULT 'Pending',
                    points INTEGER NOT NULL,
                    description TEXT,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL,
                    completed_at REAL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS members (
                    name TEXT PRIMARY KEY,
                    points INTEGER NOT NULL DEFAULT 0,
                    avatar TEXT NOT NULL DEFAULT ''
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}
            if "completed_at" not in cols:
                cur.execute("ALTER TABLE tasks ADD COLUMN completed_at REAL")
                logger.info("SqliteSnapshotBackend migration: added column completed_at")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_status_due ON tasks(status, due_date)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_assignee ON tasks(assigned_to)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            title=str(row["title"]),
            assigned_to=str(row["assigned_to"]),
            due_date=date.fromisoformat(row["due_date"]),
            points=int(row["points"]),
            priority=Priority(row["priority"] or Priority.MEDIUM.value),
            status=TaskStatus(row["status"] or TaskStatus.PENDING.value),
            description=row["description"],
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
            completed_at=float(row["completed_at"]) if row["completed_at"] is not None else None,
        )

    @staticmethod
    def _row_to_member(row: sqlite3.Row) -> Member:
        return Member(name=str(row["name"]), points=int(row["points"]), avatar=str(row["avatar"] or ""))

    # ---- public API ----

    def load(self) -> Snapshot:
        try:
            conn = self._get_conn()
            try:
                cur = conn.cursor()
                cur.execute("SELECT * FROM tasks")
                tasks = {t.id: t for t in map(self._row_to_task, cur.fetchall())}
                cur.execute("SELECT * FROM members ORDER BY rowid ASC")
                members = {m.name: m for m in map(self._row_to_member, cur.fetchall())}
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"load failed db={self._db_path}: {e}") from e
        except (TypeError, ValueError) as e:
            raise StorageUnavailable(f"corrupt row in db={self._db_path}: {e}") from e

        logger.debug("Snapshot loaded tasks=%d members=%d", len(tasks), len(members))
        return Snapshot(tasks=tasks, members=members)

    def save(self, snapshot: Snapshot) -> None:
        try:
            conn = self._get_conn()
            try:
                with conn:
                    conn.execute("DELETE FROM tasks")
                    conn.execute("DELETE FROM members")
                    conn.executemany(
                        """
                        INSERT INTO tasks(
                            id, title, assigned_to, due_date, priority, status,
                            points, description, created_at, updated_at, completed_at
                        )
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        [
                            (
                                t.id,
                                t.title,
                                t.assigned_to,
                                t.due_date.isoformat(),
                                t.priority.value,
                                t.status.value,
                                t.points,
                                t.description,
                                t.created_at,
                                t.updated_at,
                                t.completed_at,
                            )
                            for t in snapshot.tasks.values()
                        ],
                    )
                    conn.executemany(
                        "INSERT INTO members(name, points, avatar) VALUES (?, ?, ?)",
                        [(m.name, m.points, m.avatar) for m in snapshot.members.values()],
                    )
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"save failed db={self._db_path}: {e}") from e

        logger.debug(
            "Snapshot saved tasks=%d members=%d", len(snapshot.tasks), len(snapshot.members)
        )
