"""Goal storage backends."""

import logging
import sqlite3
import threading
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from .models import ACTIVE, INACTIVE, Goal

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class GoalStorage(ABC):
    """Storage contract for commitment goals.

    At most one goal is active at a time. Deactivated goals are kept as
    history and never reactivated.
    """

    @abstractmethod
    def create_goal(self, goal_days: int) -> Goal:
        """Deactivate any active goal and store a new active one."""

    @abstractmethod
    def get_current_goal(self) -> Optional[Goal]:
        """Return the active goal, or None."""

    @abstractmethod
    def check_in_goal(self, goal_id: str) -> Optional[Goal]:
        """
        Record one day of progress on an active goal.

        Returns None when the goal does not exist or is inactive. A goal that
        is already complete is returned unchanged.
        """

    @abstractmethod
    def reset_current_goal(self) -> None:
        """Deactivate the active goal, if there is one."""

    @abstractmethod
    def get_goal(self, goal_id: str) -> Optional[Goal]:
        """Return any goal by id, active or not."""

    @abstractmethod
    def list_goals(self) -> list[Goal]:
        """Return every goal, newest first."""


class MemoryGoalStorage(GoalStorage):
    """Goals held in a dict for the lifetime of the process."""

    def __init__(self):
        self._goals: dict[str, Goal] = {}
        self._lock = threading.Lock()

    def create_goal(self, goal_days: int) -> Goal:
        with self._lock:
            for goal_id, goal in self._goals.items():
                if goal.active:
                    self._goals[goal_id] = goal.model_copy(update={"is_active": INACTIVE})
                    logger.info(f"Deactivated goal {goal_id}")

            goal = Goal(
                id=str(uuid.uuid4()),
                goal_days=goal_days,
                completed_days=0,
                start_date=_now(),
                last_check_in=None,
                is_active=ACTIVE,
            )
            self._goals[goal.id] = goal

        logger.info(f"Created {goal_days}-day goal {goal.id}")
        return goal

    def get_current_goal(self) -> Optional[Goal]:
        with self._lock:
            return next((g for g in self._goals.values() if g.active), None)

    def check_in_goal(self, goal_id: str) -> Optional[Goal]:
        with self._lock:
            goal = self._goals.get(goal_id)
            if goal is None or not goal.active:
                return None

            if goal.completed:
                return goal

            updated = goal.model_copy(
                update={
                    "completed_days": goal.completed_days + 1,
                    "last_check_in": _now(),
                }
            )
            self._goals[goal_id] = updated

        logger.info(f"Check-in on {goal_id}: {updated.completed_days}/{updated.goal_days}")
        return updated

    def reset_current_goal(self) -> None:
        with self._lock:
            for goal_id, goal in self._goals.items():
                if goal.active:
                    self._goals[goal_id] = goal.model_copy(update={"is_active": INACTIVE})
                    logger.info(f"Reset goal {goal_id}")
                    break

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        with self._lock:
            return self._goals.get(goal_id)

    def list_goals(self) -> list[Goal]:
        with self._lock:
            return list(reversed(self._goals.values()))


class SqliteGoalStorage(GoalStorage):
    """Goals persisted in a SQLite table keyed by id."""

    def __init__(self, db_path: str = "data/goals.db"):
        """Initialize database."""
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        """Create database tables if they don't exist."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS goals (
                    id TEXT PRIMARY KEY,
                    goal_days INTEGER NOT NULL,
                    completed_days INTEGER NOT NULL DEFAULT 0,
                    start_date TEXT NOT NULL,
                    last_check_in TEXT,
                    is_active TEXT NOT NULL DEFAULT 'true'
                )
            """)
            # Only one row may carry is_active = 'true'
            conn.execute("""
                CREATE UNIQUE INDEX IF NOT EXISTS idx_goals_single_active
                ON goals (is_active) WHERE is_active = 'true'
            """)
            conn.commit()
        logger.info(f"Database initialized at {self.db_path}")

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    @staticmethod
    def _row_to_goal(row: sqlite3.Row) -> Goal:
        return Goal(
            id=row["id"],
            goal_days=row["goal_days"],
            completed_days=row["completed_days"],
            start_date=datetime.fromisoformat(row["start_date"]),
            last_check_in=datetime.fromisoformat(row["last_check_in"])
            if row["last_check_in"]
            else None,
            is_active=row["is_active"],
        )

    def create_goal(self, goal_days: int) -> Goal:
        goal = Goal(
            id=str(uuid.uuid4()),
            goal_days=goal_days,
            completed_days=0,
            start_date=_now(),
            last_check_in=None,
            is_active=ACTIVE,
        )

        with self._connect() as conn:
            conn.execute(
                "UPDATE goals SET is_active = ? WHERE is_active = ?",
                (INACTIVE, ACTIVE),
            )
            conn.execute(
                """
                INSERT INTO goals (id, goal_days, completed_days, start_date, last_check_in, is_active)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    goal.id,
                    goal.goal_days,
                    goal.completed_days,
                    goal.start_date.isoformat(),
                    None,
                    goal.is_active,
                ),
            )
            conn.commit()

        logger.info(f"Created {goal_days}-day goal {goal.id}")
        return goal

    def get_current_goal(self) -> Optional[Goal]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM goals WHERE is_active = ? LIMIT 1", (ACTIVE,)
            ).fetchone()

            if not row:
                return None

            return self._row_to_goal(row)

    def check_in_goal(self, goal_id: str) -> Optional[Goal]:
        with self._connect() as conn:
            # Increment in place so concurrent check-ins cannot overwrite each other
            cursor = conn.execute(
                """
                UPDATE goals
                SET completed_days = completed_days + 1, last_check_in = ?
                WHERE id = ? AND is_active = ? AND completed_days < goal_days
                """,
                (_now().isoformat(), goal_id, ACTIVE),
            )
            row = conn.execute("SELECT * FROM goals WHERE id = ?", (goal_id,)).fetchone()

        if not row:
            return None

        updated = self._row_to_goal(row)
        if not updated.active:
            return None

        if cursor.rowcount == 0:
            return updated

        logger.info(f"Check-in on {goal_id}: {updated.completed_days}/{updated.goal_days}")
        return updated

    def reset_current_goal(self) -> None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id FROM goals WHERE is_active = ? LIMIT 1", (ACTIVE,)
            ).fetchone()
            if not row:
                return

            conn.execute(
                "UPDATE goals SET is_active = ? WHERE id = ?", (INACTIVE, row["id"])
            )
            conn.commit()
        logger.info(f"Reset goal {row['id']}")

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM goals WHERE id = ?", (goal_id,)).fetchone()
            return self._row_to_goal(row) if row else None

    def list_goals(self) -> list[Goal]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM goals ORDER BY start_date DESC, rowid DESC"
            ).fetchall()
            return [self._row_to_goal(row) for row in rows]


def create_storage(backend: str = "memory", database_path: str = "data/goals.db") -> GoalStorage:
    """Build the configured storage backend."""
    if backend == "memory":
        return MemoryGoalStorage()
    if backend == "sqlite":
        return SqliteGoalStorage(database_path)
    raise ValueError(f"Unknown storage backend: {backend}")
