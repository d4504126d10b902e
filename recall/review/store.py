"""
SQLite Exercise Store.

Provides portable persistence for exercises:
- Schema bootstrap and teardown
- Due-set and full-set queries in review order
- Substring search
- Create (in one transaction), update and delete

Database location: ~/.recall/exercises.db (see Settings.database_path)
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from typing import Protocol

from loguru import logger

from .exercise import Exercise


class StoreError(Exception):
    """Raised when the store cannot read or persist an exercise."""
    pass


class ExerciseRepository(Protocol):
    """What the review loop needs from a store."""

    def get_due(self, today: date | None = None) -> list[Exercise]:
        ...

    def update(self, exercise: Exercise) -> None:
        ...


COLUMNS = (
    "id, created_at, due_at, description, source, reference_answer, "
    "update_interval, consecutive_successful_reviews"
)


def _row_to_exercise(row: sqlite3.Row) -> Exercise:
    return Exercise(
        id=row["id"],
        created_at=date.fromisoformat(row["created_at"]),
        due_at=date.fromisoformat(row["due_at"]),
        description=row["description"],
        source=row["source"],
        reference_answer=row["reference_answer"],
        update_interval=row["update_interval"],
        consecutive_successful_reviews=row["consecutive_successful_reviews"],
    )


class ExerciseStore:
    """
    SQLite-backed persistence for exercises.

    Handles:
    - Exercise content and scheduling state
    - Review ordering (most overdue first)
    """

    DEFAULT_DB_PATH = Path.home() / ".recall" / "exercises.db"

    def __init__(self, db_path: Path | None = None, bootstrap: bool = True):
        """
        Initialize the store.

        Args:
            db_path: Custom database path (defaults to ~/.recall/exercises.db)
            bootstrap: Create the schema if it is missing
        """
        self.db_path = db_path or self.DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn: sqlite3.Connection | None = None
        if bootstrap:
            self.bootstrap_schema()

        logger.info(f"ExerciseStore initialized at {self.db_path}")

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        return self._conn

    # =========================================================================
    # Schema
    # =========================================================================

    def bootstrap_schema(self) -> None:
        """Create the exercises table and its due-date index."""
        cursor = self.conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS exercises (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                description TEXT UNIQUE NOT NULL,
                source TEXT NOT NULL,
                reference_answer TEXT NOT NULL,
                due_at TEXT NOT NULL,
                update_interval INTEGER NOT NULL DEFAULT 0,
                consecutive_successful_reviews INTEGER NOT NULL DEFAULT 0
            )
        """)

        # Index for fast due-date queries
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_exercises_due_at
            ON exercises(due_at)
        """)

        self.conn.commit()

    def drop_schema(self) -> None:
        """Drop the exercises table and everything in it."""
        self.conn.execute("DROP TABLE IF EXISTS exercises")
        self.conn.commit()

    def schema_is_loaded(self) -> bool:
        row = self.conn.execute(
            "SELECT COUNT(*) AS cnt FROM sqlite_master WHERE type = 'table' AND name = 'exercises'"
        ).fetchone()
        return row["cnt"] == 1

    # =========================================================================
    # Queries
    # =========================================================================

    def get_by_id(self, exercise_id: int) -> Exercise | None:
        """
        Get one exercise.

        Args:
            exercise_id: Primary key

        Returns:
            Exercise, or None if it does not exist
        """
        row = self.conn.execute(
            f"SELECT {COLUMNS} FROM exercises WHERE id = ?", (exercise_id,)
        ).fetchone()
        if row is None:
            return None
        return _row_to_exercise(row)

    def get_due(self, today: date | None = None) -> list[Exercise]:
        """
        Get exercises due on or before ``today``.

        Ordered by due date descending, then id descending.

        Args:
            today: Reference date (defaults to the current date)

        Returns:
            List of due exercises
        """
        today = today or date.today()
        rows = self.conn.execute(
            f"""
            SELECT {COLUMNS} FROM exercises
            WHERE due_at <= ?
            ORDER BY due_at DESC, id DESC
        """,
            (today.isoformat(),),
        ).fetchall()

        logger.debug(f"Found {len(rows)} due exercises for {today}")
        return [_row_to_exercise(row) for row in rows]

    def get_all_by_due_date_desc(self) -> list[Exercise]:
        """Get every exercise, latest due date first."""
        rows = self.conn.execute(
            f"SELECT {COLUMNS} FROM exercises ORDER BY due_at DESC, id DESC"
        ).fetchall()
        return [_row_to_exercise(row) for row in rows]

    def grep(self, text: str) -> list[Exercise]:
        """
        Find exercises whose content or id contains ``text``.

        Args:
            text: Substring to look for

        Returns:
            Matching exercises, latest due date first
        """
        rows = self.conn.execute(
            f"""
            SELECT {COLUMNS} FROM exercises
            WHERE description LIKE '%' || :q || '%'
               OR source LIKE '%' || :q || '%'
               OR reference_answer LIKE '%' || :q || '%'
               OR CAST(id AS TEXT) LIKE '%' || :q || '%'
            ORDER BY due_at DESC, id DESC
        """,
            {"q": text},
        ).fetchall()
        return [_row_to_exercise(row) for row in rows]

    def count(self) -> int:
        """Total number of exercises."""
        return self.conn.execute("SELECT COUNT(*) AS cnt FROM exercises").fetchone()["cnt"]

    def count_due(self, today: date | None = None) -> int:
        """Count exercises due on or before ``today``."""
        today = today or date.today()
        row = self.conn.execute(
            "SELECT COUNT(*) AS cnt FROM exercises WHERE due_at <= ?", (today.isoformat(),)
        ).fetchone()
        return row["cnt"]

    # =========================================================================
    # Mutations
    # =========================================================================

    def save_all(self, exercises: Iterable[Exercise]) -> int:
        """
        Insert new exercises in a single transaction.

        Either every exercise is saved or none is. Ids are assigned to the
        passed objects only after the transaction commits.

        Args:
            exercises: Unsaved exercises

        Returns:
            Number of exercises saved

        Raises:
            StoreError: If an exercise already has an id or a row is rejected
        """
        exercises = list(exercises)
        for exercise in exercises:
            if exercise.id is not None:
                raise StoreError(f"Cannot insert exercise {exercise.id}, it is already saved")

        new_ids: list[int] = []
        try:
            with self.conn:
                for exercise in exercises:
                    cursor = self.conn.execute(
                        """
                        INSERT INTO exercises (
                            created_at, due_at, description, source, reference_answer,
                            update_interval, consecutive_successful_reviews
                        ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                        (
                            exercise.created_at.isoformat(),
                            exercise.due_at.isoformat(),
                            exercise.description,
                            exercise.source,
                            exercise.reference_answer,
                            exercise.update_interval,
                            exercise.consecutive_successful_reviews,
                        ),
                    )
                    new_ids.append(cursor.lastrowid)
        except sqlite3.Error as e:
            raise StoreError(f"Could not save exercises: {e}") from e

        for exercise, new_id in zip(exercises, new_ids):
            exercise.id = new_id

        logger.info(f"Saved {len(exercises)} exercises")
        return len(exercises)

    def create(self, exercise: Exercise) -> int:
        """Insert one new exercise and return its id."""
        self.save_all([exercise])
        return exercise.id

    def update(self, exercise: Exercise) -> None:
        """
        Persist content and scheduling fields of a saved exercise.

        Args:
            exercise: Exercise with an id

        Raises:
            StoreError: If the exercise has no id or the write fails
        """
        if exercise.id is None:
            raise StoreError("Cannot update an exercise that has not been saved")

        try:
            with self.conn:
                cursor = self.conn.execute(
                    """
                    UPDATE exercises SET
                        created_at = ?,
                        due_at = ?,
                        description = ?,
                        source = ?,
                        reference_answer = ?,
                        update_interval = ?,
                        consecutive_successful_reviews = ?
                    WHERE id = ?
                """,
                    (
                        exercise.created_at.isoformat(),
                        exercise.due_at.isoformat(),
                        exercise.description,
                        exercise.source,
                        exercise.reference_answer,
                        exercise.update_interval,
                        exercise.consecutive_successful_reviews,
                        exercise.id,
                    ),
                )
        except sqlite3.Error as e:
            raise StoreError(f"Could not update exercise {exercise.id}: {e}") from e

        if cursor.rowcount == 0:
            raise StoreError(f"Exercise {exercise.id} does not exist")

        logger.debug(f"Updated exercise {exercise.id}, due_at={exercise.due_at}")

    def delete(self, exercise_id: int) -> bool:
        """
        Delete an exercise.

        Returns:
            False if it did not exist

        Raises:
            StoreError: If the delete fails
        """
        try:
            with self.conn:
                cursor = self.conn.execute("DELETE FROM exercises WHERE id = ?", (exercise_id,))
        except sqlite3.Error as e:
            raise StoreError(f"Could not delete exercise {exercise_id}: {e}") from e
        return cursor.rowcount > 0

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
