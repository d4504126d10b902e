"""
Review Session: time-boxed pacing for one review run.

Tracks elapsed wall-clock time against a time box and renders the
progress header shown above each exercise. All comparisons use whole
minutes; the time box is only checked between exercises.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

from .exercise import Exercise

DEFAULT_TIME_BOX_MINUTES = 20
OUTPUT_WIDTH = 80


def _whole_minutes(delta: timedelta) -> int:
    """Truncate a duration to whole minutes."""
    return int(delta.total_seconds() // 60)


class ReviewSession:
    """A single review run with a wall-clock budget."""

    def __init__(
        self,
        time_box_minutes: int | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Start a session now.

        Args:
            time_box_minutes: Budget for the run (defaults to 20)
            clock: Source of the current time
        """
        if time_box_minutes is None:
            time_box_minutes = DEFAULT_TIME_BOX_MINUTES
        self.clock = clock
        self.start = clock()
        self.time_box = timedelta(minutes=time_box_minutes)

    @property
    def time_box_minutes(self) -> int:
        return _whole_minutes(self.time_box)

    def elapsed(self) -> timedelta:
        """Time since the session started, read fresh on every call."""
        return self.clock() - self.start

    @property
    def elapsed_minutes(self) -> int:
        return _whole_minutes(self.elapsed())

    def has_exceeded_timebox(self) -> bool:
        """True once whole elapsed minutes are past the time box."""
        return self.elapsed_minutes > self.time_box_minutes

    def display_string(self) -> str:
        """``5m/20m`` while within budget, ``<Overtime: 3m>`` after."""
        elapsed_minutes = self.elapsed_minutes
        if elapsed_minutes > self.time_box_minutes:
            return f"<Overtime: {elapsed_minutes - self.time_box_minutes}m>"
        return f"{elapsed_minutes}m/{self.time_box_minutes}m"

    def exercise_progress_line(self, index: int, total: int, exercise: Exercise) -> str:
        """
        Header line for an exercise with the session clock right-aligned.

        Args:
            index: Zero-based position in the review queue
            total: Number of exercises in the queue
            exercise: The exercise about to be shown

        Returns:
            An 80 column line (longer if the parts do not fit)
        """
        exercise_id = exercise.id if exercise.id is not None else -1
        left = f"Exercise {index + 1}/{total} - ID {exercise_id}"
        right = self.display_string()
        padding = max(1, OUTPUT_WIDTH - len(left) - len(right))
        return f"{left}{' ' * padding}{right}"

    def __str__(self) -> str:
        return self.display_string()
