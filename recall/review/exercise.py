"""
Exercise: the reviewable question/answer record.

An exercise carries its content (description, source, reference answer)
and its scheduling state (due date, interval, streak). Scheduling fields
are only changed by ``IntervalScheduler.advance``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass(eq=False)
class Exercise:
    """
    A single exercise and its spaced repetition state.

    Two exercises are equal only when both are saved and share an id.
    Exercises are mutable and unhashable; key sets and dicts by ``id``.
    """

    description: str
    source: str
    reference_answer: str
    id: int | None = None
    created_at: date = field(default_factory=date.today)
    due_at: date = field(default_factory=date.today)
    update_interval: int = 0  # Days added to today on the next success
    consecutive_successful_reviews: int = 0

    @classmethod
    def new(
        cls,
        description: str,
        source: str,
        reference_answer: str,
        today: date | None = None,
    ) -> Exercise:
        """
        Create an unsaved exercise that is due immediately.

        Args:
            description: The prompt shown during review
            source: Where the exercise comes from
            reference_answer: The answer revealed after a decision
            today: Creation date (defaults to the current date)

        Returns:
            Exercise with no id
        """
        today = today or date.today()
        return cls(
            description=description,
            source=source,
            reference_answer=reference_answer,
            created_at=today,
            due_at=today,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Exercise):
            return NotImplemented
        return self.id is not None and other.id is not None and self.id == other.id

    def is_due(self, today: date | None = None) -> bool:
        """Check if this exercise should be reviewed on ``today``."""
        return self.due_at <= (today or date.today())

    def update_with_values(self, edited: EditedExercise) -> None:
        """Copy edited content fields; scheduling state is left alone."""
        self.description = edited.description
        self.source = edited.source
        self.reference_answer = edited.reference_answer


@dataclass
class EditedExercise:
    """Content of an exported exercise after it was edited by hand."""

    id: int
    description: str
    source: str
    reference_answer: str
