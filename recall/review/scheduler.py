"""
Doubling Interval Scheduler.

Implements the fixed review policy:
- First success: review again after one day
- Each further success: double the interval, capped at the maximum
- Any failure: reset the streak and make the exercise due today

Interval sequence for consecutive successes:
1, 2, 4, 8, 16, 32, 64, 90, 90, ...
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta

from loguru import logger

from ..config import Settings
from .exercise import Exercise


@dataclass(frozen=True)
class IntervalConfig:
    """Configuration for the interval algorithm."""

    one_day: int = 1  # Days after the first success
    max_interval: int = 90  # Interval cap in days
    easiness_factor: int = 2  # Growth per further success

    @classmethod
    def from_settings(cls, settings: Settings) -> IntervalConfig:
        return cls(
            one_day=settings.one_day,
            max_interval=settings.max_interval,
            easiness_factor=settings.easiness_factor,
        )


class IntervalScheduler:
    """
    Updates an exercise's due date and streak after a review.

    Each exercise has:
    - Update interval: days until the next review after a success
    - Consecutive successful reviews: the current streak
    """

    def __init__(
        self,
        config: IntervalConfig | None = None,
        clock: Callable[[], date] = date.today,
    ):
        """
        Initialize the scheduler.

        Args:
            config: Custom configuration (uses defaults if None)
            clock: Source of "today" when advance() is not given one
        """
        self.config = config or IntervalConfig()
        self.clock = clock

    def next_interval(self, streak: int, interval: int) -> int:
        """Interval for a success that brings the streak to ``streak``."""
        if streak == 1:
            return self.config.one_day
        return min(self.config.max_interval, interval * self.config.easiness_factor)

    def advance(
        self,
        exercise: Exercise,
        correct: bool,
        today: date | None = None,
    ) -> Exercise:
        """
        Apply one review result to an exercise.

        Only the scheduling fields change; content, id and creation date
        are untouched.

        Args:
            exercise: The reviewed exercise (mutated in place)
            correct: Whether the user recalled the answer
            today: Review date (defaults to the scheduler clock)

        Returns:
            The same exercise, for chaining
        """
        today = today or self.clock()
        exercise.due_at = today

        if correct:
            exercise.consecutive_successful_reviews += 1
            exercise.update_interval = self.next_interval(
                exercise.consecutive_successful_reviews,
                exercise.update_interval,
            )
            exercise.due_at = today + timedelta(days=exercise.update_interval)
        else:
            exercise.consecutive_successful_reviews = 0
            exercise.update_interval = 0

        logger.debug(
            f"Scheduled exercise {exercise.id}: correct={correct}, "
            f"streak={exercise.consecutive_successful_reviews}, "
            f"interval={exercise.update_interval}d, due_at={exercise.due_at}"
        )

        return exercise
