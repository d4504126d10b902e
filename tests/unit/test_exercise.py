"""
Unit tests for the Exercise data model.
"""

from datetime import date

import pytest

from recall.review import EditedExercise, Exercise


class TestExercise:
    """Tests for Exercise construction and helpers."""

    def test_new_defaults(self, today):
        exercise = Exercise.new("foo", "bar", "baz", today=today)

        assert exercise.id is None
        assert exercise.created_at == today
        assert exercise.due_at == today
        assert exercise.update_interval == 0
        assert exercise.consecutive_successful_reviews == 0

    def test_new_uses_current_date(self):
        exercise = Exercise.new("foo", "bar", "baz")

        assert exercise.created_at == date.today()

    def test_equality_by_id(self):
        a = Exercise("foo", "bar", "baz", id=1)
        b = Exercise("other", "content", "entirely", id=1)
        c = Exercise("foo", "bar", "baz", id=2)

        assert a == b
        assert a != c

    def test_unsaved_exercises_are_never_equal(self):
        a = Exercise("foo", "bar", "baz")
        b = Exercise("foo", "bar", "baz")

        assert a != b
        assert a != Exercise("foo", "bar", "baz", id=1)

    def test_not_hashable(self, sample_exercise):
        with pytest.raises(TypeError):
            {sample_exercise}

    def test_is_due(self, today):
        exercise = Exercise.new("foo", "bar", "baz", today=today)

        assert exercise.is_due(today)
        assert exercise.is_due(date(2024, 3, 16))
        assert not exercise.is_due(date(2024, 3, 14))

    def test_update_with_values_keeps_schedule(self, sample_exercise):
        sample_exercise.update_interval = 8
        sample_exercise.consecutive_successful_reviews = 4
        due = sample_exercise.due_at

        sample_exercise.update_with_values(
            EditedExercise(id=1234, description="new d", source="new s", reference_answer="new a")
        )

        assert sample_exercise.description == "new d"
        assert sample_exercise.source == "new s"
        assert sample_exercise.reference_answer == "new a"
        assert sample_exercise.update_interval == 8
        assert sample_exercise.consecutive_successful_reviews == 4
        assert sample_exercise.due_at == due
