"""
Unit tests for ReviewSession time boxing and progress display.
"""

from datetime import timedelta

import pytest

from recall.review import Exercise, ReviewSession


@pytest.fixture
def session(clock):
    return ReviewSession(clock=clock)


class TestTimeBox:
    """Whole-minute, strictly-greater time box comparison."""

    def test_default_time_box(self, session):
        assert session.time_box_minutes == 20
        assert session.time_box == timedelta(minutes=20)

    def test_custom_time_box(self, clock):
        assert ReviewSession(5, clock=clock).time_box_minutes == 5

    def test_elapsed_is_recomputed(self, session, clock):
        assert session.elapsed() == timedelta(0)

        clock.advance(minutes=30)

        assert session.elapsed() == timedelta(minutes=30)
        assert session.elapsed_minutes == 30

    def test_not_exceeded_at_time_box(self, session, clock):
        clock.advance(minutes=20)

        assert not session.has_exceeded_timebox()

    def test_exceeded_one_minute_after_time_box(self, session, clock):
        clock.advance(minutes=21)

        assert session.has_exceeded_timebox()

    def test_sub_minute_overrun_is_not_exceeded(self, session, clock):
        clock.advance(minutes=20, seconds=59)

        assert not session.has_exceeded_timebox()

    def test_raising_time_box_clears_exceeded(self, session, clock):
        clock.advance(minutes=30)
        assert session.has_exceeded_timebox()

        session.time_box = timedelta(minutes=31)
        assert not session.has_exceeded_timebox()

        clock.advance(minutes=32)
        assert session.has_exceeded_timebox()

    def test_zero_time_box(self, clock):
        session = ReviewSession(0, clock=clock)
        assert not session.has_exceeded_timebox()

        clock.advance(minutes=1)
        assert session.has_exceeded_timebox()


class TestDisplay:
    """Progress string and header line."""

    def test_display_progression(self, session, clock):
        assert session.display_string() == "0m/20m"

        clock.advance(minutes=5)
        assert str(session) == "5m/20m"

        clock.advance(minutes=15)
        assert str(session) == "20m/20m"

        clock.advance(minutes=1)
        assert str(session) == "<Overtime: 1m>"

        clock.advance(minutes=10)
        assert str(session) == "<Overtime: 11m>"

    def test_display_truncates_to_whole_minutes(self, session, clock):
        clock.advance(minutes=7, seconds=59)

        assert session.display_string() == "7m/20m"

    def test_progress_line_right_aligned(self, session, sample_exercise):
        line = session.exercise_progress_line(0, 10, sample_exercise)

        assert line == "Exercise 1/10 - ID 1234" + " " * 51 + "0m/20m"
        assert len(line) == 80

    def test_progress_line_unsaved_exercise(self, session):
        exercise = Exercise("desc", "src", "answer")

        line = session.exercise_progress_line(2, 3, exercise)

        assert line.startswith("Exercise 3/3 - ID -1 ")
        assert line.endswith("0m/20m")
        assert len(line) == 80

    def test_progress_line_overtime(self, session, clock, sample_exercise):
        clock.advance(minutes=25)

        line = session.exercise_progress_line(4, 5, sample_exercise)

        assert line.endswith("<Overtime: 5m>")
        assert len(line) == 80

    def test_progress_line_keeps_one_space_when_too_long(self, session, sample_exercise):
        sample_exercise.id = 10 ** 70

        line = session.exercise_progress_line(0, 1, sample_exercise)

        assert f"ID {10 ** 70} 0m/20m" in line
        assert len(line) > 80
