"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import io
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest
from rich.console import Console

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from recall.review import Exercise, ExerciseStore  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeClock:
    """A clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def scripted_keys(*keys: str):
    """Key source that replays ``keys`` and fails loudly when exhausted."""
    remaining = list(keys)

    def read_key() -> str:
        if not remaining:
            raise AssertionError("menu asked for more keys than scripted")
        return remaining.pop(0)

    read_key.remaining = remaining
    return read_key


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def today():
    return date(2024, 3, 15)


@pytest.fixture
def clock(today):
    return FakeClock(datetime(today.year, today.month, today.day, 9, 0, 0))


@pytest.fixture
def keys():
    """Factory for scripted key sources: keys("l", "\\r")."""
    return scripted_keys


@pytest.fixture
def console():
    """Console that records output instead of drawing on a terminal."""
    return Console(file=io.StringIO(), width=100, force_terminal=False, color_system=None)


@pytest.fixture
def store(tmp_path):
    store = ExerciseStore(tmp_path / "exercises.db")
    yield store
    store.close()


@pytest.fixture
def sample_exercise(today):
    """Provide a saved-looking exercise for testing."""
    exercise = Exercise.new(
        "What does `git add -p` do?",
        "git manual",
        "Interactively stage hunks of a file.",
        today=today,
    )
    exercise.id = 1234
    return exercise
