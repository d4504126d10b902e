"""
Recall review core.

Components:
- Exercise: question/answer record with scheduling state
- IntervalScheduler: doubling interval algorithm
- ExerciseStore: SQLite persistence
- ReviewSession: time box and progress header
- SelectionMenu: keyboard-driven horizontal menu
- ReviewLoop: interactive review over the due set
"""

from .exchange import ExchangeError, export_exercise, parse_exercises, parse_updated_exercise
from .exercise import EditedExercise, Exercise
from .loop import ReviewLoop, ReviewOutcome, StopReason
from .menu import Key, KeyEvent, MenuOption, MenuState, SelectionMenu, decode_key, horizontal_menu_select
from .scheduler import IntervalConfig, IntervalScheduler
from .session import ReviewSession
from .store import ExerciseRepository, ExerciseStore, StoreError

__all__ = [
    # Data
    "Exercise",
    "EditedExercise",
    # Scheduling
    "IntervalConfig",
    "IntervalScheduler",
    # Persistence
    "ExerciseRepository",
    "ExerciseStore",
    "StoreError",
    # Import / export
    "ExchangeError",
    "export_exercise",
    "parse_exercises",
    "parse_updated_exercise",
    # Session
    "ReviewSession",
    # Menu
    "Key",
    "KeyEvent",
    "MenuOption",
    "MenuState",
    "SelectionMenu",
    "decode_key",
    "horizontal_menu_select",
    # Loop
    "ReviewLoop",
    "ReviewOutcome",
    "StopReason",
]
