"""
Review Loop: one interactive pass over the due exercises.

For each due exercise (most overdue first):
1. Stop if the session time box is exceeded
2. Show the description and ask "know it / don't know it / quit and edit"
3. Reveal the answer, confirm self-assessment where needed
4. Reschedule and persist
5. Wait for a key before clearing the screen for the next exercise

Persistence failures are reported and the loop moves on. Terminal
failures from the menu end the run.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .exchange import ExchangeError, export_exercise
from .exercise import Exercise
from .menu import Key, MenuOption, decode_key, horizontal_menu_select, read_key as terminal_read_key
from .scheduler import IntervalScheduler
from .session import ReviewSession
from .store import ExerciseRepository, StoreError

# =============================================================================
# Menus
# =============================================================================

KNOW_IT = 0
DONT_KNOW_IT = 1
QUIT_AND_EDIT = 2

DECISION_OPTIONS = [
    MenuOption("Know it", "k"),
    MenuOption("Don't know it", "d"),
    MenuOption("Quit and edit", "q"),
]

CONFIRM_OPTIONS = [
    MenuOption("Yes", "y"),
    MenuOption("No", "n"),
]


class StopReason(Enum):
    """Why a review run ended."""

    NOTHING_DUE = "nothing_due"
    COMPLETED = "completed"
    TIMEBOX = "timebox"
    QUIT_AND_EDIT = "quit_and_edit"
    CANCELLED = "cancelled"


@dataclass
class ReviewOutcome:
    """Summary of a review run."""

    reason: StopReason
    reviewed: int = 0
    remaining: int = 0
    failed_updates: int = 0
    elapsed_minutes: int = 0
    exported_to: Path | None = None


class ReviewLoop:
    """
    Drives a review run over the store's due exercises.

    Owns the exercise being reviewed and the store connection for the
    duration of run(); nothing runs concurrently.
    """

    def __init__(
        self,
        store: ExerciseRepository,
        scheduler: IntervalScheduler | None = None,
        console: Console | None = None,
        read_key: Callable[[], str] | None = None,
        clock: Callable[[], datetime] = datetime.now,
        export_dir: Path | None = None,
    ):
        """
        Initialize the loop.

        Args:
            store: Source of due exercises and sink for updates
            scheduler: Interval scheduler (creates default if None)
            console: Rich console for all output
            read_key: Keystroke source for the menus (terminal if None)
            clock: Source of the current time for session and scheduling
            export_dir: Where "quit and edit" writes the exercise
        """
        self.store = store
        self.clock = clock
        self.scheduler = scheduler or IntervalScheduler()
        self.console = console or Console()
        self.read_key = read_key or terminal_read_key
        self.export_dir = export_dir or Path(".")

    def today(self) -> date:
        return self.clock().date()

    def select(self, options: list[MenuOption]) -> int | None:
        """Run one menu; terminal errors are reported and re-raised."""
        try:
            return horizontal_menu_select(options, console=self.console, read_key=self.read_key)
        except OSError as e:
            self._terminal_error(e)
            raise

    def wait_for_key(self) -> bool:
        """
        Hold the current screen until a key is pressed.

        Returns:
            False if the key was a cancel key (Esc, Ctrl-C, ...)
        """
        self.console.print("\n[dim]Press any key to continue[/dim]", end="")
        try:
            event = decode_key(self.read_key())
        except OSError as e:
            self._terminal_error(e)
            raise
        self.console.line()
        return event.key is not Key.CANCEL

    def _terminal_error(self, error: OSError) -> None:
        logger.error(f"Terminal interaction failed: {error}")
        self.console.print(f"\n[bold red]Terminal error:[/bold red] {error}")

    # =========================================================================
    # Run
    # =========================================================================

    def run(self, time_box_minutes: int | None = None) -> ReviewOutcome:
        """
        Review every due exercise until done, quit or out of time.

        Args:
            time_box_minutes: Budget for this run (defaults to 20)

        Returns:
            ReviewOutcome describing how the run ended

        Raises:
            OSError: If the terminal cannot be used for the menus
        """
        exercises = self.store.get_due(self.today())

        if not exercises:
            self.console.print("[green]Nothing due for review![/green]")
            return ReviewOutcome(reason=StopReason.NOTHING_DUE)

        session = ReviewSession(time_box_minutes, clock=self.clock)
        outcome = ReviewOutcome(reason=StopReason.COMPLETED)
        total = len(exercises)

        logger.info(f"Review started: {total} due, time box {session.time_box_minutes}m")

        for i, exercise in enumerate(exercises):
            if session.has_exceeded_timebox():
                outcome.reason = StopReason.TIMEBOX
                outcome.remaining = total - i
                self.console.print(
                    f"\n[bold yellow]Time box of {session.time_box_minutes}m exceeded.[/bold yellow] "
                    f"{outcome.remaining} exercise(s) remain for a later review."
                )
                break

            self.console.print(
                session.exercise_progress_line(i, total, exercise),
                markup=False,
                highlight=False,
                soft_wrap=True,
            )
            self.console.print(Panel(Text(exercise.description), border_style="cyan", padding=(1, 2)))

            reason = self._review_one(exercise, outcome)
            if reason is not None:
                outcome.reason = reason
                outcome.remaining = total - i
                break

            if i < total - 1:
                if not self.wait_for_key():
                    self.console.print("[yellow]Review cancelled.[/yellow]")
                    outcome.reason = StopReason.CANCELLED
                    outcome.remaining = total - i - 1
                    break
                self.console.clear()

        outcome.elapsed_minutes = session.elapsed_minutes

        if outcome.reason in (StopReason.COMPLETED, StopReason.TIMEBOX):
            self.console.print(
                f"\n[bold]Reviewed {outcome.reviewed} exercise(s) "
                f"in {outcome.elapsed_minutes} minute(s).[/bold]"
            )

        logger.info(
            f"Review ended ({outcome.reason.value}): reviewed={outcome.reviewed}, "
            f"remaining={outcome.remaining}, failed_updates={outcome.failed_updates}"
        )
        return outcome

    def _review_one(self, exercise: Exercise, outcome: ReviewOutcome) -> StopReason | None:
        """Review one exercise. Returns a stop reason if the run should end."""
        choice = self.select(DECISION_OPTIONS)

        if choice is None:
            self.console.print("[yellow]Review cancelled.[/yellow]")
            return StopReason.CANCELLED

        if choice == QUIT_AND_EDIT:
            outcome.exported_to = self._export_for_editing(exercise)
            return StopReason.QUIT_AND_EDIT

        self._reveal(exercise)

        if choice == KNOW_IT:
            self.console.print("Did your answer match?")
            confirmed = self.select(CONFIRM_OPTIONS)
            if confirmed is None:
                self.console.print("[yellow]Review cancelled.[/yellow]")
                return StopReason.CANCELLED
            correct = confirmed == 0
        else:
            correct = False

        self.scheduler.advance(exercise, correct, self.today())
        outcome.reviewed += 1

        try:
            self.store.update(exercise)
        except StoreError as e:
            # the in-memory schedule is kept even though the write failed
            outcome.failed_updates += 1
            logger.error(f"Could not save exercise {exercise.id}: {e}")
            self.console.print(f"[bold red]Could not save exercise {exercise.id}:[/bold red] {e}")
            return None

        self._report(exercise, correct)
        return None

    # =========================================================================
    # Display Helpers
    # =========================================================================

    def _reveal(self, exercise: Exercise) -> None:
        """Show the reference answer and its source."""
        content = Text(exercise.reference_answer)
        content.append(f"\n\nSource: {exercise.source}", style="dim")
        self.console.print(Panel(
            content,
            title="Reference answer",
            title_align="left",
            border_style="green",
            padding=(1, 2),
        ))

    def _report(self, exercise: Exercise, correct: bool) -> None:
        if correct:
            self.console.print(
                f"[green]Correct![/green] Next review on {exercise.due_at} "
                f"(in {exercise.update_interval} day(s))."
            )
        else:
            self.console.print("[red]Incorrect.[/red] This exercise stays due today.")

    def _export_for_editing(self, exercise: Exercise) -> Path | None:
        """Write the exercise out for editing and explain how to re-import it."""
        path = self.export_dir / f"exercise-{exercise.id}.yaml"
        try:
            export_exercise(exercise, path)
        except ExchangeError as e:
            logger.error(f"Could not export exercise {exercise.id}: {e}")
            self.console.print(f"[bold red]Could not export exercise:[/bold red] {e}")
            return None

        self.console.print(f"\nExercise {exercise.id} exported to [bold]{path}[/bold]")
        self.console.print(f"Edit it, then run: [cyan]recall update {path}[/cyan]")
        return path
