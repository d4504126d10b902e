"""
Recall: Main CLI.

A Rich terminal interface for reviewing exercises with spaced repetition.

Commands:
- recall review    - Review due exercises
- recall import    - Add exercises from a YAML file
- recall due       - Show due exercises
- recall list      - Show all exercises
- recall grep      - Search exercises
- recall export    - Write one exercise to YAML for editing
- recall update    - Read an edited exercise back
- recall delete    - Delete one exercise
- recall stats     - Show totals
- recall init      - Create the database schema
- recall drop      - Drop the database schema
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from .config import get_settings
from .review import (
    ExchangeError,
    Exercise,
    ExerciseStore,
    IntervalConfig,
    IntervalScheduler,
    ReviewLoop,
    StoreError,
    export_exercise,
    parse_exercises,
    parse_updated_exercise,
)

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="recall",
    help="Recall: spaced repetition review in the terminal",
    no_args_is_help=True,
)
console = Console()

DB_OPTION = typer.Option(
    None,
    "--db",
    help="SQLite database path (defaults to RECALL_DATABASE_PATH)",
)


def _open_store(db: Optional[Path]) -> ExerciseStore:
    return ExerciseStore(db or get_settings().database_path)


def _truncate(text: str, width: int = 60) -> str:
    first_line = text.strip().splitlines()[0] if text.strip() else ""
    if len(first_line) > width or "\n" in text.strip():
        return first_line[: width - 3] + "..."
    return first_line


def _exercise_table(exercises: list[Exercise], title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Due")
    table.add_column("Interval", justify="right")
    table.add_column("Streak", justify="right")
    table.add_column("Description")

    for exercise in exercises:
        table.add_row(
            str(exercise.id),
            str(exercise.due_at),
            f"{exercise.update_interval}d",
            str(exercise.consecutive_successful_reviews),
            _truncate(exercise.description),
        )
    return table


# =============================================================================
# Commands
# =============================================================================

@app.command()
def review(
    timebox: Optional[int] = typer.Option(
        None,
        "--timebox", "-t",
        min=0,
        help="Time box in minutes (defaults to RECALL_TIME_BOX_MINUTES)",
    ),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """
    Review every due exercise, most overdue first.

    Stops when all due exercises are done, the time box runs out or
    "quit and edit" is chosen.
    """
    settings = get_settings()
    store = _open_store(db)
    loop = ReviewLoop(
        store,
        scheduler=IntervalScheduler(IntervalConfig.from_settings(settings)),
        console=console,
        export_dir=settings.export_dir,
    )

    try:
        loop.run(timebox if timebox is not None else settings.time_box_minutes)
    except OSError:
        raise typer.Exit(1)
    finally:
        store.close()


@app.command("import")
def import_exercises(
    file: Path = typer.Argument(..., help="YAML file with a list of exercises"),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Add new exercises from a YAML file (all or nothing)."""
    try:
        exercises = parse_exercises(file)
    except ExchangeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if not exercises:
        console.print("[yellow]No exercises found.[/yellow]")
        return

    store = _open_store(db)
    try:
        count = store.save_all(exercises)
    except StoreError as e:
        console.print(f"[red]Nothing imported:[/red] {e}")
        raise typer.Exit(1)
    finally:
        store.close()

    console.print(f"[green]Imported {count} exercise(s).[/green]")


@app.command()
def due(db: Optional[Path] = DB_OPTION) -> None:
    """Show exercises due for review in review order."""
    store = _open_store(db)
    try:
        exercises = store.get_due()
    finally:
        store.close()

    if not exercises:
        console.print("[green]Nothing due for review![/green]")
        return
    console.print(_exercise_table(exercises, f"{len(exercises)} due"))


@app.command("list")
def list_exercises(db: Optional[Path] = DB_OPTION) -> None:
    """Show all exercises, latest due date first."""
    store = _open_store(db)
    try:
        exercises = store.get_all_by_due_date_desc()
    finally:
        store.close()

    if not exercises:
        console.print("No exercises.")
        return
    console.print(_exercise_table(exercises, f"{len(exercises)} exercises"))


@app.command()
def grep(
    text: str = typer.Argument(..., help="Text to search for"),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Search descriptions, sources, answers and ids."""
    store = _open_store(db)
    try:
        exercises = store.grep(text)
    finally:
        store.close()

    if not exercises:
        console.print(f"No exercises match '{text}'.")
        return
    console.print(_exercise_table(exercises, f"{len(exercises)} match(es)"))


@app.command()
def export(
    exercise_id: int = typer.Argument(..., help="Exercise ID"),
    path: Path = typer.Argument(..., help="Destination YAML file"),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Write one exercise to YAML so it can be edited."""
    store = _open_store(db)
    try:
        exercise = store.get_by_id(exercise_id)
    finally:
        store.close()

    if exercise is None:
        console.print(f"[red]Exercise {exercise_id} not found.[/red]")
        raise typer.Exit(1)

    try:
        export_exercise(exercise, path)
    except ExchangeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"Exported exercise {exercise_id} to [bold]{path}[/bold]")


@app.command()
def update(
    path: Path = typer.Argument(..., help="Edited YAML file written by export"),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Read an edited exercise back; its schedule is kept."""
    try:
        edited = parse_updated_exercise(path)
    except ExchangeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    store = _open_store(db)
    try:
        exercise = store.get_by_id(edited.id)
        if exercise is None:
            console.print(f"[red]Exercise {edited.id} not found.[/red]")
            raise typer.Exit(1)
        exercise.update_with_values(edited)
        store.update(exercise)
    except StoreError as e:
        console.print(f"[red]Could not update exercise {edited.id}:[/red] {e}")
        raise typer.Exit(1)
    finally:
        store.close()

    console.print(f"[green]Updated exercise {edited.id}.[/green]")


@app.command()
def delete(
    exercise_id: int = typer.Argument(..., help="Exercise ID"),
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Delete one exercise."""
    if not confirm and not Confirm.ask(f"Delete exercise {exercise_id}?", default=False):
        raise typer.Exit(0)

    store = _open_store(db)
    try:
        deleted = store.delete(exercise_id)
    except StoreError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        store.close()

    if not deleted:
        console.print(f"[red]Exercise {exercise_id} not found.[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Deleted exercise {exercise_id}.[/green]")


@app.command()
def stats(db: Optional[Path] = DB_OPTION) -> None:
    """Show exercise totals."""
    store = _open_store(db)
    try:
        total = store.count()
        due_count = store.count_due()
    finally:
        store.close()

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold")
    table.add_row("Total exercises", str(total))
    table.add_row("Due today", str(due_count))
    console.print(table)


@app.command()
def init(db: Optional[Path] = DB_OPTION) -> None:
    """Create the database schema if it does not exist."""
    store = _open_store(db)
    store.close()
    console.print(f"[green]Database ready at {store.db_path}[/green]")


@app.command()
def drop(
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Drop all exercises and the schema. This cannot be undone!"""
    if not confirm and not Confirm.ask("Drop ALL exercises?", default=False):
        raise typer.Exit(0)

    store = ExerciseStore(db or get_settings().database_path, bootstrap=False)
    try:
        store.drop_schema()
    finally:
        store.close()
    console.print("[green]Schema dropped.[/green]")


# =============================================================================
# Entry Point
# =============================================================================

def main() -> None:
    """CLI entry point."""
    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        level=get_settings().log_level,
        format="<level>{message}</level>",
    )

    app()


if __name__ == "__main__":
    main()
