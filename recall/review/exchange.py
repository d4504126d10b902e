"""
YAML import and export of exercises.

Import files hold a list of new exercises:

    - description: What does `git add -p` do?
      source: git manual
      reference_answer: |
        Interactively stage hunks of a file.

Export files hold a single saved exercise (with its id) so it can be
edited by hand and read back with parse_updated_exercise().
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from .exercise import EditedExercise, Exercise

CONTENT_FIELDS = ("description", "source", "reference_answer")
FIELD_NAMES = {
    "description": "description",
    "source": "source",
    "reference_answer": "reference answer",
}


class ExchangeError(Exception):
    """Raised when an exercise file cannot be read, parsed or written."""
    pass


class _ExportDumper(yaml.SafeDumper):
    """Writes multi-line strings as literal blocks."""
    pass


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_ExportDumper.add_representer(str, _represent_str)


def _is_blank(value: Any) -> bool:
    return value is None or str(value).strip() in ("", "~")


def _load(path: Path) -> Any:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ExchangeError(f"Could not read {path}: {e}") from e

    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ExchangeError(f"{path} is not valid YAML: {e}") from e


def _clean_fields(data: dict, describe: str) -> dict[str, str]:
    """Check the content fields of one mapping and strip them."""
    cleaned = {}
    for name in CONTENT_FIELDS:
        value = data.get(name)
        if _is_blank(value):
            raise ExchangeError(f"{describe} has a blank or missing {FIELD_NAMES[name]}.")
        if isinstance(value, (list, dict)):
            raise ExchangeError(f"{describe} has a {FIELD_NAMES[name]} that is not text.")
        cleaned[name] = str(value).strip()
    return cleaned


def parse_exercises(path: Path, today: date | None = None) -> list[Exercise]:
    """
    Read new exercises from a YAML file.

    The whole file is rejected if any exercise is invalid.

    Args:
        path: YAML file with a list of exercises
        today: Creation and due date for the new exercises

    Returns:
        Unsaved exercises in file order

    Raises:
        ExchangeError: On unreadable files, bad YAML or blank fields
    """
    data = _load(path)
    if data is None:
        return []
    if not isinstance(data, list):
        raise ExchangeError(f"{path} must contain a list of exercises.")

    exercises = []
    for i, item in enumerate(data, 1):
        if not isinstance(item, dict):
            raise ExchangeError(f"Exercise {i} is not a mapping.")
        fields = _clean_fields(item, f"Exercise {i}")
        exercises.append(Exercise.new(today=today, **fields))

    logger.debug(f"Parsed {len(exercises)} exercises from {path}")
    return exercises


def parse_updated_exercise(path: Path) -> EditedExercise:
    """
    Read an exported exercise back after it was edited.

    Args:
        path: YAML file written by export_exercise()

    Returns:
        EditedExercise with the id and stripped content fields

    Raises:
        ExchangeError: On unreadable files, bad YAML, missing id or blank fields
    """
    data = _load(path)
    if not isinstance(data, dict):
        raise ExchangeError(f"{path} must contain a single exercise.")

    exercise_id = data.get("id")
    if not isinstance(exercise_id, int) or isinstance(exercise_id, bool):
        raise ExchangeError("Exercise has a blank or missing id.")

    fields = _clean_fields(data, "Exercise")
    return EditedExercise(id=exercise_id, **fields)


def export_exercise(exercise: Exercise, path: Path) -> None:
    """
    Write a saved exercise to a YAML file for editing.

    Args:
        exercise: Exercise with an id
        path: Destination file (overwritten)

    Raises:
        ExchangeError: If the exercise is unsaved or the file cannot be written
    """
    if exercise.id is None:
        raise ExchangeError("Cannot export an exercise that has not been saved")

    document = {
        "id": exercise.id,
        "description": exercise.description,
        "source": exercise.source,
        "reference_answer": exercise.reference_answer,
    }
    text = yaml.dump(
        document,
        Dumper=_ExportDumper,
        sort_keys=False,
        explicit_start=True,
        allow_unicode=True,
    )

    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise ExchangeError(f"Could not write {path}: {e}") from e

    logger.info(f"Exported exercise {exercise.id} to {path}")
