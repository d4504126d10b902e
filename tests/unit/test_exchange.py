"""
Unit tests for YAML import and export of exercises.
"""

import pytest

from recall.review import ExchangeError, export_exercise, parse_exercises, parse_updated_exercise

MULTI_LINE = """\
- description: |
    foo
    more foo
    one more, should be trimmed.

  source: here is a single-line source
  reference_answer: |
    here is some more content
    \ta tab in here
- description: second
  source: second source
  reference_answer: second answer
"""

INDENTED = """\
- description: Write a loop
  source: python docs
  reference_answer: |
    for i in range(3):
        print(i)
"""


def write(tmp_path, content, name="exercises.yaml"):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


class TestParseExercises:
    """Importing new exercises."""

    def test_multi_line_exercises(self, tmp_path, today):
        exercises = parse_exercises(write(tmp_path, MULTI_LINE), today=today)

        assert len(exercises) == 2
        assert exercises[0].description == "foo\nmore foo\none more, should be trimmed."
        assert exercises[0].source == "here is a single-line source"
        assert exercises[0].reference_answer == "here is some more content\n\ta tab in here"
        assert exercises[1].description == "second"
        assert all(e.id is None and e.due_at == today for e in exercises)

    def test_indentation_preserved(self, tmp_path):
        exercises = parse_exercises(write(tmp_path, INDENTED))

        assert exercises[0].reference_answer == "for i in range(3):\n    print(i)"

    @pytest.mark.parametrize(
        "content,message",
        [
            ("- source: s\n  reference_answer: a\n", "Exercise 1 has a blank or missing description."),
            ("- description: d\n  source: ''\n  reference_answer: a\n", "Exercise 1 has a blank or missing source."),
            ("- description: d\n  source: s\n  reference_answer: ~\n", "Exercise 1 has a blank or missing reference answer."),
            (
                "- description: d\n  source: s\n  reference_answer: a\n- description: '   '\n  source: s\n  reference_answer: a\n",
                "Exercise 2 has a blank or missing description.",
            ),
        ],
    )
    def test_blank_fields_rejected(self, tmp_path, content, message):
        with pytest.raises(ExchangeError) as exc_info:
            parse_exercises(write(tmp_path, content))

        assert str(exc_info.value) == message

    def test_not_a_list(self, tmp_path):
        with pytest.raises(ExchangeError):
            parse_exercises(write(tmp_path, "description: d\n"))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ExchangeError):
            parse_exercises(write(tmp_path, "- description: [unclosed\n"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ExchangeError):
            parse_exercises(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path):
        assert parse_exercises(write(tmp_path, "")) == []


class TestExport:
    """Exporting and reading back a single exercise."""

    def test_export_then_parse_updated(self, tmp_path, sample_exercise):
        sample_exercise.reference_answer = "line one\n  indented line two"
        path = tmp_path / "exercise.yaml"

        export_exercise(sample_exercise, path)
        edited = parse_updated_exercise(path)

        assert path.read_text(encoding="utf-8").startswith("---")
        assert edited.id == 1234
        assert edited.description == sample_exercise.description
        assert edited.source == sample_exercise.source
        assert edited.reference_answer == "line one\n  indented line two"

    def test_multi_line_written_as_block(self, tmp_path, sample_exercise):
        sample_exercise.description = "first\nsecond"
        path = tmp_path / "exercise.yaml"

        export_exercise(sample_exercise, path)

        assert "description: |" in path.read_text(encoding="utf-8")

    def test_export_unsaved_rejected(self, tmp_path, sample_exercise):
        sample_exercise.id = None

        with pytest.raises(ExchangeError):
            export_exercise(sample_exercise, tmp_path / "exercise.yaml")

    def test_updated_exercise_needs_id(self, tmp_path):
        path = write(tmp_path, "description: d\nsource: s\nreference_answer: a\n")

        with pytest.raises(ExchangeError) as exc_info:
            parse_updated_exercise(path)

        assert "id" in str(exc_info.value)

    def test_updated_exercise_blank_field(self, tmp_path):
        path = write(tmp_path, "id: 3\ndescription: d\nsource: ''\nreference_answer: a\n")

        with pytest.raises(ExchangeError) as exc_info:
            parse_updated_exercise(path)

        assert str(exc_info.value) == "Exercise has a blank or missing source."

    def test_updated_exercise_values_stripped(self, tmp_path):
        path = write(tmp_path, "id: 3\ndescription: '  d  '\nsource: s\nreference_answer: a\n")

        assert parse_updated_exercise(path).description == "d"
