"""Unit tests for delimited line import."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import BadFormatError, DuplicateKeyError, MissingFieldError, StockroomIOError
from core.types import Student
from ingest.line_reader import import_entities, parse_delimited_lines, read_delimited_file
from store.entity_codec import EntityCodec
from store.entity_store import EntityStore
from tests.fixture_paths import fixture_path

_CODEC = EntityCodec(Student)


def test_parse_delimited_lines_builds_typed_entities() -> None:
    """Well-formed lines should parse into entities in line order."""
    students = parse_delimited_lines(["1,Alice,85", "2, Bob ,72"], _CODEC)

    assert students == [Student(1, "Alice", 85), Student(2, "Bob", 72)]


def test_parse_stops_at_first_wrong_arity_line() -> None:
    """A short line should abort the call with its line number."""
    with pytest.raises(MissingFieldError) as error_info:
        parse_delimited_lines(["1,Alice,85", "2,Bob", "3,Carol,91"], _CODEC)

    assert error_info.value.line_number == 2 and "line 2" in str(error_info.value)


def test_parse_extra_field_counts_as_missing_field() -> None:
    """Lines with too many fields should fail like lines with too few."""
    with pytest.raises(MissingFieldError) as error_info:
        parse_delimited_lines(["1,Alice,85,extra"], _CODEC)

    assert error_info.value.kind == "MissingField"


def test_parse_unparseable_field_raises_bad_format() -> None:
    """A non-numeric score should be reported as BadFormat at its line."""
    with pytest.raises(BadFormatError) as error_info:
        parse_delimited_lines(["1,Alice,85", "2,Bob,abc"], _CODEC)

    assert error_info.value.line_number == 2 and "score" in str(error_info.value)


@pytest.mark.parametrize("blank_line", ["", "   "])
def test_parse_blank_line_raises_missing_field(blank_line: str) -> None:
    """A blank line in the middle of the input should abort the import."""
    with pytest.raises(MissingFieldError) as error_info:
        parse_delimited_lines(["1,Alice,85", blank_line, "3,Carol,91"], _CODEC)

    assert error_info.value.line_number == 2


def test_read_delimited_file_ignores_final_newline(tmp_path: Path) -> None:
    """The newline that ends the last record is not a blank record."""
    source_path = tmp_path / "students.txt"
    source_path.write_text("1,Alice,85\n2,Bob,72\n", encoding="utf-8")

    students = read_delimited_file(source_path, _CODEC)

    assert [student.id for student in students] == [1, 2]


def test_parse_uses_custom_delimiter() -> None:
    """A configured delimiter should replace the default comma."""
    students = parse_delimited_lines(["1|Alice, Jr.|85"], _CODEC, delimiter="|")

    assert students == [Student(1, "Alice, Jr.", 85)]


def test_read_delimited_file_parses_fixture() -> None:
    """Fixture file should parse every student in file order."""
    students = read_delimited_file(fixture_path("raw/students.txt"), _CODEC)

    assert [student.full_name for student in students] == ["Alice", "Bob", "Carol", "Dan"]


def test_read_delimited_file_missing_field_fixture_fails_fast() -> None:
    """Fixture with a short second line should fail at line 2."""
    with pytest.raises(MissingFieldError) as error_info:
        read_delimited_file(fixture_path("raw/students_missing_field.txt"), _CODEC)

    assert error_info.value.line_number == 2


def test_read_delimited_file_missing_path_raises_io_error(tmp_path: Path) -> None:
    """A missing input file is an I/O failure, not empty input."""
    with pytest.raises(StockroomIOError):
        read_delimited_file(tmp_path / "absent.txt", _CODEC)

    assert not (tmp_path / "absent.txt").exists()


def test_import_entities_adds_in_order_and_stops_at_duplicate() -> None:
    """Entities before a duplicate id should stay added."""
    store: EntityStore[int, Student] = EntityStore(name="student")
    store.add(Student(2, "Bob", 72))

    assert import_entities(store, [Student(1, "Alice", 85)]) == 1
    with pytest.raises(DuplicateKeyError):
        import_entities(store, [Student(3, "Carol", 91), Student(2, "Bobby", 10)])

    assert [student.id for student in store.get_all()] == [2, 1, 3]
