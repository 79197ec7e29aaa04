from __future__ import annotations

import pytest

from src.class_attendance.class_attendance.attendance.model import AttendanceRecord
from src.class_attendance.class_attendance.core.enums import MarkStatus
from src.class_attendance.class_attendance.core.exceptions import MalformedResponseError
from src.class_attendance.class_attendance.gateway.parsing import parse_attendance, parse_class_names, parse_students
from src.class_attendance.class_attendance.roster.model import Student


def test_numeric_rolls_become_strings():
    students = parse_students([{"roll": 1, "name": "Ann"}, {"roll": "2", "name": " Bo "}])

    assert students == [Student(roll="1", name="Ann"), Student(roll="2", name="Bo")]


def test_missing_status_and_name_are_normalized():
    records = parse_attendance([{"roll": "1", "status": None}, {"roll": 2}])

    assert records == [
        AttendanceRecord(roll="1", name="", status=MarkStatus.UNMARKED),
        AttendanceRecord(roll="2", name="", status=MarkStatus.UNMARKED),
    ]


def test_attendance_accepts_wrapped_records_and_null():
    assert parse_attendance(None) == []
    assert parse_attendance({"date": "2024-03-01", "records": [{"roll": "1", "name": "Ann", "status": "P"}]}) == [
        AttendanceRecord(roll="1", name="Ann", status=MarkStatus.PRESENT)
    ]


def test_duplicate_rolls_keep_first_entry():
    students = parse_students([{"roll": "1", "name": "Ann"}, {"roll": 1, "name": "Ann B"}])

    assert students == [Student(roll="1", name="Ann")]


def test_class_names_accept_plain_strings_or_objects():
    assert parse_class_names(["A", {"className": "B"}, {"name": "C"}]) == ["A", "B", "C"]


@pytest.mark.parametrize(
    "payload",
    [
        {"roll": "1"},
        [{"name": "no roll"}],
        [{"roll": ""}],
        [{"roll": True, "name": "x"}],
        ["1"],
    ],
)
def test_malformed_students_are_rejected(payload):
    with pytest.raises(MalformedResponseError):
        parse_students(payload)


def test_unknown_status_is_rejected():
    with pytest.raises(MalformedResponseError):
        parse_attendance([{"roll": "1", "status": "late"}])


def test_blank_class_name_is_rejected():
    with pytest.raises(MalformedResponseError):
        parse_class_names(["ok", "  "])
