from __future__ import annotations

import threading
from datetime import datetime

import pytest

from src.class_attendance.class_attendance.attendance.model import AttendanceRecord, SavedMark
from src.class_attendance.class_attendance.core.exceptions import GatewayError
from src.class_attendance.class_attendance.roster.model import Student


class InMemoryStore:
    """Fake storage API implementing both the roster and the attendance gateway."""

    def __init__(self):
        self.classes: list[str] = []
        self.students: dict[str, list[Student]] = {}
        self.saved: dict[tuple[str, str], list[SavedMark]] = {}
        self.csv: dict[str, bytes] = {}
        self.calls: list[tuple] = []
        self.fail: set[str] = set()
        # method name -> Event the call waits on before answering
        self.gates: dict[str, threading.Event] = {}

    def _enter(self, method: str, *args):
        self.calls.append((method, *args))
        failing = method in self.fail
        gate = self.gates.get(method)
        if gate is not None:
            gate.wait(timeout=5)
        if failing:
            raise GatewayError(f"{method} failed")

    def list_classes(self):
        self._enter("list_classes")
        return list(self.classes)

    def create_class(self, name):
        self._enter("create_class", name)
        self.classes.append(name)
        self.students.setdefault(name, [])

    def delete_class(self, name):
        self._enter("delete_class", name)
        self.classes.remove(name)
        self.students.pop(name, None)

    def list_students(self, class_name):
        self._enter("list_students", class_name)
        return list(self.students.get(class_name, []))

    def add_student(self, class_name, roll, name):
        self._enter("add_student", class_name, roll, name)
        self.students.setdefault(class_name, []).append(Student(roll=roll, name=name))

    def fetch_attendance(self, class_name, date_key):
        self._enter("fetch_attendance", class_name, date_key)
        names = {s.roll: s.name for s in self.students.get(class_name, [])}
        return [
            AttendanceRecord(roll=m.roll, name=names.get(m.roll, ""), status=m.status)
            for m in self.saved.get((class_name, date_key), [])
        ]

    def save_attendance(self, class_name, date_key, records):
        self._enter("save_attendance", class_name, date_key, list(records))
        self.saved[(class_name, date_key)] = list(records)

    def export_csv(self, class_name):
        self._enter("export_csv", class_name)
        return self.csv.get(class_name, b"roll,name\n")

    def remote_calls(self, method: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == method]


@pytest.fixture
def store():
    s = InMemoryStore()
    s.classes = ["Grade 5", "Grade 6"]
    s.students = {
        "Grade 5": [Student(roll="1", name="Ann"), Student(roll="2", name="Bo")],
        "Grade 6": [Student(roll="7", name="Dee")],
    }
    return s


@pytest.fixture
def fixed_now():
    return datetime(2024, 3, 1, 8, 30, 0)


@pytest.fixture
def today(fixed_now):
    return lambda: fixed_now.strftime("%Y-%m-%d")

