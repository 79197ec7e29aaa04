from __future__ import annotations

import asyncio
import logging
import re
import uuid
from collections import OrderedDict
from typing import Callable, Optional

from ..common.datetime_utils import normalize_date_key, today_key
from ..common.validators import require_non_empty, require_unique
from ..core.constants import CSV_SUFFIX, DEFAULT_MAX_SESSIONS
from ..core.enums import MarkStatus, SessionState
from ..core.exceptions import GatewayError, SessionBusyError, ValidationError
from ..roster.model import Student
from ..roster.repository import RosterGateway
from .model import AttendanceRecord, Selection
from .policies.base import SavePolicy
from .policies.lenient_policy import LenientSavePolicy
from .reconciler import Session, initialize_session, merge_student, prepare_save, set_status
from .repository import AttendanceGateway

logger = logging.getLogger(__name__)


def csv_filename(class_name: str) -> str:
    return re.sub(r"\s+", "_", class_name) + CSV_SUFFIX


class SessionController:
    """Owns the attendance working set of one browser for one (class, date).

    Every fetch is tagged with a monotonically increasing number; a completion
    whose tag is no longer the latest is dropped instead of overwriting the
    session of a newer selection.
    """

    def __init__(
        self,
        roster: RosterGateway,
        attendance: AttendanceGateway,
        *,
        policy: SavePolicy | None = None,
        today: Callable[[], str] = today_key,
    ):
        self._roster = roster
        self._attendance = attendance
        self._policy = policy or LenientSavePolicy()
        self._today = today

        self._classes: list[str] = []
        self._students: list[Student] = []
        self._records: Session = ()
        self._selection: Optional[Selection] = None
        self._requested_class: Optional[str] = None
        self._state = SessionState.EMPTY
        self._tag = 0
        self._saving = False
        self._classes_loaded = False

    @property
    def classes(self) -> tuple[str, ...]:
        return tuple(self._classes)

    @property
    def students(self) -> tuple[Student, ...]:
        return tuple(self._students)

    @property
    def records(self) -> Session:
        return self._records

    @property
    def selection(self) -> Optional[Selection]:
        return self._selection

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_saving(self) -> bool:
        return self._saving

    @property
    def class_name(self) -> str:
        return self._selection.class_name if self._selection else ""

    @property
    def date_key(self) -> str:
        return self._selection.date_key if self._selection else self._today()

    # ----- classes -----

    async def refresh_classes(self) -> list[str]:
        self._classes = list(await asyncio.to_thread(self._roster.list_classes))
        return list(self._classes)

    async def load_classes(self) -> list[str]:
        """Refresh the class list; the very first load also opens the first class."""
        first_load = not self._classes_loaded
        classes = await self.refresh_classes()
        self._classes_loaded = True
        if first_load and classes and self._selection is None and self._requested_class is None:
            await self.select(classes[0])
        return classes

    async def create_class(self, name: str) -> str:
        name = require_non_empty(name, "Class name")
        require_unique(name, self._classes, "Class")

        await asyncio.to_thread(self._roster.create_class, name)
        logger.info("Created class %r", name)
        await self.refresh_classes()
        await self.select(name)
        return name

    async def delete_class(self, name: str) -> None:
        name = require_non_empty(name, "Class name")

        await asyncio.to_thread(self._roster.delete_class, name)
        logger.info("Deleted class %r", name)
        if self._requested_class == name or self.class_name == name:
            self._clear()
        await self.refresh_classes()

    # ----- session lifecycle -----

    async def select(self, class_name: str, date_key: Optional[str] = None) -> bool:
        """Load the session for (class, date). Returns False when a newer selection superseded it."""
        class_name = (class_name or "").strip()
        if not class_name:
            self._clear()
            return True

        date_key = normalize_date_key(date_key) if date_key else self._today()
        tag = self._next_tag()
        self._requested_class = class_name

        try:
            students = list(await asyncio.to_thread(self._roster.list_students, class_name))
            if not self._is_current(tag):
                logger.debug("Dropping stale roster for %r (tag %s)", class_name, tag)
                return False

            saved = list(await asyncio.to_thread(self._attendance.fetch_attendance, class_name, date_key))
            if not self._is_current(tag):
                logger.debug("Dropping stale attendance for %r on %s (tag %s)", class_name, date_key, tag)
                return False
        except GatewayError:
            if not self._is_current(tag):
                logger.debug("Ignoring failure of superseded load for %r (tag %s)", class_name, tag)
                return False
            self._requested_class = self._selection.class_name if self._selection else None
            raise

        self._students = students
        self._records = initialize_session(students, saved)
        self._selection = Selection(class_name=class_name, date_key=date_key, tag=tag)
        self._state = SessionState.LOADED
        return True

    def mark(self, roll: str, status) -> bool:
        status = MarkStatus.parse(status)
        updated = set_status(self._records, roll, status)
        if updated == self._records:
            return False

        self._records = updated
        self._state = SessionState.DIRTY
        return True

    async def add_student(self, roll: str, name: str) -> Student:
        selection = self._require_selection()
        roll = require_non_empty(roll, "Roll")
        name = require_non_empty(name, "Name")
        require_unique(roll, (s.roll for s in self._students), "Roll")

        await asyncio.to_thread(self._roster.add_student, selection.class_name, roll, name)
        student = Student(roll=roll, name=name)
        if self._selection is not selection:
            return student

        self._students.append(student)
        merged = merge_student(self._records, student)
        if merged != self._records:
            self._records = merged
            self._state = SessionState.DIRTY

        # The refreshed roster only feeds the student list; the session keeps its edits.
        try:
            students = list(await asyncio.to_thread(self._roster.list_students, selection.class_name))
        except GatewayError:
            logger.warning("Roster refresh after adding %r to %r failed", roll, selection.class_name)
            return student
        if self._selection is selection:
            self._students = students
        return student

    async def save(self) -> int:
        selection = self._require_selection()
        if self._saving:
            raise SessionBusyError("Attendance is already being saved")

        snapshot = self._records
        marks = prepare_save(snapshot, self._policy)

        self._saving = True
        try:
            await asyncio.to_thread(
                self._attendance.save_attendance,
                selection.class_name,
                selection.date_key,
                marks,
            )
        finally:
            self._saving = False

        logger.info("Saved %d marks for %r on %s", len(marks), selection.class_name, selection.date_key)
        if self._selection is selection and self._records == snapshot:
            self._state = SessionState.SAVED
        return len(marks)

    async def export_csv(self) -> tuple[str, bytes]:
        selection = self._require_selection()
        content = await asyncio.to_thread(self._attendance.export_csv, selection.class_name)
        return csv_filename(selection.class_name), content

    def to_dict(self) -> dict:
        return {
            "class_name": self.class_name,
            "date": self.date_key,
            "state": self._state.value,
            "saving": self._saving,
            "records": [_record_dict(r) for r in self._records],
        }

    # ----- helpers -----

    def _next_tag(self) -> int:
        self._tag += 1
        return self._tag

    def _is_current(self, tag: int) -> bool:
        return tag == self._tag

    def _require_selection(self) -> Selection:
        if self._selection is None:
            raise ValidationError("Select a class first")
        return self._selection

    def _clear(self) -> None:
        # Bumping the tag also orphans any fetch still in flight.
        self._next_tag()
        self._requested_class = None
        self._students = []
        self._records = ()
        self._selection = None
        self._state = SessionState.EMPTY


def _record_dict(r: AttendanceRecord) -> dict:
    return {"roll": r.roll, "name": r.name, "status": r.status.value}


class SessionRegistry:
    """Per-browser controllers, keyed by an opaque token stored in the Flask session cookie.

    At most ``max_sessions`` controllers are kept; the least recently used one
    is dropped when a new token arrives past the cap. A browser whose
    controller was dropped starts over with a fresh, empty session.
    """

    def __init__(self, factory: Callable[[], SessionController], *, max_sessions: int = DEFAULT_MAX_SESSIONS):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._factory = factory
        self._max_sessions = max_sessions
        self._controllers: OrderedDict[str, SessionController] = OrderedDict()

    @staticmethod
    def new_token() -> str:
        return uuid.uuid4().hex

    def get(self, token: str) -> SessionController:
        controller = self._controllers.get(token)
        if controller is not None:
            self._controllers.move_to_end(token)
            return controller

        controller = self._factory()
        self._controllers[token] = controller
        self._evict()
        return controller

    def find(self, token: Optional[str]) -> Optional[SessionController]:
        """Return the controller for ``token`` without creating one."""
        if not token:
            return None
        return self._controllers.get(token)

    def blank(self) -> SessionController:
        """A throwaway controller that is not registered under any token."""
        return self._factory()

    def _evict(self) -> None:
        while len(self._controllers) > self._max_sessions:
            token, _ = self._controllers.popitem(last=False)
            logger.debug("Evicted idle session %s", token[:8])

    def __len__(self) -> int:
        return len(self._controllers)
