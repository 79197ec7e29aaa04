from __future__ import annotations

from typing import Protocol, Sequence

from .model import Student


class RosterGateway(Protocol):
    def list_classes(self) -> Sequence[str]:
        raise NotImplementedError

    def create_class(self, name: str) -> None:
        raise NotImplementedError

    def delete_class(self, name: str) -> None:
        """Remove the class together with its roster and saved attendance."""

        raise NotImplementedError

    def list_students(self, class_name: str) -> Sequence[Student]:
        raise NotImplementedError

    def add_student(self, class_name: str, roll: str, name: str) -> None:
        raise NotImplementedError
