from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Student:
    """Domain entity: a student on a class roster. Roll is unique within the class."""

    roll: str
    name: str
