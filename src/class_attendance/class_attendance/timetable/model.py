from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TimetableSlot:
    """A recurring weekly commitment of a section (not a dated class)."""

    slot_id: int
    section_id: int
    semester: int
    day: str
    slot_number: int
    course_code: str
    faculty_id: int
    room: Optional[str] = None


@dataclass(frozen=True)
class TimetableEntry:
    """Read-model: slot joined with course and faculty names."""

    slot: TimetableSlot
    course_name: str
    faculty_name: Optional[str]


@dataclass(frozen=True)
class FacultyScheduleEntry:
    """Read-model for faculty schedule views, grouped by class_title."""

    slot_id: int
    day: str
    slot_number: int
    room: Optional[str]
    semester: int
    course_code: str
    course_name: str
    class_title: str
