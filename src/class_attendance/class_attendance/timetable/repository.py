from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import FacultyScheduleEntry, TimetableEntry, TimetableSlot


class TimetableRepository(Protocol):
    """Read-only view of the timetable directory."""

    def get_by_id(self, slot_id: int) -> Optional[TimetableSlot]:
        raise NotImplementedError

    def find_by_course_and_section(self, *, section_id: int, course_code: str) -> Sequence[TimetableSlot]:
        """Slots of any weekday/semester teaching course_code to the section."""

        raise NotImplementedError

    def list_for_section(self, *, section_id: int, semester: int) -> Sequence[TimetableSlot]:
        raise NotImplementedError

    def list_entries_for_section(self, *, section_id: int, semester: int) -> Sequence[TimetableEntry]:
        raise NotImplementedError

    def list_for_faculty(self, *, faculty_id: int) -> Sequence[FacultyScheduleEntry]:
        raise NotImplementedError
