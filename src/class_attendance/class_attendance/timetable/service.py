from __future__ import annotations

from typing import Optional

from ..common.grouping import group_by
from ..common.validators import require_positive_int
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..directory.repository import FacultyRepository
from .repository import TimetableRepository


class TimetableService:
    def __init__(self, timetable: TimetableRepository, faculty: FacultyRepository):
        self._timetable = timetable
        self._faculty = faculty

    def get_timetable(self, *, section_id: int, semester: int) -> list[dict]:
        section_id = require_positive_int(section_id, "Section ID")
        semester = require_positive_int(semester, "Semester")

        entries = self._timetable.list_entries_for_section(section_id=section_id, semester=semester)
        return [
            {
                "slot_id": e.slot.slot_id,
                "section_id": e.slot.section_id,
                "semester": e.slot.semester,
                "day": e.slot.day,
                "slot_number": e.slot.slot_number,
                "course_code": e.slot.course_code,
                "course_name": e.course_name,
                "faculty_id": e.slot.faculty_id,
                "faculty_name": e.faculty_name,
                "room": e.slot.room,
            }
            for e in entries
        ]

    def get_faculty_schedule(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        faculty_id: Optional[int] = None,
    ) -> dict[str, list[dict]]:
        """A faculty member's slots grouped by class title.

        Without faculty_id the caller's own profile is used; only admins may
        look at another faculty member's schedule.
        """

        if faculty_id is not None:
            if current_role != Role.ADMIN:
                raise AuthorizationError("Access Denied")
            target_id = require_positive_int(faculty_id, "Faculty ID")
        else:
            profile = self._faculty.get_by_user_id(int(current_user_id))
            if not profile:
                raise NotFoundError("Faculty profile not found for this user.")
            target_id = profile.faculty_id

        entries = self._timetable.list_for_faculty(faculty_id=target_id)
        grouped = group_by(entries, lambda e: e.class_title)
        return {
            title: [
                {
                    "slot_id": e.slot_id,
                    "day": e.day,
                    "slot_number": e.slot_number,
                    "room": e.room,
                    "semester": e.semester,
                    "course_code": e.course_code,
                    "course_name": e.course_name,
                }
                for e in rows
            ]
            for title, rows in grouped.items()
        }
