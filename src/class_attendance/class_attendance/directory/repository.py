from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from .model import Course, FacultyProfile, Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        raise NotImplementedError

    def list_by_section(self, section_id: int) -> Sequence[Student]:
        """Students of a section ordered by roll number."""

        raise NotImplementedError


class FacultyRepository(Protocol):
    def get_by_id(self, faculty_id: int) -> Optional[FacultyProfile]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[FacultyProfile]:
        raise NotImplementedError


class CourseRepository(Protocol):
    def get_many(self, course_codes: Sequence[str]) -> Mapping[str, Course]:
        """Courses keyed by code; unknown codes are simply absent."""

        raise NotImplementedError
