from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    student_id: int
    roll_number: str
    full_name: str
    section_id: int
    email: Optional[str] = None


@dataclass(frozen=True)
class FacultyProfile:
    faculty_id: int
    faculty_name: str
    user_id: Optional[int] = None
    dept_id: Optional[int] = None


@dataclass(frozen=True)
class Course:
    course_code: str
    course_name: str
