from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, storage_errors
from .model import Course, FacultyProfile, Student
from .repository import CourseRepository, FacultyRepository, StudentRepository


def _to_student(r: Dict[str, Any]) -> Student:
    return Student(
        student_id=int(r["id"]),
        roll_number=r["roll_number"],
        full_name=r["full_name"],
        section_id=int(r["section_id"]),
        email=r.get("email"),
    )


def _to_faculty(r: Dict[str, Any]) -> FacultyProfile:
    return FacultyProfile(
        faculty_id=int(r["id"]),
        faculty_name=r["faculty_name"],
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        dept_id=int(r["dept_id"]) if r.get("dept_id") is not None else None,
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with storage_errors("Student lookup"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, roll_number, full_name, email, section_id FROM students WHERE id=%s",
                (int(student_id),),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        with storage_errors("Student lookup"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, roll_number, full_name, email, section_id FROM students WHERE roll_number=%s",
                (roll_number,),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def list_by_section(self, section_id: int) -> Sequence[Student]:
        with storage_errors("Student listing"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, roll_number, full_name, email, section_id
                FROM students
                WHERE section_id=%s
                ORDER BY roll_number ASC
                """,
                (int(section_id),),
            )
            return [_to_student(r) for r in fetchall(cur)]


class MySQLFacultyRepository(FacultyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, faculty_id: int) -> Optional[FacultyProfile]:
        with storage_errors("Faculty lookup"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, faculty_name, user_id, dept_id FROM faculty_profiles WHERE id=%s",
                (int(faculty_id),),
            )
            r = fetchone(cur)
            return _to_faculty(r) if r else None

    def get_by_user_id(self, user_id: int) -> Optional[FacultyProfile]:
        with storage_errors("Faculty lookup"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, faculty_name, user_id, dept_id FROM faculty_profiles WHERE user_id=%s",
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_faculty(r) if r else None


class MySQLCourseRepository(CourseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_many(self, course_codes: Sequence[str]) -> Mapping[str, Course]:
        codes = sorted({c for c in course_codes if c})
        if not codes:
            return {}

        with storage_errors("Course lookup"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT course_code, course_name FROM courses WHERE course_code IN ({in_clause(codes)})",
                tuple(codes),
            )
            return {
                r["course_code"]: Course(course_code=r["course_code"], course_name=r["course_name"])
                for r in fetchall(cur)
            }
