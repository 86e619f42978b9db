from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.constants import WEEKDAY_ORDER
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, storage_errors
from .model import FacultyScheduleEntry, TimetableEntry, TimetableSlot
from .repository import TimetableRepository

_SLOT_COLUMNS = "t.id, t.section_id, t.semester, t.day, t.slot_number, t.course_code, t.faculty_profile_id, t.room_info"

# Mon..Sat, then anything else.
_DAY_ORDER_SQL = (
    "CASE t.day "
    + " ".join(f"WHEN '{day}' THEN {rank}" for day, rank in WEEKDAY_ORDER.items())
    + f" ELSE {len(WEEKDAY_ORDER) + 1} END"
)


def _to_slot(r: Dict[str, Any]) -> TimetableSlot:
    return TimetableSlot(
        slot_id=int(r["id"]),
        section_id=int(r["section_id"]),
        semester=int(r["semester"]),
        day=r["day"],
        slot_number=int(r["slot_number"]),
        course_code=r["course_code"],
        faculty_id=int(r["faculty_profile_id"]),
        room=r.get("room_info"),
    )


class MySQLTimetableRepository(TimetableRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, slot_id: int) -> Optional[TimetableSlot]:
        with storage_errors("Timetable lookup"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SLOT_COLUMNS} FROM timetable t WHERE t.id=%s", (int(slot_id),))
            r = fetchone(cur)
            return _to_slot(r) if r else None

    def find_by_course_and_section(self, *, section_id: int, course_code: str) -> Sequence[TimetableSlot]:
        with storage_errors("Timetable lookup"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SLOT_COLUMNS}
                FROM timetable t
                WHERE t.section_id=%s AND t.course_code=%s
                ORDER BY t.id ASC
                """,
                (int(section_id), course_code),
            )
            return [_to_slot(r) for r in fetchall(cur)]

    def list_for_section(self, *, section_id: int, semester: int) -> Sequence[TimetableSlot]:
        with storage_errors("Timetable listing"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SLOT_COLUMNS}
                FROM timetable t
                WHERE t.section_id=%s AND t.semester=%s
                ORDER BY {_DAY_ORDER_SQL}, t.slot_number
                """,
                (int(section_id), int(semester)),
            )
            return [_to_slot(r) for r in fetchall(cur)]

    def list_entries_for_section(self, *, section_id: int, semester: int) -> Sequence[TimetableEntry]:
        with storage_errors("Timetable listing"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SLOT_COLUMNS}, c.course_name, f.faculty_name
                FROM timetable t
                JOIN courses c ON c.course_code = t.course_code
                LEFT JOIN faculty_profiles f ON f.id = t.faculty_profile_id
                WHERE t.section_id=%s AND t.semester=%s
                ORDER BY {_DAY_ORDER_SQL}, t.slot_number
                """,
                (int(section_id), int(semester)),
            )
            return [
                TimetableEntry(slot=_to_slot(r), course_name=r["course_name"], faculty_name=r.get("faculty_name"))
                for r in fetchall(cur)
            ]

    def list_for_faculty(self, *, faculty_id: int) -> Sequence[FacultyScheduleEntry]:
        with storage_errors("Faculty schedule"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    t.id, t.day, t.slot_number, t.room_info, t.semester,
                    c.course_code, c.course_name,
                    CONCAT(d.dept_code, ' ', b.batch_name, ' (', s.section_name, ')') AS class_title
                FROM timetable t
                JOIN courses c ON c.course_code = t.course_code
                JOIN sections s ON s.id = t.section_id
                JOIN batches b ON b.id = s.batch_id
                JOIN departments d ON d.id = b.dept_id
                WHERE t.faculty_profile_id=%s
                ORDER BY t.semester, {_DAY_ORDER_SQL}, t.slot_number
                """,
                (int(faculty_id),),
            )
            return [
                FacultyScheduleEntry(
                    slot_id=int(r["id"]),
                    day=r["day"],
                    slot_number=int(r["slot_number"]),
                    room=r.get("room_info"),
                    semester=int(r["semester"]),
                    course_code=r["course_code"],
                    course_name=r["course_name"],
                    class_title=r["class_title"],
                )
                for r in fetchall(cur)
            ]
