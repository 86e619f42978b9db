from __future__ import annotations

from src.class_attendance.class_attendance.timetable.model import TimetableSlot
from src.class_attendance.class_attendance.timetable.mysql_timetable_repository import MySQLTimetableRepository
from tests.fake_db import RecordingConnection, RecordingConnectionFactory

SLOT_ROW = {
    "id": 2,
    "section_id": 10,
    "semester": 3,
    "day": "Tue",
    "slot_number": 1,
    "course_code": "CS102",
    "faculty_profile_id": 2,
    "room_info": "A-102",
}


def _repo(conn: RecordingConnection) -> MySQLTimetableRepository:
    return MySQLTimetableRepository(RecordingConnectionFactory(conn))


def test_course_lookup_is_scoped_to_the_section():
    conn = RecordingConnection(rows=[SLOT_ROW])

    slots = _repo(conn).find_by_course_and_section(section_id=10, course_code="CS102")

    assert "WHERE t.section_id=%s AND t.course_code=%s ORDER BY t.id ASC" in conn.last_sql
    assert conn.last_params == (10, "CS102")
    assert slots == [
        TimetableSlot(
            slot_id=2, section_id=10, semester=3, day="Tue", slot_number=1, course_code="CS102", faculty_id=2, room="A-102"
        )
    ]


def test_section_timetable_orders_days_monday_to_saturday():
    conn = RecordingConnection()

    _repo(conn).list_for_section(section_id=10, semester=3)

    assert "WHERE t.section_id=%s AND t.semester=%s" in conn.last_sql
    assert conn.last_params == (10, 3)
    assert (
        "ORDER BY CASE t.day WHEN 'Mon' THEN 1 WHEN 'Tue' THEN 2 WHEN 'Wed' THEN 3"
        " WHEN 'Thu' THEN 4 WHEN 'Fri' THEN 5 WHEN 'Sat' THEN 6 ELSE 7 END, t.slot_number"
    ) in conn.last_sql


def test_missing_slot_is_none():
    conn = RecordingConnection()

    assert _repo(conn).get_by_id(99) is None
    assert conn.last_params == (99,)
