from __future__ import annotations

from datetime import date

from src.class_attendance.class_attendance.attendance.model import AttendanceRecord
from src.class_attendance.class_attendance.core.enums import RecordStatus, SessionCategory
from src.class_attendance.class_attendance.reports.model import SessionFact
from src.class_attendance.class_attendance.reports.mysql_report_repository import MySQLReportRepository
from tests.fake_db import RecordingConnection, RecordingConnectionFactory

SESSION_ROW = {
    "id": 11,
    "timetable_id": 1,
    "session_date": date(2024, 1, 8),
    "session_category": "swap",
    "actual_course_code": "CS102",
    "is_verified_by_faculty": 1,
    "section_id": 10,
    "semester": 3,
    "day": "Mon",
    "slot_number": 1,
    "course_code": "CS101",
}


def _repo(conn: RecordingConnection) -> MySQLReportRepository:
    return MySQLReportRepository(RecordingConnectionFactory(conn))


def test_sessions_exclude_free_periods_by_default():
    conn = RecordingConnection()

    _repo(conn).list_sessions(section_id=10)

    assert "WHERE t.section_id=%s AND sess.session_category <> %s" in conn.last_sql
    assert conn.last_params == (10, "free")


def test_sessions_include_free_periods_when_asked():
    conn = RecordingConnection()

    _repo(conn).list_sessions(section_id=10, include_free=True)

    assert "session_category <>" not in conn.last_sql
    assert conn.last_params == (10,)


def test_sessions_filter_on_semester_actual_course_and_inclusive_dates():
    conn = RecordingConnection()

    _repo(conn).list_sessions(
        section_id=10, semester=3, course_code="CS101", start=date(2024, 1, 1), end=date(2024, 1, 31)
    )

    assert (
        "WHERE t.section_id=%s AND t.semester=%s AND sess.actual_course_code=%s"
        " AND sess.session_date >= %s AND sess.session_date <= %s AND sess.session_category <> %s"
    ) in conn.last_sql
    assert conn.last_params == (10, 3, "CS101", date(2024, 1, 1), date(2024, 1, 31), "free")
    assert conn.last_sql.endswith("ORDER BY sess.session_date ASC, t.slot_number ASC")


def test_session_rows_map_to_facts():
    conn = RecordingConnection(rows=[SESSION_ROW])

    [fact] = _repo(conn).list_sessions(section_id=10, semester=3)

    assert fact == SessionFact(
        session_id=11,
        slot_id=1,
        section_id=10,
        semester=3,
        day="Mon",
        slot_number=1,
        scheduled_course_code="CS101",
        session_date=date(2024, 1, 8),
        category=SessionCategory.SWAP,
        actual_course_code="CS102",
        is_verified=True,
    )


def test_records_for_no_sessions_skip_the_query():
    conn = RecordingConnection()

    assert _repo(conn).list_records(session_ids=[]) == []
    assert conn.statements == []


def test_records_filter_by_sessions_and_student():
    conn = RecordingConnection(rows=[{"id": 90, "session_id": 11, "student_id": 3, "status": "LATE"}])

    records = _repo(conn).list_records(session_ids=[11, 12], student_id=3)

    assert "WHERE session_id IN (%s, %s) AND student_id=%s" in conn.last_sql
    assert conn.last_params == (11, 12, 3)
    assert records == [AttendanceRecord(record_id=90, session_id=11, student_id=3, status=RecordStatus.LATE)]


def test_records_for_whole_section_have_no_student_filter():
    conn = RecordingConnection()

    _repo(conn).list_records(session_ids=[11])

    assert "student_id=%s" not in conn.last_sql
    assert conn.last_params == (11,)
