from __future__ import annotations

from datetime import date

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.class_attendance.class_attendance.attendance.model import NewClassSwap, NewSession, RosterEntry
from src.class_attendance.class_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.class_attendance.class_attendance.core.enums import RecordStatus, SessionCategory
from src.class_attendance.class_attendance.core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from tests.fake_db import RecordingConnection, RecordingConnectionFactory

SESSION = NewSession(
    slot_id=3,
    session_date=date(2024, 1, 3),
    marked_by=7,
    category=SessionCategory.SWAP,
    actual_course_code="CS102",
)
ROSTER = [RosterEntry(1, RecordStatus.PRESENT), RosterEntry(2, RecordStatus.ABSENT)]
SWAP = NewClassSwap(
    slot_id=3,
    requesting_faculty_id=1,
    target_faculty_id=2,
    swap_date=date(2024, 1, 3),
    reason="Course changed from CS101 to CS102",
)


def _create(conn: RecordingConnection, *, swap=SWAP):
    repo = MySQLAttendanceRepository(RecordingConnectionFactory(conn))
    return repo.create_session(session=SESSION, roster=ROSTER, swap=swap)


def _fk_error(constraint: str) -> mysql.connector.IntegrityError:
    return mysql.connector.IntegrityError(
        msg=f"Cannot add or update a child row: a foreign key constraint fails (`{constraint}`)",
        errno=errorcode.ER_NO_REFERENCED_ROW_2,
    )


def test_create_session_writes_everything_in_one_commit():
    conn = RecordingConnection()

    session_id = _create(conn)

    assert session_id == 41
    assert conn.committed and not conn.rolled_back and conn.closed
    tables = [sql.split()[2] for sql, _ in conn.statements]
    assert tables == ["attendance_sessions", "attendance_records", "class_swaps"]
    assert conn.statements[1][1] == [(41, 1, "present"), (41, 2, "absent")]
    assert conn.statements[0][1] == (3, date(2024, 1, 3), 7, "swap", "CS102")


def test_duplicate_session_maps_to_conflict_and_rolls_back():
    conn = RecordingConnection(
        fail_on="INSERT INTO attendance_sessions",
        error=mysql.connector.IntegrityError(
            msg="Duplicate entry '3-2024-01-03' for key 'uq_session_slot_date'", errno=errorcode.ER_DUP_ENTRY
        ),
    )

    with pytest.raises(ConflictError):
        _create(conn)

    assert conn.rolled_back and not conn.committed


def test_failed_swap_insert_rolls_back_session_and_records():
    conn = RecordingConnection(fail_on="INSERT INTO class_swaps", error=_fk_error("fk_swaps_timetable"))

    with pytest.raises(NotFoundError):
        _create(conn)

    assert conn.rolled_back and not conn.committed


def test_unknown_student_maps_to_validation_error():
    conn = RecordingConnection(fail_on="INSERT INTO attendance_records", error=_fk_error("fk_records_student"))

    with pytest.raises(ValidationError, match="unknown student"):
        _create(conn)

    assert conn.rolled_back


@pytest.mark.parametrize("constraint", ["fk_swaps_requesting", "fk_swaps_target"])
def test_unknown_swap_faculty_is_reported_as_faculty_problem(constraint):
    conn = RecordingConnection(fail_on="INSERT INTO class_swaps", error=_fk_error(constraint))

    with pytest.raises(ValidationError, match="unknown faculty profile"):
        _create(conn)

    assert conn.rolled_back and not conn.committed


def test_driver_failure_maps_to_internal_error():
    conn = RecordingConnection(
        fail_on="INSERT INTO attendance_sessions",
        error=mysql.connector.OperationalError(msg="Lost connection to MySQL server", errno=2013),
    )

    with pytest.raises(InternalError):
        _create(conn, swap=None)

    assert conn.rolled_back


def test_normal_session_skips_swap_insert():
    conn = RecordingConnection()

    _create(conn, swap=None)

    assert [sql.split()[2] for sql, _ in conn.statements] == ["attendance_sessions", "attendance_records"]


def test_session_lookup_filters_on_slot_and_date():
    conn = RecordingConnection(
        rows=[
            {
                "id": 5,
                "timetable_id": 3,
                "session_date": date(2024, 1, 3),
                "marked_by_user_id": 7,
                "session_category": "free",
                "actual_course_code": None,
                "is_verified_by_faculty": 0,
            }
        ]
    )
    repo = MySQLAttendanceRepository(RecordingConnectionFactory(conn))

    session = repo.get_session_for_slot_and_date(slot_id=3, session_date=date(2024, 1, 3))

    assert "WHERE timetable_id=%s AND session_date=%s" in conn.last_sql
    assert conn.last_params == (3, date(2024, 1, 3))
    assert session.category == SessionCategory.FREE
    assert session.actual_course_code is None
    assert session.is_verified is False
