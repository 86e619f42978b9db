from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import RecordStatus, SessionCategory, SwapStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    is_duplicate_key,
    is_missing_reference,
    storage_errors,
)
from .model import AttendanceSession, ClassSwap, NewClassSwap, NewSession, RecordRow, RosterEntry, SessionLogRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_SESSION_COLUMNS = (
    "id, timetable_id, session_date, marked_by_user_id, session_category, actual_course_code, is_verified_by_faculty"
)


def _to_session(r: Dict[str, Any]) -> AttendanceSession:
    return AttendanceSession(
        session_id=int(r["id"]),
        slot_id=int(r["timetable_id"]),
        session_date=r["session_date"],
        marked_by=int(r["marked_by_user_id"]),
        category=SessionCategory(r["session_category"]),
        actual_course_code=r.get("actual_course_code"),
        is_verified=bool(r.get("is_verified_by_faculty")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_session(self, session_id: int) -> Optional[AttendanceSession]:
        with storage_errors("Session lookup"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SESSION_COLUMNS} FROM attendance_sessions WHERE id=%s", (int(session_id),))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def get_session_for_slot_and_date(self, *, slot_id: int, session_date: date) -> Optional[AttendanceSession]:
        with storage_errors("Session lookup"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SESSION_COLUMNS}
                FROM attendance_sessions
                WHERE timetable_id=%s AND session_date=%s
                """,
                (int(slot_id), session_date),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def create_session(
        self,
        *,
        session: NewSession,
        roster: Sequence[RosterEntry],
        swap: Optional[NewClassSwap] = None,
    ) -> int:
        with storage_errors("Attendance marking"):
            try:
                with db_cursor(self._conn_factory) as (_, cur):
                    cur.execute(
                        """
                        INSERT INTO attendance_sessions
                            (timetable_id, session_date, marked_by_user_id, session_category, actual_course_code)
                        VALUES (%s, %s, %s, %s, %s)
                        """,
                        (
                            session.slot_id,
                            session.session_date,
                            session.marked_by,
                            session.category.value,
                            session.actual_course_code,
                        ),
                    )
                    session_id = int(cur.lastrowid)

                    if roster:
                        cur.executemany(
                            "INSERT INTO attendance_records (session_id, student_id, status) VALUES (%s, %s, %s)",
                            [(session_id, int(e.student_id), e.status.value) for e in roster],
                        )

                    if swap is not None:
                        cur.execute(
                            """
                            INSERT INTO class_swaps
                                (source_timetable_id, requesting_faculty_id, target_faculty_id,
                                 requested_date, reason, status)
                            VALUES (%s, %s, %s, %s, %s, %s)
                            """,
                            (
                                swap.slot_id,
                                swap.requesting_faculty_id,
                                swap.target_faculty_id,
                                swap.swap_date,
                                swap.reason,
                                swap.status.value,
                            ),
                        )
                    return session_id
            except mysql.connector.IntegrityError as e:
                raise self._translate_integrity_error(e, session) from e

    @staticmethod
    def _translate_integrity_error(err: mysql.connector.IntegrityError, session: NewSession) -> Exception:
        message = str(err)
        if is_duplicate_key(err):
            if "uq_record_session_student" in message:
                return ValidationError("A student appears more than once in the roster")
            logger.warning("Duplicate session for slot %s on %s", session.slot_id, session.session_date)
            return ConflictError("Attendance has already been marked for this slot on this date.")
        if is_missing_reference(err):
            if "fk_sessions_timetable" in message or "fk_swaps_timetable" in message:
                return NotFoundError("Timetable slot not found")
            if "fk_swaps_requesting" in message or "fk_swaps_target" in message:
                return ValidationError("Swap entry references an unknown faculty profile")
            return ValidationError("Roster references an unknown student")
        return ValidationError(f"Attendance data rejected by storage: {err.msg}")

    def list_sessions_for_slot(self, slot_id: int) -> Sequence[SessionLogRow]:
        with storage_errors("Session listing"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    sess.id, sess.session_date, sess.session_category, sess.actual_course_code,
                    sess.is_verified_by_faculty, sess.marked_by_user_id, u.email AS marked_by_email
                FROM attendance_sessions sess
                LEFT JOIN users u ON u.id = sess.marked_by_user_id
                WHERE sess.timetable_id=%s
                ORDER BY sess.session_date DESC
                """,
                (int(slot_id),),
            )
            return [
                SessionLogRow(
                    session_id=int(r["id"]),
                    session_date=r["session_date"],
                    category=SessionCategory(r["session_category"]),
                    actual_course_code=r.get("actual_course_code"),
                    is_verified=bool(r.get("is_verified_by_faculty")),
                    marked_by=int(r["marked_by_user_id"]),
                    marked_by_email=r.get("marked_by_email"),
                )
                for r in fetchall(cur)
            ]

    def list_records_for_session(self, session_id: int) -> Sequence[RecordRow]:
        with storage_errors("Record listing"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id AS student_id, s.roll_number, s.full_name, r.status
                FROM attendance_records r
                JOIN students s ON s.id = r.student_id
                WHERE r.session_id=%s
                ORDER BY s.roll_number ASC
                """,
                (int(session_id),),
            )
            return [
                RecordRow(
                    student_id=int(r["student_id"]),
                    roll_number=r["roll_number"],
                    full_name=r["full_name"],
                    status=RecordStatus(str(r["status"]).lower()),
                )
                for r in fetchall(cur)
            ]

    def list_swaps_for_section(
        self,
        *,
        section_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[ClassSwap]:
        clauses = ["t.section_id=%s"]
        params: list[object] = [int(section_id)]
        if start is not None:
            clauses.append("cs.requested_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("cs.requested_date <= %s")
            params.append(end)

        where = " AND ".join(clauses)

        with storage_errors("Swap listing"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    cs.id, cs.source_timetable_id, cs.requesting_faculty_id, cs.target_faculty_id,
                    cs.requested_date, cs.reason, cs.status
                FROM class_swaps cs
                JOIN timetable t ON t.id = cs.source_timetable_id
                WHERE {where}
                ORDER BY cs.requested_date DESC, cs.id DESC
                """,
                tuple(params),
            )
            return [
                ClassSwap(
                    swap_id=int(r["id"]),
                    slot_id=int(r["source_timetable_id"]),
                    requesting_faculty_id=r.get("requesting_faculty_id"),
                    target_faculty_id=r.get("target_faculty_id"),
                    swap_date=r["requested_date"],
                    reason=r["reason"],
                    status=SwapStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]
