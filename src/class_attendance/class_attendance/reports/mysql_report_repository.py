from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..core.enums import RecordStatus, SessionCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, storage_errors
from .model import SessionFact
from .repository import ReportRepository


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_sessions(
        self,
        *,
        section_id: int,
        semester: Optional[int] = None,
        course_code: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        include_free: bool = False,
    ) -> Sequence[SessionFact]:
        clauses = ["t.section_id=%s"]
        params: list[object] = [int(section_id)]

        if semester is not None:
            clauses.append("t.semester=%s")
            params.append(int(semester))
        if course_code is not None:
            clauses.append("sess.actual_course_code=%s")
            params.append(course_code)
        if start is not None:
            clauses.append("sess.session_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("sess.session_date <= %s")
            params.append(end)
        if not include_free:
            clauses.append("sess.session_category <> %s")
            params.append(SessionCategory.FREE.value)

        where = " AND ".join(clauses)

        with storage_errors("Session report query"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    sess.id, sess.timetable_id, sess.session_date, sess.session_category,
                    sess.actual_course_code, sess.is_verified_by_faculty,
                    t.section_id, t.semester, t.day, t.slot_number, t.course_code
                FROM attendance_sessions sess
                JOIN timetable t ON t.id = sess.timetable_id
                WHERE {where}
                ORDER BY sess.session_date ASC, t.slot_number ASC
                """,
                tuple(params),
            )
            return [
                SessionFact(
                    session_id=int(r["id"]),
                    slot_id=int(r["timetable_id"]),
                    section_id=int(r["section_id"]),
                    semester=int(r["semester"]),
                    day=r["day"],
                    slot_number=int(r["slot_number"]),
                    scheduled_course_code=r["course_code"],
                    session_date=r["session_date"],
                    category=SessionCategory(r["session_category"]),
                    actual_course_code=r.get("actual_course_code"),
                    is_verified=bool(r.get("is_verified_by_faculty")),
                )
                for r in fetchall(cur)
            ]

    def list_records(
        self,
        *,
        session_ids: Sequence[int],
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        ids = [int(i) for i in session_ids]
        if not ids:
            return []

        sql = f"SELECT id, session_id, student_id, status FROM attendance_records WHERE session_id IN ({in_clause(ids)})"
        params: list[object] = list(ids)
        if student_id is not None:
            sql += " AND student_id=%s"
            params.append(int(student_id))

        with storage_errors("Record report query"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                AttendanceRecord(
                    record_id=int(r["id"]),
                    session_id=int(r["session_id"]),
                    student_id=int(r["student_id"]),
                    status=RecordStatus(str(r["status"]).lower()),
                )
                for r in fetchall(cur)
            ]
