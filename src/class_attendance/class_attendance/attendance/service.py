from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty, require_positive_int
from ..core.enums import RecordStatus, Role, SessionCategory
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..directory.repository import StudentRepository
from ..timetable.repository import TimetableRepository
from .classifier import classify
from .model import MarkResult, NewSession, RosterEntry
from .repository import AttendanceRepository
from .swap_logger import SwapLogger

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: mark one attendance session per timetable slot and date."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        timetable: TimetableRepository,
        students: StudentRepository,
        swap_logger: SwapLogger,
    ):
        self._attendance = attendance
        self._timetable = timetable
        self._students = students
        self._swap_logger = swap_logger

    @staticmethod
    def _as_date(value: date | str) -> date:
        if isinstance(value, date):
            return value
        return parse_iso_date(require_non_empty(value, "Date"))

    @staticmethod
    def _parse_status(value: Any) -> RecordStatus:
        if isinstance(value, RecordStatus):
            return value
        try:
            return RecordStatus(str(value or "").strip().lower())
        except ValueError:
            raise ValidationError(f"Invalid attendance status: {value!r}")

    def _parse_roster(self, roster: Optional[Iterable[Any]], *, section_id: int) -> list[RosterEntry]:
        if not roster:
            raise ValidationError("Roster is required unless the class is declared free")

        entries: list[RosterEntry] = []
        seen: set[int] = set()
        for item in roster:
            if isinstance(item, RosterEntry):
                entry = item
            else:
                try:
                    student_id, status = item
                except (TypeError, ValueError):
                    raise ValidationError(f"Invalid roster entry: {item!r}")
                entry = RosterEntry(
                    student_id=require_positive_int(student_id, "Student ID"),
                    status=self._parse_status(status),
                )

            if entry.student_id in seen:
                raise ValidationError(f"Student {entry.student_id} appears more than once in the roster")
            seen.add(entry.student_id)
            entries.append(entry)

        known = {s.student_id for s in self._students.list_by_section(section_id)}
        unknown = sorted(seen - known)
        if unknown:
            raise ValidationError(f"Unknown students in roster: {', '.join(str(i) for i in unknown)}")
        return entries

    def mark_attendance(
        self,
        *,
        slot_id: int,
        session_date: date | str,
        marker_id: int,
        selected_course_code: Optional[str],
        is_free: bool,
        roster: Optional[Sequence[Any]] = None,
        marker_role: Optional[Role] = None,
    ) -> MarkResult:
        """Create the session for (slot, date) with its records and swap entry.

        roster holds (student_id, status) pairs or RosterEntry values and is
        ignored for free periods.
        """

        slot_id = require_positive_int(slot_id, "Timetable ID")
        marker_id = require_positive_int(marker_id, "Marker ID")
        session_date = self._as_date(session_date)

        slot = self._timetable.get_by_id(slot_id)
        if not slot:
            raise NotFoundError("Timetable slot not found")

        selected = None
        if not is_free:
            selected = require_non_empty(selected_course_code, "Selected course code")

        classification = classify(slot.course_code, selected, bool(is_free))
        entries = (
            []
            if classification.category == SessionCategory.FREE
            else self._parse_roster(roster, section_id=slot.section_id)
        )

        # Fast path only; the unique index on (slot, date) decides under concurrency.
        if self._attendance.get_session_for_slot_and_date(slot_id=slot_id, session_date=session_date):
            logger.warning("Attendance already marked for slot %s on %s", slot_id, session_date)
            raise ConflictError("Attendance has already been marked for this slot on this date.")

        swap = self._swap_logger.build_entry(
            slot=slot,
            session_date=session_date,
            classification=classification,
            marker_id=marker_id,
            marker_role=marker_role,
        )

        session_id = self._attendance.create_session(
            session=NewSession(
                slot_id=slot_id,
                session_date=session_date,
                marked_by=marker_id,
                category=classification.category,
                actual_course_code=classification.actual_course_code,
            ),
            roster=entries,
            swap=swap,
        )
        logger.info(
            "Marked session %s for slot %s on %s (%s, %d records%s)",
            session_id,
            slot_id,
            session_date,
            classification.category.value,
            len(entries),
            ", swap logged" if swap else "",
        )
        return MarkResult(session_id=session_id, category=classification.category)

    def roster_for_slot(self, slot_id: int) -> list[dict]:
        slot = self._timetable.get_by_id(require_positive_int(slot_id, "Timetable ID"))
        if not slot:
            raise NotFoundError("Timetable slot not found")
        return [
            {
                "student_id": s.student_id,
                "roll_number": s.roll_number,
                "full_name": s.full_name,
                "email": s.email,
            }
            for s in self._students.list_by_section(slot.section_id)
        ]

    def sessions_for_slot(self, slot_id: int) -> list[dict]:
        rows = self._attendance.list_sessions_for_slot(require_positive_int(slot_id, "Timetable ID"))
        return [
            {
                "session_id": r.session_id,
                "session_date": r.session_date.strftime("%Y-%m-%d"),
                "category": r.category.value,
                "actual_course_code": r.actual_course_code,
                "is_verified": r.is_verified,
                "marked_by": r.marked_by_email or r.marked_by,
            }
            for r in rows
        ]

    def records_for_session(self, session_id: int) -> list[dict]:
        session_id = require_positive_int(session_id, "Session ID")
        if not self._attendance.get_session(session_id):
            raise NotFoundError("Attendance session not found")
        return [
            {
                "student_id": r.student_id,
                "roll_number": r.roll_number,
                "full_name": r.full_name,
                "status": r.status.value,
            }
            for r in self._attendance.list_records_for_session(session_id)
        ]

    def swaps_for_section(
        self,
        *,
        section_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[dict]:
        if start and end and end < start:
            raise ValidationError("End date must not be before start date")

        swaps = self._attendance.list_swaps_for_section(
            section_id=require_positive_int(section_id, "Section ID"), start=start, end=end
        )
        return [
            {
                "swap_id": s.swap_id,
                "slot_id": s.slot_id,
                "requesting_faculty_id": s.requesting_faculty_id,
                "target_faculty_id": s.target_faculty_id,
                "date": s.swap_date.strftime("%Y-%m-%d"),
                "reason": s.reason,
                "status": s.status.value,
            }
            for s in swaps
        ]
