from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..attendance.model import AttendanceRecord
from .model import SessionFact


class ReportRepository(Protocol):
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
        """Sessions of a section ordered by date then slot number.

        course_code filters on the course actually taught. Free sessions are
        left out unless include_free is set.
        """

        raise NotImplementedError

    def list_records(
        self,
        *,
        session_ids: Sequence[int],
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
