from __future__ import annotations

from collections import Counter
from datetime import date, timedelta
from typing import Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import date_in_week, month_bounds, parse_year_month, weekday_name
from ..common.grouping import group_by
from ..common.percentages import percentage
from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import (
    ALL_COURSES,
    MONTHLY_DECIMALS,
    OVERALL_DECIMALS,
    SECTION_REPORT_DECIMALS,
    SEMESTER_REPORT_DECIMALS,
)
from ..core.enums import UNMARKED, RecordStatus
from ..core.exceptions import ValidationError
from ..directory.repository import CourseRepository, StudentRepository
from ..timetable.repository import TimetableRepository
from .model import SessionFact
from .repository import ReportRepository

# Two counting policies are kept apart on purpose: semester and section
# reports count only "present"; the monthly grid and its overall totals also
# count "late".
SEMESTER_ATTENDED = frozenset({RecordStatus.PRESENT})
GRID_ATTENDED = frozenset({RecordStatus.PRESENT, RecordStatus.LATE})


def _fmt(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def _check_range(start: Optional[date], end: Optional[date]) -> None:
    if start and end and end < start:
        raise ValidationError("End date must not be before start date")


class ReportService:
    """Read-only attendance aggregation over sessions, records and the timetable."""

    def __init__(
        self,
        reports: ReportRepository,
        timetable: TimetableRepository,
        students: StudentRepository,
        courses: CourseRepository,
    ):
        self._reports = reports
        self._timetable = timetable
        self._students = students
        self._courses = courses

    def _course_names(self, codes: Iterable[Optional[str]]) -> dict[str, str]:
        codes = [c for c in codes if c]
        found = self._courses.get_many(codes)
        return {code: (found[code].course_name if code in found else code) for code in codes}

    def _records_for(self, sessions: Iterable[SessionFact], *, student_id: Optional[int] = None) -> list[AttendanceRecord]:
        ids = [s.session_id for s in sessions]
        if not ids:
            return []
        return list(self._reports.list_records(session_ids=ids, student_id=student_id))

    def semester_report(
        self,
        *,
        semester: int,
        roll_number: Optional[str] = None,
        student_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[dict]:
        """Per-course attendance of one student for a semester.

        Totals count every non-free session held for the student's section,
        keyed by the course actually taught; only "present" is attended.
        """

        semester = require_positive_int(semester, "Semester")
        _check_range(start, end)

        if student_id is not None:
            student = self._students.get_by_id(require_positive_int(student_id, "Student ID"))
        else:
            student = self._students.get_by_roll_number(require_non_empty(roll_number, "Roll number"))
        if not student:
            return []

        sessions = self._reports.list_sessions(
            section_id=student.section_id, semester=semester, start=start, end=end
        )
        status_by_session = {
            r.session_id: r.status for r in self._records_for(sessions, student_id=student.student_id)
        }

        by_course = group_by(sessions, lambda s: s.actual_course_code)
        names = self._course_names(by_course.keys())

        rows = []
        for code, course_sessions in by_course.items():
            total = len(course_sessions)
            attended = sum(1 for s in course_sessions if status_by_session.get(s.session_id) in SEMESTER_ATTENDED)
            rows.append(
                {
                    "course_code": code,
                    "course_name": names.get(code, code),
                    "total": total,
                    "attended": attended,
                    "percentage": percentage(attended, total, SEMESTER_REPORT_DECIMALS),
                }
            )

        rows.sort(key=lambda r: (r["course_name"], r["course_code"]))
        return rows

    def section_report(
        self,
        *,
        section_id: int,
        semester: int,
        course_code: Optional[str] = ALL_COURSES,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[dict]:
        """Every student of a section against every course on its timetable.

        Courses come from the timetable, so a course with no sessions yet is
        still listed with a 0 total.
        """

        section_id = require_positive_int(section_id, "Section ID")
        semester = require_positive_int(semester, "Semester")
        _check_range(start, end)
        course_filter = (course_code or ALL_COURSES).strip()

        slots = self._timetable.list_for_section(section_id=section_id, semester=semester)
        codes = sorted({s.course_code for s in slots})
        if course_filter != ALL_COURSES:
            codes = [c for c in codes if c == course_filter]
        if not codes:
            return []

        names = self._course_names(codes)
        sessions = self._reports.list_sessions(section_id=section_id, semester=semester, start=start, end=end)
        totals = Counter(s.actual_course_code for s in sessions)
        course_by_session = {s.session_id: s.actual_course_code for s in sessions}

        attended: Counter = Counter()
        for r in self._records_for(sessions):
            if r.status in SEMESTER_ATTENDED:
                attended[(r.student_id, course_by_session[r.session_id])] += 1

        rows = []
        for student in self._students.list_by_section(section_id):
            for code in codes:
                total = totals.get(code, 0)
                count = attended.get((student.student_id, code), 0)
                rows.append(
                    {
                        "student_id": student.student_id,
                        "roll_number": student.roll_number,
                        "student_name": student.full_name,
                        "course_code": code,
                        "subject": names[code],
                        "total": total,
                        "attended": count,
                        "percentage": percentage(count, total, SECTION_REPORT_DECIMALS),
                    }
                )
        return rows

    def weekly_grid(self, *, section_id: int, semester: int, week_start: date) -> list[dict]:
        """Timetable of a week with the session (if any) held in each slot."""

        section_id = require_positive_int(section_id, "Section ID")
        semester = require_positive_int(semester, "Semester")

        entries = self._timetable.list_entries_for_section(section_id=section_id, semester=semester)
        sessions = self._reports.list_sessions(
            section_id=section_id,
            semester=semester,
            start=week_start,
            end=week_start + timedelta(days=6),
            include_free=True,
        )
        by_slot_date = {(s.slot_id, s.session_date): s for s in sessions}
        actual_names = self._course_names({s.actual_course_code for s in sessions})

        rows = []
        for e in entries:
            slot = e.slot
            on_date = date_in_week(week_start, slot.day)
            sess = by_slot_date.get((slot.slot_id, on_date))
            rows.append(
                {
                    "slot_id": slot.slot_id,
                    "day": slot.day,
                    "slot_number": slot.slot_number,
                    "date": _fmt(on_date),
                    "room": slot.room,
                    "scheduled_course": slot.course_code,
                    "scheduled_course_name": e.course_name,
                    "faculty_id": slot.faculty_id,
                    "faculty_name": e.faculty_name,
                    "session_id": sess.session_id if sess else None,
                    "category": sess.category.value if sess else None,
                    "actual_course": sess.actual_course_code if sess else None,
                    "actual_course_name": actual_names.get(sess.actual_course_code) if sess else None,
                }
            )
        return rows

    def monthly_grid(self, *, section_id: int, semester: int, course_code: str, month: str) -> list[dict]:
        """Students x sessions of one course in a month, plus semester totals.

        Cells without a record read "unmarked", never "absent". Present and
        late both count as attended here.
        """

        section_id = require_positive_int(section_id, "Section ID")
        semester = require_positive_int(semester, "Semester")
        course_code = require_non_empty(course_code, "Course code")
        year, mon = parse_year_month(require_non_empty(month, "Month"))
        first, last = month_bounds(year, mon)

        month_sessions = sorted(
            self._reports.list_sessions(
                section_id=section_id, semester=semester, course_code=course_code, start=first, end=last
            ),
            key=lambda s: (s.session_date, s.slot_number),
        )
        status_by_key = {(r.session_id, r.student_id): r.status for r in self._records_for(month_sessions)}

        semester_sessions = self._reports.list_sessions(
            section_id=section_id, semester=semester, course_code=course_code
        )
        overall_records = group_by(self._records_for(semester_sessions), lambda r: r.student_id)

        rows = []
        for student in self._students.list_by_section(section_id):
            cells = []
            for s in month_sessions:
                status = status_by_key.get((s.session_id, student.student_id))
                cells.append(
                    {
                        "date": _fmt(s.session_date),
                        "slot": s.slot_number,
                        "status": status.value if status else UNMARKED,
                    }
                )

            monthly_total = len(cells)
            monthly_attended = sum(
                1 for s in month_sessions if status_by_key.get((s.session_id, student.student_id)) in GRID_ATTENDED
            )

            # Overall totals only count sessions the student has a record for.
            mine = overall_records.get(student.student_id, [])
            overall_total = len(mine)
            overall_attended = sum(1 for r in mine if r.status in GRID_ATTENDED)

            rows.append(
                {
                    "student_id": student.student_id,
                    "roll_number": student.roll_number,
                    "student_name": student.full_name,
                    "records": cells,
                    "monthly_attended": monthly_attended,
                    "monthly_total": monthly_total,
                    "monthly_percentage": percentage(monthly_attended, monthly_total, MONTHLY_DECIMALS),
                    "overall_attended": overall_attended,
                    "overall_total": overall_total,
                    "overall_percentage": percentage(overall_attended, overall_total, OVERALL_DECIMALS),
                }
            )
        return rows

    def daily_overview(self, *, section_id: int, semester: int, on_date: date) -> list[dict]:
        """Slots scheduled on the weekday of on_date with that day's session counts."""

        section_id = require_positive_int(section_id, "Section ID")
        semester = require_positive_int(semester, "Semester")
        day = weekday_name(on_date)

        entries = [
            e
            for e in self._timetable.list_entries_for_section(section_id=section_id, semester=semester)
            if e.slot.day == day
        ]
        entries.sort(key=lambda e: e.slot.slot_number)

        sessions = self._reports.list_sessions(
            section_id=section_id, semester=semester, start=on_date, end=on_date, include_free=True
        )
        by_slot = {s.slot_id: s for s in sessions}
        counts = group_by(self._records_for(sessions), lambda r: r.session_id)
        actual_names = self._course_names({s.actual_course_code for s in sessions})

        rows = []
        for e in entries:
            sess = by_slot.get(e.slot.slot_id)
            records = counts.get(sess.session_id, []) if sess else []
            rows.append(
                {
                    "slot_id": e.slot.slot_id,
                    "slot_number": e.slot.slot_number,
                    "scheduled_course": e.slot.course_code,
                    "scheduled_course_name": e.course_name,
                    "faculty_name": e.faculty_name,
                    "session_id": sess.session_id if sess else None,
                    "category": sess.category.value if sess else None,
                    "is_verified": sess.is_verified if sess else None,
                    "actual_course": sess.actual_course_code if sess else None,
                    "actual_course_name": actual_names.get(sess.actual_course_code) if sess else None,
                    "present_count": sum(1 for r in records if r.status == RecordStatus.PRESENT),
                    "absent_count": sum(1 for r in records if r.status == RecordStatus.ABSENT),
                    "total_count": len(records),
                }
            )
        return rows
