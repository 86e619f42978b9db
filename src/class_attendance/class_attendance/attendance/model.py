from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import RecordStatus, SessionCategory, SwapStatus


@dataclass(frozen=True)
class AttendanceSession:
    """One dated occurrence of a timetable slot. Unique per (slot, date)."""

    session_id: int
    slot_id: int
    session_date: date
    marked_by: int
    category: SessionCategory
    actual_course_code: Optional[str]
    # Carried for schema compatibility; no operation here changes it.
    is_verified: bool = False


@dataclass(frozen=True)
class AttendanceRecord:
    record_id: int
    session_id: int
    student_id: int
    status: RecordStatus


@dataclass(frozen=True)
class ClassSwap:
    """Audit entry for a swapped or free period."""

    swap_id: int
    slot_id: int
    requesting_faculty_id: Optional[int]
    target_faculty_id: Optional[int]
    swap_date: date
    reason: str
    status: SwapStatus = SwapStatus.APPROVED


@dataclass(frozen=True)
class RosterEntry:
    student_id: int
    status: RecordStatus


@dataclass(frozen=True)
class Classification:
    category: SessionCategory
    actual_course_code: Optional[str]


@dataclass(frozen=True)
class NewSession:
    slot_id: int
    session_date: date
    marked_by: int
    category: SessionCategory
    actual_course_code: Optional[str]


@dataclass(frozen=True)
class NewClassSwap:
    slot_id: int
    requesting_faculty_id: Optional[int]
    target_faculty_id: Optional[int]
    swap_date: date
    reason: str
    status: SwapStatus = SwapStatus.APPROVED


@dataclass(frozen=True)
class MarkResult:
    session_id: int
    category: SessionCategory


@dataclass(frozen=True)
class SessionLogRow:
    """Read-model for the per-slot session history."""

    session_id: int
    session_date: date
    category: SessionCategory
    actual_course_code: Optional[str]
    is_verified: bool
    marked_by: int
    marked_by_email: Optional[str] = None


@dataclass(frozen=True)
class RecordRow:
    """Read-model: a record joined with its student."""

    student_id: int
    roll_number: str
    full_name: str
    status: RecordStatus
