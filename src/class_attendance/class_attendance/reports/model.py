from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import SessionCategory


@dataclass(frozen=True)
class SessionFact:
    """Read-model: a session joined with the timetable slot it belongs to."""

    session_id: int
    slot_id: int
    section_id: int
    semester: int
    day: str
    slot_number: int
    scheduled_course_code: str
    session_date: date
    category: SessionCategory
    actual_course_code: Optional[str]
    is_verified: bool = False
