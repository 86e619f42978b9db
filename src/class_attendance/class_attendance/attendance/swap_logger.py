from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..core.constants import FREE_PERIOD_REASON, SWAP_REASON_TEMPLATE
from ..core.enums import Role, SessionCategory, SwapStatus
from ..directory.repository import FacultyRepository
from ..timetable.model import TimetableSlot
from ..timetable.repository import TimetableRepository
from .model import Classification, NewClassSwap

logger = logging.getLogger(__name__)


class SwapLogger:
    """Derives the swap/free audit entry for a classified session."""

    def __init__(self, timetable: TimetableRepository, faculty: FacultyRepository):
        self._timetable = timetable
        self._faculty = faculty

    def build_entry(
        self,
        *,
        slot: TimetableSlot,
        session_date: date,
        classification: Classification,
        marker_id: int,
        marker_role: Optional[Role] = None,
    ) -> Optional[NewClassSwap]:
        if classification.category == SessionCategory.NORMAL:
            return None

        if classification.category == SessionCategory.FREE:
            return NewClassSwap(
                slot_id=slot.slot_id,
                requesting_faculty_id=slot.faculty_id,
                target_faculty_id=None,
                swap_date=session_date,
                reason=FREE_PERIOD_REASON,
                status=SwapStatus.APPROVED,
            )

        actual = classification.actual_course_code
        return NewClassSwap(
            slot_id=slot.slot_id,
            requesting_faculty_id=slot.faculty_id,
            target_faculty_id=self.resolve_covering_faculty(
                slot=slot, actual_course_code=actual, marker_id=marker_id, marker_role=marker_role
            ),
            swap_date=session_date,
            reason=SWAP_REASON_TEMPLATE.format(scheduled=slot.course_code, actual=actual),
            status=SwapStatus.APPROVED,
        )

    def resolve_covering_faculty(
        self,
        *,
        slot: TimetableSlot,
        actual_course_code: Optional[str],
        marker_id: int,
        marker_role: Optional[Role],
    ) -> Optional[int]:
        """Faculty who teaches the actual course to this section, if any.

        Falls back to the marking faculty member when the timetable has no
        slot for that course; otherwise None.
        """

        if actual_course_code:
            candidates = self._timetable.find_by_course_and_section(
                section_id=slot.section_id, course_code=actual_course_code
            )
            if candidates:
                return candidates[0].faculty_id

        if marker_role == Role.FACULTY:
            profile = self._faculty.get_by_user_id(int(marker_id))
            if profile:
                logger.warning(
                    "No slot teaches %s to section %s; recording marker faculty %s as substitute",
                    actual_course_code,
                    slot.section_id,
                    profile.faculty_id,
                )
                return profile.faculty_id

        logger.warning(
            "Could not resolve covering faculty for %s in section %s", actual_course_code, slot.section_id
        )
        return None
