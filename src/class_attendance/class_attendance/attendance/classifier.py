from __future__ import annotations

from typing import Optional

from ..core.enums import SessionCategory
from .model import Classification


def classify(scheduled_course_code: str, selected_course_code: Optional[str], is_free: bool) -> Classification:
    """Decide the session category and the course actually taught.

    Free wins over everything else; otherwise a course other than the
    scheduled one makes the session a swap.
    """

    if is_free:
        return Classification(SessionCategory.FREE, None)
    if selected_course_code != scheduled_course_code:
        return Classification(SessionCategory.SWAP, selected_course_code)
    return Classification(SessionCategory.NORMAL, selected_course_code)
