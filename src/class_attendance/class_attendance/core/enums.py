from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles allowed to act on attendance."""

    ADMIN = "admin"
    FACULTY = "faculty"
    CR = "cr"


class SessionCategory(str, Enum):
    """How a held session relates to the timetable."""

    NORMAL = "normal"
    SWAP = "swap"
    FREE = "free"


class RecordStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class SwapStatus(str, Enum):
    """Swap rows are an audit log; only APPROVED is ever written."""

    APPROVED = "approved"


# Grid cell value for a session with no record for a student.
UNMARKED = "unmarked"
