from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceSession, ClassSwap, NewClassSwap, NewSession, RecordRow, RosterEntry, SessionLogRow


class AttendanceRepository(Protocol):
    def get_session(self, session_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def get_session_for_slot_and_date(self, *, slot_id: int, session_date: date) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def create_session(
        self,
        *,
        session: NewSession,
        roster: Sequence[RosterEntry],
        swap: Optional[NewClassSwap] = None,
    ) -> int:
        """Insert the session, its records and the swap entry atomically.

        Raises ConflictError when a session already exists for the slot and
        date (enforced by the storage unique index), ValidationError when a
        roster entry references an unknown student. Nothing is written when
        any step fails. Returns the new session id.
        """

        raise NotImplementedError

    def list_sessions_for_slot(self, slot_id: int) -> Sequence[SessionLogRow]:
        raise NotImplementedError

    def list_records_for_session(self, session_id: int) -> Sequence[RecordRow]:
        raise NotImplementedError

    def list_swaps_for_section(
        self,
        *,
        section_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[ClassSwap]:
        raise NotImplementedError
