from __future__ import annotations

from datetime import date

import pytest

from src.class_attendance.class_attendance.attendance.service import AttendanceService
from src.class_attendance.class_attendance.attendance.swap_logger import SwapLogger
from src.class_attendance.class_attendance.core.enums import RecordStatus, Role, SessionCategory
from src.class_attendance.class_attendance.core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from tests.fakes import demo_world

MONDAY = date(2024, 1, 1)
ROSTER = [(1, "present"), (2, "absent"), (3, "late")]


def _service(world):
    return AttendanceService(world.store, world.timetable, world.students, SwapLogger(world.timetable, world.faculty))


def test_normal_session_writes_records_and_no_swap():
    world = demo_world()
    svc = _service(world)

    result = svc.mark_attendance(
        slot_id=1, session_date=MONDAY, marker_id=7, selected_course_code="CS101", is_free=False, roster=ROSTER
    )

    assert result.category == SessionCategory.NORMAL
    session = world.store.get_session(result.session_id)
    assert session.actual_course_code == "CS101"
    assert session.marked_by == 7
    assert session.is_verified is False
    assert {(r.student_id, r.status) for r in world.store.records} == {
        (1, RecordStatus.PRESENT),
        (2, RecordStatus.ABSENT),
        (3, RecordStatus.LATE),
    }
    assert world.store.swaps == []


def test_swap_session_logs_entry_with_covering_faculty():
    world = demo_world()
    svc = _service(world)

    result = svc.mark_attendance(
        slot_id=1, session_date="2024-01-01", marker_id=7, selected_course_code="CS102", is_free=False, roster=ROSTER
    )

    assert result.category == SessionCategory.SWAP
    assert world.store.get_session(result.session_id).actual_course_code == "CS102"
    assert len(world.store.records) == 3
    [swap] = world.store.swaps
    assert (swap.slot_id, swap.requesting_faculty_id, swap.target_faculty_id) == (1, 1, 2)
    assert swap.reason == "Course changed from CS101 to CS102"
    assert swap.swap_date == MONDAY


def test_free_session_writes_no_records_even_when_roster_given():
    world = demo_world()
    svc = _service(world)

    result = svc.mark_attendance(
        slot_id=1, session_date=MONDAY, marker_id=7, selected_course_code="CS102", is_free=True, roster=ROSTER
    )

    assert result.category == SessionCategory.FREE
    assert world.store.get_session(result.session_id).actual_course_code is None
    assert world.store.records == []
    [swap] = world.store.swaps
    assert swap.target_faculty_id is None
    assert swap.reason == "Class declared Free during attendance marking"


def test_second_mark_for_same_slot_and_date_conflicts():
    world = demo_world()
    svc = _service(world)
    svc.mark_attendance(slot_id=1, session_date=MONDAY, marker_id=7, selected_course_code="CS101", is_free=False, roster=ROSTER)

    with pytest.raises(ConflictError):
        svc.mark_attendance(slot_id=1, session_date=MONDAY, marker_id=8, selected_course_code="CS102", is_free=False, roster=ROSTER)

    assert len(world.store.sessions) == 1
    assert len(world.store.records) == 3
    assert world.store.swaps == []


def test_storage_constraint_rejects_duplicate_when_precheck_misses():
    world = demo_world()
    # Simulates two markers that both passed the read before either wrote.
    world.store.get_session_for_slot_and_date = lambda **_: None
    svc = _service(world)
    svc.mark_attendance(slot_id=1, session_date=MONDAY, marker_id=7, selected_course_code="CS101", is_free=False, roster=ROSTER)

    with pytest.raises(ConflictError):
        svc.mark_attendance(slot_id=1, session_date=MONDAY, marker_id=8, selected_course_code="CS101", is_free=False, roster=ROSTER)

    assert len(world.store.sessions) == 1


def test_same_slot_on_another_date_is_allowed():
    world = demo_world()
    svc = _service(world)
    svc.mark_attendance(slot_id=1, session_date=MONDAY, marker_id=7, selected_course_code="CS101", is_free=False, roster=ROSTER)
    svc.mark_attendance(slot_id=1, session_date=date(2024, 1, 8), marker_id=7, selected_course_code="CS101", is_free=False, roster=ROSTER)

    assert len(world.store.sessions) == 2


def test_failed_swap_write_leaves_nothing_behind():
    world = demo_world(fail_swap_write=True)
    svc = _service(world)

    with pytest.raises(InternalError):
        svc.mark_attendance(slot_id=1, session_date=MONDAY, marker_id=7, selected_course_code="CS102", is_free=False, roster=ROSTER)

    assert world.store.sessions == {}
    assert world.store.records == []


def test_unknown_slot_is_not_found():
    svc = _service(demo_world())

    with pytest.raises(NotFoundError):
        svc.mark_attendance(slot_id=99, session_date=MONDAY, marker_id=7, selected_course_code="CS101", is_free=False, roster=ROSTER)


@pytest.mark.parametrize(
    "roster",
    [
        [(1, "present"), (4, "present")],
        [(1, "present"), (42, "absent")],
        [(1, "present"), (1, "absent")],
        [(1, "excused")],
        [],
        None,
    ],
)
def test_invalid_roster_is_rejected_before_any_write(roster):
    world = demo_world()
    svc = _service(world)

    with pytest.raises(ValidationError):
        svc.mark_attendance(slot_id=1, session_date=MONDAY, marker_id=7, selected_course_code="CS101", is_free=False, roster=roster)

    assert world.store.sessions == {}


def test_missing_course_selection_is_rejected_unless_free():
    svc = _service(demo_world())

    with pytest.raises(ValidationError):
        svc.mark_attendance(slot_id=1, session_date=MONDAY, marker_id=7, selected_course_code="", is_free=False, roster=ROSTER)


def test_bad_date_is_rejected():
    svc = _service(demo_world())

    with pytest.raises(ValidationError):
        svc.mark_attendance(slot_id=1, session_date="01/01/2024", marker_id=7, selected_course_code="CS101", is_free=False, roster=ROSTER)


def test_status_is_case_insensitive():
    world = demo_world()
    svc = _service(world)

    svc.mark_attendance(
        slot_id=1, session_date=MONDAY, marker_id=7, selected_course_code="CS101", is_free=False, roster=[(1, "Present"), (2, " LATE ")]
    )

    assert [r.status for r in world.store.records] == [RecordStatus.PRESENT, RecordStatus.LATE]


def test_faculty_marker_becomes_substitute_for_unscheduled_course():
    world = demo_world()
    svc = _service(world)

    svc.mark_attendance(
        slot_id=1,
        session_date=MONDAY,
        marker_id=9,
        marker_role=Role.FACULTY,
        selected_course_code="CS999",
        is_free=False,
        roster=ROSTER,
    )

    assert world.store.swaps[0].target_faculty_id == 9


def test_read_views_for_slot_and_session():
    world = demo_world()
    svc = _service(world)
    result = svc.mark_attendance(slot_id=1, session_date=MONDAY, marker_id=7, selected_course_code="CS102", is_free=False, roster=ROSTER)

    assert [s["roll_number"] for s in svc.roster_for_slot(1)] == ["R001", "R002", "R003"]
    assert svc.sessions_for_slot(1) == [
        {
            "session_id": result.session_id,
            "session_date": "2024-01-01",
            "category": "swap",
            "actual_course_code": "CS102",
            "is_verified": False,
            "marked_by": 7,
        }
    ]
    assert [(r["roll_number"], r["status"]) for r in svc.records_for_session(result.session_id)] == [
        ("R001", "present"),
        ("R002", "absent"),
        ("R003", "late"),
    ]
    [swap] = svc.swaps_for_section(section_id=10)
    assert swap["date"] == "2024-01-01"
    assert swap["status"] == "approved"
    assert svc.swaps_for_section(section_id=20) == []
    assert svc.swaps_for_section(section_id=10, start=date(2024, 1, 2)) == []


def test_records_for_unknown_session_is_not_found():
    svc = _service(demo_world())

    with pytest.raises(NotFoundError):
        svc.records_for_session(123)


def test_swap_listing_rejects_inverted_range():
    svc = _service(demo_world())

    with pytest.raises(ValidationError):
        svc.swaps_for_section(section_id=10, start=date(2024, 2, 1), end=date(2024, 1, 1))
