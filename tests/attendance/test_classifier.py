from src.class_attendance.class_attendance.attendance.classifier import classify
from src.class_attendance.class_attendance.core.enums import SessionCategory


def test_same_course_is_normal():
    result = classify("CS101", "CS101", False)

    assert result.category == SessionCategory.NORMAL
    assert result.actual_course_code == "CS101"


def test_other_course_is_swap():
    result = classify("CS101", "CS102", False)

    assert result.category == SessionCategory.SWAP
    assert result.actual_course_code == "CS102"


def test_free_wins_over_selected_course():
    assert classify("CS101", "CS102", True).category == SessionCategory.FREE
    assert classify("CS101", "CS101", True).category == SessionCategory.FREE
    assert classify("CS101", None, True).actual_course_code is None
