from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_optional_date
from ..common.web import current_role, current_user_id, require_arg, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError


def _roster_from_payload(records) -> list[tuple]:
    if records is None:
        return []
    if not isinstance(records, list):
        raise ValidationError("records must be a list")

    roster = []
    for r in records:
        if not isinstance(r, dict):
            raise ValidationError("Each record must be an object with id and status")
        roster.append((r.get("id", r.get("student_id")), r.get("status")))
    return roster


def register(app: Flask, container: Container) -> None:
    @app.route("/api/cr/attendance", methods=["POST"], endpoint="mark_attendance")
    @roles_required(Role.CR, Role.FACULTY, Role.ADMIN)
    def mark_attendance():
        data = request.get_json(silent=True) or {}
        is_free = data.get("is_free", False)
        if not isinstance(is_free, bool):
            raise ValidationError("is_free must be true or false")

        result = container.attendance_service.mark_attendance(
            slot_id=data.get("timetable_id"),
            session_date=data.get("date"),
            marker_id=current_user_id(),
            marker_role=current_role(),
            selected_course_code=data.get("selected_course_code"),
            is_free=is_free,
            roster=None if is_free else _roster_from_payload(data.get("records")),
        )
        return jsonify(
            {
                "message": "Attendance processed",
                "session_id": result.session_id,
                "category": result.category.value,
            }
        )

    @app.route("/api/cr/students-by-timetable/<int:tt_id>", endpoint="students_by_timetable")
    @roles_required(Role.CR, Role.FACULTY, Role.ADMIN)
    def students_by_timetable(tt_id: int):
        return jsonify(container.attendance_service.roster_for_slot(tt_id))

    @app.route("/api/admin/sessions-by-timetable/<int:tt_id>", endpoint="sessions_by_timetable")
    @roles_required(Role.ADMIN)
    def sessions_by_timetable(tt_id: int):
        return jsonify(container.attendance_service.sessions_for_slot(tt_id))

    @app.route("/api/admin/records-by-session/<int:session_id>", endpoint="records_by_session")
    @roles_required(Role.ADMIN)
    def records_by_session(session_id: int):
        return jsonify(container.attendance_service.records_for_session(session_id))

    @app.route("/api/admin/class-swaps", endpoint="class_swaps")
    @roles_required(Role.ADMIN, Role.FACULTY)
    def class_swaps():
        return jsonify(
            container.attendance_service.swaps_for_section(
                section_id=require_arg("section_id", "Section ID"),
                start=parse_optional_date(request.args.get("start_date")),
                end=parse_optional_date(request.args.get("end_date")),
            )
        )
