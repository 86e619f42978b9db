from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_role, current_user_id, login_required, require_arg, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/common/timetable", endpoint="timetable_by_class")
    @login_required
    def timetable_by_class():
        return jsonify(
            container.timetable_service.get_timetable(
                section_id=require_arg("section_id", "Section ID"),
                semester=require_arg("semester", "Semester"),
            )
        )

    @app.route("/api/faculty/my-schedule", endpoint="faculty_schedule")
    @roles_required(Role.FACULTY, Role.ADMIN)
    def faculty_schedule():
        faculty_id = request.args.get("faculty_id") or None
        return jsonify(
            container.timetable_service.get_faculty_schedule(
                current_role=current_role(),
                current_user_id=current_user_id(),
                faculty_id=faculty_id,
            )
        )
