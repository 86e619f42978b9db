from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import date_arg, login_required, optional_date_arg, require_arg, roles_required
from ..container import Container
from ..core.constants import ALL_COURSES
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/student-report", endpoint="student_report")
    @login_required
    def student_report():
        return jsonify(
            container.report_service.semester_report(
                roll_number=require_arg("roll_number", "Roll number"),
                semester=require_arg("semester", "Semester"),
                start=optional_date_arg("start_date"),
                end=optional_date_arg("end_date"),
            )
        )

    @app.route("/api/admin/attendance-report", endpoint="section_report")
    @roles_required(Role.ADMIN, Role.FACULTY)
    def section_report():
        return jsonify(
            container.report_service.section_report(
                section_id=require_arg("section_id", "Section ID"),
                semester=require_arg("semester", "Semester"),
                course_code=request.args.get("course_code") or ALL_COURSES,
                start=optional_date_arg("start_date"),
                end=optional_date_arg("end_date"),
            )
        )

    @app.route("/api/common/week-grid", endpoint="week_grid")
    @login_required
    def week_grid():
        return jsonify(
            container.report_service.weekly_grid(
                section_id=require_arg("section_id", "Section ID"),
                semester=require_arg("semester", "Semester"),
                week_start=date_arg("start_date", "Week start date"),
            )
        )

    @app.route("/api/attendance/periodic", endpoint="monthly_grid")
    @roles_required(Role.FACULTY, Role.ADMIN)
    def monthly_grid():
        return jsonify(
            container.report_service.monthly_grid(
                section_id=require_arg("section_id", "Section ID"),
                semester=require_arg("semester", "Semester"),
                course_code=require_arg("course_code", "Course code"),
                month=require_arg("month", "Month"),
            )
        )

    @app.route("/api/admin/daily-attendance-overview", endpoint="daily_overview")
    @roles_required(Role.ADMIN, Role.FACULTY)
    def daily_overview():
        return jsonify(
            container.report_service.daily_overview(
                section_id=require_arg("section_id", "Section ID"),
                semester=require_arg("semester", "Semester"),
                on_date=date_arg("date", "Date"),
            )
        )
