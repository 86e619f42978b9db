from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .attendance.swap_logger import SwapLogger
from .database.connection import DBConfig, DatabaseConnection
from .directory.mysql_directory_repository import (
    MySQLCourseRepository,
    MySQLFacultyRepository,
    MySQLStudentRepository,
)
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.service import ReportService
from .timetable.mysql_timetable_repository import MySQLTimetableRepository
from .timetable.service import TimetableService


@dataclass(frozen=True)
class Container:
    attendance_service: AttendanceService
    report_service: ReportService
    timetable_service: TimetableService


def build_container(*, db_config: dict) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    timetable_repo = MySQLTimetableRepository(conn)
    students_repo = MySQLStudentRepository(conn)
    faculty_repo = MySQLFacultyRepository(conn)
    courses_repo = MySQLCourseRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    reports_repo = MySQLReportRepository(conn)

    return Container(
        attendance_service=AttendanceService(
            attendance_repo,
            timetable_repo,
            students_repo,
            SwapLogger(timetable_repo, faculty_repo),
        ),
        report_service=ReportService(reports_repo, timetable_repo, students_repo, courses_repo),
        timetable_service=TimetableService(timetable_repo, faculty_repo),
    )
