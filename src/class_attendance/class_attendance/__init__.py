"""Class Attendance package.

Organized by feature modules (timetable, directory, attendance, reports)
with a thin Flask controller layer over service/repository layers.
"""
