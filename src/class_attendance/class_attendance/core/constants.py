"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Offset of each weekday from the week start used by the weekly grid.
# Saturday is intentionally absent: unknown days fall back to 0.
WEEKDAY_OFFSETS = {
    "Mon": 0,
    "Tue": 1,
    "Wed": 2,
    "Thu": 3,
    "Fri": 4,
}
DEFAULT_WEEKDAY_OFFSET = 0

# Display order of timetable days.
WEEKDAY_ORDER = {
    "Mon": 1,
    "Tue": 2,
    "Wed": 3,
    "Thu": 4,
    "Fri": 5,
    "Sat": 6,
}

FREE_PERIOD_REASON = "Class declared Free during attendance marking"
SWAP_REASON_TEMPLATE = "Course changed from {scheduled} to {actual}"

ALL_COURSES = "ALL"

SEMESTER_REPORT_DECIMALS = 2
SECTION_REPORT_DECIMALS = 1
MONTHLY_DECIMALS = 0
OVERALL_DECIMALS = 1
