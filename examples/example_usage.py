"""Example: using the service layer without Flask.

Prints this week's grid for the demo section from database/seed.sql.
"""

import importlib
import sys
from datetime import date, timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.class_attendance.class_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    today = date.today()
    monday = today - timedelta(days=today.weekday())
    for row in container.report_service.weekly_grid(section_id=10, semester=3, week_start=monday):
        print(row["day"], row["slot_number"], row["scheduled_course"], row["category"] or "-")


if __name__ == "__main__":
    main()
