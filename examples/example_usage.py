"""Example: use the service layer directly (no Flask).

Marks one badge for today and prints the roster.
"""

import importlib
import sys

from config import get_settings_module

from src.qr_attendance.qr_attendance.common.logging_setup import configure_logging
from src.qr_attendance.qr_attendance.container import build_container_from_settings


def main(badge: str = "E1"):
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container_from_settings(settings)
    try:
        print(container.recorder.mark_attendance(badge).to_dict())
        print(container.recorder.fetch_daily_roster().to_dict())
    finally:
        container.close()


if __name__ == "__main__":
    main(*sys.argv[1:2])
