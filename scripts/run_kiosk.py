"""Terminal kiosk: scan badges with the local camera until Ctrl+C."""

from __future__ import annotations

import importlib
import sys
import threading
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.qr_attendance.qr_attendance.common.logging_setup import configure_logging
from src.qr_attendance.qr_attendance.container import build_container_from_settings
from src.qr_attendance.qr_attendance.core.enums import ScanOutcomeKind


def _describe(outcome) -> str:
    if outcome.kind == ScanOutcomeKind.NEWLY_MARKED:
        return f"Marked present: {outcome.employee.name} ({outcome.employee.department or '-'})"
    if outcome.kind == ScanOutcomeKind.ALREADY_MARKED:
        return f"Already marked today: {outcome.employee.name}"
    return outcome.message


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container_from_settings(settings)
    session = container.scan_session

    done = threading.Event()

    def on_outcome(outcome) -> None:
        print(_describe(outcome))
        done.set()

    session.subscribe(on_outcome)
    try:
        while True:
            done.clear()
            if not session.start():
                break
            print("Show a badge to the camera...")
            while not done.wait(0.5):
                pass
    except KeyboardInterrupt:
        pass
    finally:
        container.close()


if __name__ == "__main__":
    main()
