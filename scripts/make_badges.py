"""Write one badge PNG per employee in the directory."""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.qr_attendance.qr_attendance.common.logging_setup import configure_logging
from src.qr_attendance.qr_attendance.container import build_container_from_settings


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--out", default="badges", help="output directory")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container_from_settings(settings)

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    count = 0
    for employee in container.badge_service.list_employees():
        path = out_dir / f"{employee.employee_id}.png"
        path.write_bytes(container.badge_service.render_badge_png(employee.employee_id))
        count += 1

    print(f"OK: wrote {count} badges to {out_dir}")


if __name__ == "__main__":
    main()
