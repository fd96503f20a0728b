"""Settings shared by every environment, read from environment variables."""

import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


def env_optional_int(name: str):
    value = os.getenv(name, "").strip()
    return int(value) if value else None


def db_config_from_env(*, default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "qr_attendance"),
    }


# Scan loop
SCAN_POLL_INTERVAL_MS = int(os.getenv("SCAN_POLL_INTERVAL_MS", "500"))
CAMERA_INDEX = int(os.getenv("CAMERA_INDEX", "0"))
# Device index used for the rear-facing ("environment") preference
CAMERA_INDEX_ENVIRONMENT = env_optional_int("CAMERA_INDEX_ENVIRONMENT")

# Spreadsheet mirror: none / log / workbook
MIRROR_BACKEND = os.getenv("MIRROR_BACKEND", "log")
MIRROR_WORKBOOK_PATH = os.getenv("MIRROR_WORKBOOK_PATH", "instance/attendance_mirror.xlsx")

# Record attendance against the UTC calendar date instead of the local one
USE_UTC_DATE = env_flag("USE_UTC_DATE", "0")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
