from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Status stored in the attendance table. Only PRESENT is ever written."""

    PRESENT = "present"


class ScanOutcomeKind(str, Enum):
    NOT_FOUND = "not_found"
    ALREADY_MARKED = "already_marked"
    NEWLY_MARKED = "newly_marked"
    FAILED = "failed"


class ScanState(str, Enum):
    """States of the camera scan loop."""

    IDLE = "idle"
    ACQUIRING = "acquiring"
    SCANNING = "scanning"
    STOPPING = "stopping"


class MirrorBackend(str, Enum):
    NONE = "none"
    LOG = "log"
    WORKBOOK = "workbook"
