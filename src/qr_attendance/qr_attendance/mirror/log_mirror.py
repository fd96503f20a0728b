from __future__ import annotations

import logging

from ..attendance.model import AttendanceRecord
from ..employees.model import Employee
from .base import AttendanceMirror, mirror_row

logger = logging.getLogger(__name__)


class LogMirror(AttendanceMirror):
    """Stand-in for a hosted sheet: only logs the row it would write."""

    def publish(self, record: AttendanceRecord, employee: Employee) -> None:
        logger.info("Updating attendance sheet: %s", mirror_row(record, employee))
