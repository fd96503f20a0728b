from __future__ import annotations

import logging
import threading
from pathlib import Path

from openpyxl import Workbook, load_workbook

from ..attendance.model import AttendanceRecord
from ..core.constants import MIRROR_COLUMNS, MIRROR_SHEET_NAME
from ..employees.model import Employee
from .base import AttendanceMirror, mirror_row

logger = logging.getLogger(__name__)


class WorkbookMirror(AttendanceMirror):
    """Appends one row per new attendance record to an .xlsx workbook."""

    def __init__(self, path: str | Path, *, sheet_name: str = MIRROR_SHEET_NAME):
        self._path = Path(path)
        self._sheet_name = sheet_name
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _open(self):
        if self._path.exists():
            wb = load_workbook(self._path)
            if self._sheet_name in wb.sheetnames:
                return wb, wb[self._sheet_name]
            ws = wb.create_sheet(self._sheet_name)
        else:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            wb = Workbook()
            ws = wb.active
            ws.title = self._sheet_name

        ws.append(list(MIRROR_COLUMNS))
        return wb, ws

    def publish(self, record: AttendanceRecord, employee: Employee) -> None:
        row = mirror_row(record, employee)
        with self._lock:
            wb, ws = self._open()
            ws.append([row[c] for c in MIRROR_COLUMNS])
            wb.save(self._path)
        logger.info("Mirrored %s/%s to %s", row["id"], row["date"], self._path)
