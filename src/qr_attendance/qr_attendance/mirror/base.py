from __future__ import annotations

from abc import ABC, abstractmethod

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import format_iso_date
from ..employees.model import Employee


def mirror_row(record: AttendanceRecord, employee: Employee) -> dict:
    """Row shape written to the spreadsheet: date, id, name, status."""
    return {
        "date": format_iso_date(record.work_date),
        "id": employee.employee_id,
        "name": employee.name,
        "status": record.status.value,
    }


class AttendanceMirror(ABC):
    """Reflects committed attendance records into an external spreadsheet."""

    @abstractmethod
    def publish(self, record: AttendanceRecord, employee: Employee) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Release any resources held by the mirror."""
