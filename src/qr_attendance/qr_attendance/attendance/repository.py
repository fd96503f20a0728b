from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Set

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(self, *, employee_id: str, work_date: date, status: AttendanceStatus) -> AttendanceRecord:
        """Insert one row.

        Implementations raise ``DuplicateRecordError`` when the store rejects the
        key as already present.
        """

        raise NotImplementedError

    def list_employee_ids_for_date(self, work_date: date, status: AttendanceStatus) -> Set[str]:
        raise NotImplementedError
