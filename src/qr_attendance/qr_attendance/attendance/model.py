from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from ..common.datetime_utils import format_iso_date
from ..core.enums import AttendanceStatus, ScanOutcomeKind
from ..employees.model import Employee


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance mark, keyed by (employee_id, work_date)."""

    employee_id: str
    work_date: date
    status: AttendanceStatus = AttendanceStatus.PRESENT

    def to_dict(self) -> dict:
        return {"id": self.employee_id, "date": format_iso_date(self.work_date), "status": self.status.value}


_MESSAGES = {
    ScanOutcomeKind.NOT_FOUND: "Employee not found",
    ScanOutcomeKind.ALREADY_MARKED: "Attendance already marked today",
    ScanOutcomeKind.NEWLY_MARKED: "Attendance marked",
    ScanOutcomeKind.FAILED: "Scan failed, please try again",
}


@dataclass(frozen=True)
class ScanOutcome:
    """Result of one scan attempt. Not persisted."""

    kind: ScanOutcomeKind
    work_date: Optional[date] = None
    employee: Optional[Employee] = None
    message: str = ""

    @classmethod
    def not_found(cls, work_date: date) -> "ScanOutcome":
        return cls(ScanOutcomeKind.NOT_FOUND, work_date, None, _MESSAGES[ScanOutcomeKind.NOT_FOUND])

    @classmethod
    def already_marked(cls, employee: Employee, work_date: date) -> "ScanOutcome":
        return cls(ScanOutcomeKind.ALREADY_MARKED, work_date, employee, _MESSAGES[ScanOutcomeKind.ALREADY_MARKED])

    @classmethod
    def newly_marked(cls, employee: Employee, work_date: date) -> "ScanOutcome":
        return cls(ScanOutcomeKind.NEWLY_MARKED, work_date, employee, _MESSAGES[ScanOutcomeKind.NEWLY_MARKED])

    @classmethod
    def failed(cls, message: Optional[str] = None, work_date: Optional[date] = None) -> "ScanOutcome":
        return cls(ScanOutcomeKind.FAILED, work_date, None, message or _MESSAGES[ScanOutcomeKind.FAILED])

    @property
    def success(self) -> bool:
        return self.kind in (ScanOutcomeKind.ALREADY_MARKED, ScanOutcomeKind.NEWLY_MARKED)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "status": self.kind.value,
            "message": self.message,
            "date": format_iso_date(self.work_date) if self.work_date else None,
            "employee": self.employee.to_dict() if self.employee else None,
        }


@dataclass(frozen=True)
class DailyRoster:
    """Read-model: every employee is in exactly one of present/absent."""

    work_date: date
    present: List[Employee] = field(default_factory=list)
    absent: List[Employee] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "date": format_iso_date(self.work_date),
            "present": [e.to_dict() for e in self.present],
            "absent": [e.to_dict() for e in self.absent],
            "present_count": len(self.present),
            "absent_count": len(self.absent),
        }

    def to_rows(self) -> list[dict]:
        day = format_iso_date(self.work_date)
        rows = [
            {"date": day, "id": e.employee_id, "name": e.name, "department": e.department, "status": "present"}
            for e in self.present
        ]
        rows += [
            {"date": day, "id": e.employee_id, "name": e.name, "department": e.department, "status": "absent"}
            for e in self.absent
        ]
        return rows
