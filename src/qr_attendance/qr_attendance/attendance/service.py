from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from ..common.datetime_utils import today
from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateRecordError, RecordingError
from ..employees.repository import EmployeeRepository
from ..mirror.base import AttendanceMirror
from .model import AttendanceRecord, DailyRoster, ScanOutcome
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceRecorder:
    """Use case: turn a decoded badge into at most one attendance mark per day.

    Known limitation: the directory lookup, the attendance lookup and the insert
    are separate statements with no transaction around them. Two scans of the
    same badge at the same moment can both see "not marked"; when the store
    rejects the second insert as a duplicate key it is reported as already
    marked, otherwise both inserts go through.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        mirror: Optional[AttendanceMirror] = None,
        today_provider: Callable[[], date] = today,
    ):
        self._attendance = attendance
        self._employees = employees
        self._mirror = mirror
        self._today = today_provider

    def mark_attendance(self, identifier: Optional[str], as_of: Optional[date] = None) -> ScanOutcome:
        work_date = as_of or self._today()
        employee_id = (identifier or "").strip()
        if not employee_id:
            return ScanOutcome.not_found(work_date)

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            logger.info("Unknown badge %r scanned for %s", employee_id, work_date)
            return ScanOutcome.not_found(work_date)

        if self._attendance.get_for_employee_and_date(employee.employee_id, work_date):
            logger.info("%s already marked for %s", employee.employee_id, work_date)
            return ScanOutcome.already_marked(employee, work_date)

        try:
            record = self._attendance.create(
                employee_id=employee.employee_id,
                work_date=work_date,
                status=AttendanceStatus.PRESENT,
            )
        except DuplicateRecordError:
            logger.info("%s was marked concurrently for %s", employee.employee_id, work_date)
            return ScanOutcome.already_marked(employee, work_date)
        except Exception as exc:
            raise RecordingError(f"Could not record attendance for {employee.employee_id}") from exc

        logger.info("Marked %s (%s) present for %s", employee.employee_id, employee.name, work_date)
        self._publish(record, employee)
        return ScanOutcome.newly_marked(employee, work_date)

    def fetch_daily_roster(self, as_of: Optional[date] = None) -> DailyRoster:
        work_date = as_of or self._today()
        directory = list(self._employees.list_all())
        present_ids = self._attendance.list_employee_ids_for_date(work_date, AttendanceStatus.PRESENT)

        present = [e for e in directory if e.employee_id in present_ids]
        absent = [e for e in directory if e.employee_id not in present_ids]
        return DailyRoster(work_date=work_date, present=present, absent=absent)

    def _publish(self, record: AttendanceRecord, employee) -> None:
        if self._mirror is None:
            return
        try:
            self._mirror.publish(record, employee)
        except Exception:
            # The record is already committed; mirror errors never change the outcome.
            logger.exception("Mirror publish failed for %s on %s", record.employee_id, record.work_date)
