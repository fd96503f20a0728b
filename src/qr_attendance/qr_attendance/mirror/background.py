from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..employees.model import Employee
from .base import AttendanceMirror

logger = logging.getLogger(__name__)


class BackgroundMirror(AttendanceMirror):
    """Fire-and-forget wrapper: runs another mirror on a worker thread.

    Failures of the wrapped mirror are logged and swallowed; ``publish`` returns
    as soon as the work is queued.
    """

    def __init__(self, inner: AttendanceMirror, *, executor: Optional[ThreadPoolExecutor] = None):
        self._inner = inner
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="mirror")

    def publish(self, record: AttendanceRecord, employee: Employee) -> Future:
        return self._executor.submit(self._run, record, employee)

    def _run(self, record: AttendanceRecord, employee: Employee) -> bool:
        try:
            self._inner.publish(record, employee)
            return True
        except Exception:
            logger.exception("Mirror update failed for %s on %s", record.employee_id, record.work_date)
            return False

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        self._inner.close()
