from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from functools import partial
from typing import Callable, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceRecorder
from .common.datetime_utils import today
from .core.constants import DEFAULT_CAMERA_INDEX, DEFAULT_POLL_INTERVAL_MS, REAR_FACING
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import BadgeService
from .mirror.base import AttendanceMirror
from .mirror.factory import MirrorFactory
from .scanner.camera import Camera, OpenCVCamera
from .scanner.decoder import PyzbarDecoder
from .scanner.loop import TimerFactory
from .scanner.session import ScanSession
from .scanner.timer import RepeatingTimer


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    mirror: Optional[AttendanceMirror]
    decoder: PyzbarDecoder

    recorder: AttendanceRecorder
    badge_service: BadgeService
    scan_session: ScanSession

    def close(self) -> None:
        self.scan_session.stop()
        if self.mirror is not None:
            self.mirror.close()


def assemble(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    camera: Camera,
    mirror: Optional[AttendanceMirror] = None,
    conn: Optional[DatabaseConnection] = None,
    decoder: Optional[PyzbarDecoder] = None,
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    use_utc_date: bool = False,
    today_provider: Optional[Callable[[], date]] = None,
    timer_factory: TimerFactory = RepeatingTimer,
) -> Container:
    decoder = decoder or PyzbarDecoder()
    recorder = AttendanceRecorder(
        attendance_repo,
        employees_repo,
        mirror=mirror,
        today_provider=today_provider or partial(today, use_utc=use_utc_date),
    )
    scan_session = ScanSession(
        recorder,
        camera,
        decoder,
        poll_interval_ms=poll_interval_ms,
        timer_factory=timer_factory,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        mirror=mirror,
        decoder=decoder,
        recorder=recorder,
        badge_service=BadgeService(employees_repo),
        scan_session=scan_session,
    )


def build_container(
    *,
    db_config: dict,
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    camera_index: int = DEFAULT_CAMERA_INDEX,
    rear_camera_index: Optional[int] = None,
    mirror_backend: str = "log",
    mirror_workbook_path: str = "instance/attendance_mirror.xlsx",
    use_utc_date: bool = False,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    indexes = {REAR_FACING: int(rear_camera_index)} if rear_camera_index is not None else {}
    camera = OpenCVCamera(default_index=camera_index, indexes=indexes)
    mirror = MirrorFactory(workbook_path=mirror_workbook_path).build(mirror_backend)

    return assemble(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        camera=camera,
        mirror=mirror,
        conn=conn,
        poll_interval_ms=poll_interval_ms,
        use_utc_date=use_utc_date,
    )


def build_container_from_settings(settings) -> Container:
    rear_index = getattr(settings, "CAMERA_INDEX_ENVIRONMENT", None)
    return build_container(
        db_config=dict(getattr(settings, "DB_CONFIG")),
        poll_interval_ms=int(getattr(settings, "SCAN_POLL_INTERVAL_MS", DEFAULT_POLL_INTERVAL_MS)),
        camera_index=int(getattr(settings, "CAMERA_INDEX", DEFAULT_CAMERA_INDEX)),
        rear_camera_index=rear_index,
        mirror_backend=str(getattr(settings, "MIRROR_BACKEND", "log")),
        mirror_workbook_path=str(getattr(settings, "MIRROR_WORKBOOK_PATH", "instance/attendance_mirror.xlsx")),
        use_utc_date=bool(getattr(settings, "USE_UTC_DATE", False)),
    )
