from __future__ import annotations

from datetime import date
from typing import Optional, Set

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, work_date, status
                FROM attendance
                WHERE employee_id=%s AND work_date=%s
                LIMIT 1
                """,
                (employee_id, work_date),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AttendanceRecord(
                employee_id=str(r["employee_id"]),
                work_date=r["work_date"],
                status=AttendanceStatus(r["status"]),
            )

    def create(self, *, employee_id: str, work_date: date, status: AttendanceStatus) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance(employee_id, work_date, status)
                    VALUES(%s,%s,%s)
                    """,
                    (employee_id, work_date, status.value),
                )
        except mysql.connector.IntegrityError as exc:
            if exc.errno == errorcode.ER_DUP_ENTRY:
                raise DuplicateRecordError(f"Attendance for {employee_id} on {work_date} already exists") from exc
            raise
        return AttendanceRecord(employee_id=employee_id, work_date=work_date, status=status)

    def list_employee_ids_for_date(self, work_date: date, status: AttendanceStatus) -> Set[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id
                FROM attendance
                WHERE work_date=%s AND status=%s
                """,
                (work_date, status.value),
            )
            return {str(r["employee_id"]) for r in fetchall(cur)}
