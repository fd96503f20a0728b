from __future__ import annotations

import io

import qrcode

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError
from .model import Employee
from .repository import EmployeeRepository


class BadgeService:
    """Use case: render an employee's badge QR code.

    The QR payload is the bare employee identifier, which is what the scanner
    expects to decode.
    """

    def __init__(self, employees: EmployeeRepository, *, box_size: int = 10, border: int = 4):
        self._employees = employees
        self._box_size = int(box_size)
        self._border = int(border)

    def list_employees(self):
        return list(self._employees.list_all())

    def get_employee(self, employee_id: str) -> Employee:
        employee_id = require_non_empty(employee_id, "Employee id")
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee

    def render_badge_png(self, employee_id: str) -> bytes:
        employee = self.get_employee(employee_id)

        qr = qrcode.QRCode(box_size=self._box_size, border=self._border)
        qr.add_data(employee.employee_id)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()
