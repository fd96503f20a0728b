from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: an entry of the employee directory.

    Note: Rows are owned by the directory process; this system only reads them.
    """

    employee_id: str
    name: str
    department: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.employee_id, "name": self.name, "department": self.department}
