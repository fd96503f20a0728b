from __future__ import annotations

from datetime import date

import pytest

from src.qr_attendance.qr_attendance.employees.model import Employee

from tests.fakes import InMemoryAttendance, InMemoryEmployees


@pytest.fixture
def fixed_day() -> date:
    return date(2026, 2, 2)


@pytest.fixture
def alice() -> Employee:
    return Employee(employee_id="E1", name="Alice", department="Eng")


@pytest.fixture
def bob() -> Employee:
    return Employee(employee_id="E2", name="Bob", department="Sales")


@pytest.fixture
def employees_repo(alice, bob) -> InMemoryEmployees:
    return InMemoryEmployees([alice, bob])


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()
