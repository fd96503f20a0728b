from __future__ import annotations

import io
from datetime import date

import pytest
from PIL import Image

from src.qr_attendance.qr_attendance.container import assemble
from src.qr_attendance.qr_attendance.core.enums import AttendanceStatus
from src.qr_attendance.qr_attendance.main import create_app
from src.qr_attendance.qr_attendance.scanner.decoder import DecodeResult

from tests.fakes import FakeCamera, ManualTimerFactory


@pytest.fixture
def container(employees_repo, attendance_repo, fixed_day):
    return assemble(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        camera=FakeCamera(),
        today_provider=lambda: fixed_day,
        timer_factory=ManualTimerFactory(),
    )


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()


def _png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (20, 20), "white").save(buf, format="PNG")
    return buf.getvalue()


def test_health(client):
    assert client.get("/api/health").get_json() == {"success": True}


def test_mark_flow(client):
    first = client.post("/api/attendance/mark", json={"employee_id": "E1"}).get_json()
    again = client.post("/api/attendance/mark", json={"employee_id": "E1"}).get_json()
    unknown = client.post("/api/attendance/mark", json={"employee_id": "E9"}).get_json()

    assert first["status"] == "newly_marked"
    assert first["employee"]["name"] == "Alice"
    assert again["status"] == "already_marked"
    assert unknown["status"] == "not_found"
    assert unknown["success"] is False

    roster = client.get("/api/attendance/today").get_json()
    assert roster["date"] == "2026-02-02"
    assert [e["name"] for e in roster["present"]] == ["Alice"]
    assert [e["name"] for e in roster["absent"]] == ["Bob"]


def test_mark_requires_employee_id(client):
    resp = client.post("/api/attendance/mark", json={})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_mark_rejects_non_string_id(client, attendance_repo):
    resp = client.post("/api/attendance/mark", json={"employee_id": 101})

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert attendance_repo.inserts == 0


def test_mark_ignores_client_supplied_date(client, attendance_repo, fixed_day):
    body = client.post("/api/attendance/mark", json={"employee_id": "E1", "date": "2031-12-31"}).get_json()

    assert body["status"] == "newly_marked"
    assert body["date"] == "2026-02-02"
    assert list(attendance_repo.rows) == [("E1", fixed_day)]


def test_mark_failure_is_generic(client, attendance_repo, monkeypatch):
    def boom(**kwargs):
        raise ConnectionError("db down")

    monkeypatch.setattr(attendance_repo, "create", boom)

    resp = client.post("/api/attendance/mark", json={"employee_id": "E1"})

    assert resp.status_code == 500
    assert resp.get_json()["status"] == "failed"
    assert "db down" not in resp.get_json()["message"]


def test_roster_for_explicit_date(client, attendance_repo):
    attendance_repo.create(employee_id="E2", work_date=date(2026, 1, 15), status=AttendanceStatus.PRESENT)

    roster = client.get("/api/attendance/today?date=2026-01-15").get_json()

    assert [e["id"] for e in roster["present"]] == ["E2"]
    assert roster["absent_count"] == 1


def test_scan_image_marks_decoded_badge(client, container, monkeypatch):
    monkeypatch.setattr(container.decoder, "decode_image", lambda img: DecodeResult(payload="E2"))

    resp = client.post(
        "/api/attendance/scan-image",
        data={"image": (io.BytesIO(_png_bytes()), "badge.png")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 200
    assert resp.get_json()["employee"]["name"] == "Bob"


def test_scan_image_without_qr(client, container, monkeypatch):
    monkeypatch.setattr(container.decoder, "decode_image", lambda img: None)

    resp = client.post(
        "/api/attendance/scan-image",
        data={"image": (io.BytesIO(_png_bytes()), "blank.png")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 400


def test_scan_image_requires_file(client):
    assert client.post("/api/attendance/scan-image", data={}).status_code == 400


def test_export_csv(client):
    client.post("/api/attendance/mark", json={"employee_id": "E1"})

    resp = client.get("/api/attendance/today/export?format=csv")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    text = resp.data.decode("utf-8-sig")
    assert text.splitlines()[0] == "date,id,name,department,status"
    assert "2026-02-02,E1,Alice,Eng,present" in text
    assert "2026-02-02,E2,Bob,Sales,absent" in text


def test_export_rejects_unknown_format(client):
    assert client.get("/api/attendance/today/export?format=pdf").status_code == 400


def test_employees_and_badges(client):
    employees = client.get("/api/employees").get_json()["employees"]
    assert {e["id"] for e in employees} == {"E1", "E2"}

    badge = client.get("/api/employees/E1/badge.png")
    assert badge.status_code == 200
    assert badge.mimetype == "image/png"

    assert client.get("/api/employees/E9/badge.png").status_code == 404


def test_scanner_routes(client, container):
    assert client.get("/api/scanner/status").get_json()["state"] == "idle"

    started = client.post("/api/scanner/start")
    assert started.status_code == 200
    assert started.get_json()["state"] == "scanning"

    assert client.post("/api/scanner/start").status_code == 409

    stopped = client.post("/api/scanner/stop").get_json()
    assert stopped["state"] == "idle"
    assert client.post("/api/scanner/stop").status_code == 200


def test_scanner_start_without_camera(monkeypatch, employees_repo, attendance_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    container = assemble(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        camera=FakeCamera(fail_open=True),
        timer_factory=ManualTimerFactory(),
    )
    client = create_app(container).test_client()

    resp = client.post("/api/scanner/start")

    assert resp.status_code == 503
    assert resp.get_json()["last_outcome"]["status"] == "failed"
