from __future__ import annotations

import io
from datetime import datetime, timezone

import pytest
from openpyxl import load_workbook

from src.checkin_system.checkin_system.attendance.service import AttendanceService
from src.checkin_system.checkin_system.container import Container
from src.checkin_system.checkin_system.location.model import NetworkLocation
from src.checkin_system.checkin_system.main import create_app
from src.checkin_system.checkin_system.reports.service import ReportService
from src.checkin_system.checkin_system.users.service import AuthService, UserService


class FixedZone:
    def timezone_at(self, latitude, longitude):
        return "UTC"


class FakeLocator:
    def __init__(self, result=None):
        self.result = result

    def resolve(self, query):
        return self.result


class RecordingPhotoStore:
    def is_ready(self):
        return True

    def destroy(self, public_id):
        return "error"


@pytest.fixture
def locator():
    return FakeLocator()


@pytest.fixture
def app(monkeypatch, attendance_repo, users_repo, settings_repo, cutoff_service, locator):
    monkeypatch.setenv("APP_ENV", "testing")
    photos = RecordingPhotoStore()
    container = Container(
        conn=None,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        reverse_geocoder=None,
        network_locator=locator,
        timezone_lookup=FixedZone(),
        photo_store=photos,
        cutoff_service=cutoff_service,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, admin_invite_code="let-me-in"),
        attendance_service=AttendanceService(
            attendance_repo, cutoff_service, timezone_lookup=FixedZone(), photo_store=photos
        ),
        report_service=ReportService(attendance_repo, users_repo, cutoff_service),
    )
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


def _login_as(client, user):
    with client.session_transaction() as sess:
        sess["user_id"] = user.user_id
        sess["name"] = user.name
        sess["email"] = user.email
        sess["role"] = user.role.value


def test_health(client):
    assert client.get("/health").get_json() == {"ok": True}


def test_login_me_logout(client):
    res = client.post("/api/login", json={"email": "jane@example.com", "password": "user1234"})
    assert res.status_code == 200
    assert res.get_json()["user"]["role"] == "user"

    assert client.get("/api/me").get_json()["user"]["name"] == "Jane Doe"

    client.post("/api/logout")
    assert client.get("/api/me").status_code == 401


def test_login_wrong_password(client):
    res = client.post("/api/login", json={"email": "jane@example.com", "password": "bad"})

    assert res.status_code == 401
    assert res.get_json() == {"error": "Invalid email or password"}


def test_checkin_flow(client, users):
    _login_as(client, users["jane"])

    res = client.post("/api/attendance", json={"latitude": 10.5, "longitude": 106.7, "accuracy": 5})
    assert res.status_code == 201
    item = res.get_json()
    assert item["userName"] == "Jane Doe"
    assert item["status"] in ("on-time", "late")
    assert item["locationLabel"] == "GPS 10.50000, 106.70000 (+/-5m)"
    assert item["timezone"] == "UTC"
    assert "photoUrl" not in item

    again = client.post("/api/attendance", json={"latitude": 10.5, "longitude": 106.7})
    assert again.status_code == 409
    assert again.get_json() == {"error": "User already checked in today"}

    today = client.get("/api/attendance/today").get_json()
    assert today["date"] == item["dateKey"]
    assert [i["id"] for i in today["items"]] == [item["id"]]


def test_checkin_validation_error(client, users, attendance_repo):
    _login_as(client, users["jane"])

    res = client.post("/api/attendance", json={"latitude": "north", "longitude": 1})

    assert res.status_code == 400
    assert res.get_json() == {"error": "Location coordinates are required"}
    assert attendance_repo.records == {}


def test_requires_login_and_admin(client, users):
    assert client.post("/api/attendance", json={}).status_code == 401
    _login_as(client, users["jane"])
    assert client.get("/api/admin/settings").status_code == 403
    assert client.get("/api/admin/export?date=2024-01-01").status_code == 403


def test_admin_settings_roundtrip(client, users):
    _login_as(client, users["admin"])

    assert client.get("/api/admin/settings").get_json() == {"cutoffTime": "08:00"}
    assert client.put("/api/admin/settings", json={"cutoffTime": "09:30"}).get_json() == {"cutoffTime": "09:30"}
    assert client.get("/api/admin/settings").get_json() == {"cutoffTime": "09:30"}

    bad = client.put("/api/admin/settings", json={"cutoffTime": "9:30"})
    assert bad.status_code == 400
    assert bad.get_json() == {"error": "Cutoff time must be HH:mm"}


def test_admin_daily_and_flag(client, users, attendance_repo, make_record):
    attendance_repo.add(make_record(1, users["jane"], datetime(2024, 1, 2, 8, 0, tzinfo=timezone.utc)))
    _login_as(client, users["admin"])

    data = client.get("/api/admin/attendance?date=2024-01-02").get_json()
    assert data["cutoffTime"] == "08:00"
    assert [i["status"] for i in data["items"]] == ["on-time"]
    assert [u["name"] for u in data["users"]] == ["Bob Stone", "Jane Doe"]

    by_date = client.get("/api/attendance/2024-01-02").get_json()
    assert by_date["date"] == "2024-01-02"
    assert [i["id"] for i in by_date["items"]] == ["1"]
    assert client.get("/api/attendance/not-a-date").status_code == 400

    flagged = client.put("/api/admin/attendance/1/flag", json={"comment": "Blurry photo"}).get_json()
    assert flagged["flagComment"] == "Blurry photo"
    assert "flaggedAt" in flagged

    cleared = client.put("/api/admin/attendance/1/flag", json={}).get_json()
    assert "flagComment" not in cleared
    assert client.put("/api/admin/attendance/99/flag", json={}).status_code == 404


def test_admin_users_and_history(client, users, attendance_repo, make_record):
    attendance_repo.add(make_record(1, users["jane"], datetime(2024, 1, 2, 7, 0, tzinfo=timezone.utc)))
    attendance_repo.add(make_record(2, users["jane"], datetime(2024, 1, 3, 9, 0, tzinfo=timezone.utc)))
    _login_as(client, users["admin"])

    assert [u["name"] for u in client.get("/api/admin/users").get_json()["users"]] == ["Bob Stone", "Jane Doe"]

    history = client.get("/api/admin/users/2/attendance?month=2024-01").get_json()
    assert history["stats"] == {"onTime": 1, "late": 1, "total": 2, "punctualityRate": 50}
    assert history["month"] == "2024-01"

    assert client.get("/api/admin/users/404/attendance?month=2024-01").status_code == 404
    assert client.get("/api/admin/users/2/attendance?month=2024-1").status_code == 400


def test_range_export_download(client, users, attendance_repo, make_record):
    attendance_repo.add(make_record(1, users["jane"], datetime(2024, 1, 2, 7, 0, tzinfo=timezone.utc)))
    _login_as(client, users["admin"])

    res = client.get("/api/admin/export?start=2024-01-01&end=2024-01-03")

    assert res.status_code == 200
    assert res.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert "attendance-2024-01-01-to-2024-01-03.xlsx" in res.headers["Content-Disposition"]
    rows = list(load_workbook(io.BytesIO(res.data)).active.iter_rows(values_only=True))
    assert len(rows) == 7
    assert [r[3] for r in rows[1:]].count("Missing") == 5

    assert client.get("/api/admin/export?start=2024-01-05&end=2024-01-01").status_code == 400


def test_user_export_download(client, users):
    _login_as(client, users["admin"])

    res = client.get("/api/admin/users/2/export?month=2024-01")

    assert res.status_code == 200
    assert "attendance-jane-doe-2024-01.xlsx" in res.headers["Content-Disposition"]


def test_delete_blocked_by_photo_failure(client, users, attendance_repo, make_record):
    at = datetime(2024, 1, 2, 7, 0, tzinfo=timezone.utc)
    attendance_repo.add(make_record(1, users["jane"], at, photo_url="https://img/1.jpg", photo_public_id="att/1"))
    attendance_repo.add(make_record(2, users["bob"], at))

    _login_as(client, users["jane"])
    assert client.delete("/api/attendance/2").status_code == 403
    assert client.delete("/api/attendance/1").status_code == 502
    assert 1 in attendance_repo.records

    _login_as(client, users["bob"])
    assert client.delete("/api/attendance/2").status_code == 204
    assert 2 not in attendance_repo.records


def test_network_location(client, users, locator):
    _login_as(client, users["jane"])

    assert client.get("/api/location/ip").status_code == 502

    locator.result = NetworkLocation(label="IP Hanoi, Vietnam", source="ipapi", latitude=21.0, longitude=105.8)
    assert client.get("/api/location/ip").get_json() == {
        "label": "IP Hanoi, Vietnam",
        "latitude": 21.0,
        "longitude": 105.8,
        "source": "ipapi",
    }


def test_unexpected_error_is_opaque(client, users, app, monkeypatch):
    _login_as(client, users["admin"])

    def boom():
        raise RuntimeError("db down")

    monkeypatch.setitem(app.view_functions, "admin_users", boom)

    res = client.get("/api/admin/users")

    assert res.status_code == 500
    assert res.get_json() == {"error": "Server error"}


def test_signup_creates_roster_user_and_session(client, users):
    res = client.post(
        "/api/signup", json={"name": "Carla Diaz", "email": "Carla@Example.com", "password": "password1"}
    )

    assert res.status_code == 201
    assert res.get_json()["user"]["email"] == "carla@example.com"
    assert client.get("/api/me").get_json()["user"]["name"] == "Carla Diaz"

    _login_as(client, users["admin"])
    names = [u["name"] for u in client.get("/api/admin/users").get_json()["users"]]
    assert names == ["Bob Stone", "Carla Diaz", "Jane Doe"]


def test_signup_errors(client):
    dup = client.post("/api/signup", json={"name": "Jane Again", "email": "jane@example.com", "password": "password1"})
    assert dup.status_code == 409
    assert dup.get_json() == {"error": "Email already in use"}

    short = client.post("/api/signup", json={"name": "Al", "email": "al@example.com", "password": "short"})
    assert short.status_code == 400

    admin = client.post(
        "/api/signup",
        json={"name": "Eve Admin", "email": "eve@example.com", "password": "password1", "role": "admin", "inviteCode": "nope"},
    )
    assert admin.status_code == 403
