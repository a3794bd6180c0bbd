from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.checkin_system.checkin_system.attendance.model import AttendanceRecord, CheckInDraft
from src.checkin_system.checkin_system.core.enums import AttendanceStatus, Role
from src.checkin_system.checkin_system.core.exceptions import AlreadyCheckedInError, ConflictError
from src.checkin_system.checkin_system.settings.service import CutoffService
from src.checkin_system.checkin_system.users.model import User


class InMemorySettings:
    def __init__(self, values: Optional[dict[str, str]] = None):
        self.values = dict(values or {})

    def get_value(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def upsert_value(self, key: str, value: str) -> str:
        self.values[key] = value
        return value


class InMemoryUsers:
    def __init__(self, users: list[User]):
        self.users_by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users_by_id.values() if u.email == email), None)

    def list_roster(self) -> list[User]:
        roster = [u for u in self.users_by_id.values() if u.role == Role.USER and u.is_active]
        return sorted(roster, key=lambda u: u.name)

    def create(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        if self.get_by_email(email):
            raise ConflictError("Email already in use")
        user_id = max(self.users_by_id, default=0) + 1
        self.users_by_id[user_id] = User(
            user_id=user_id, name=name, email=email, password_hash=password_hash, role=role
        )
        return user_id


class InMemoryAttendance:
    """Mimics the UNIQUE (user_id, date_key) key: the insert itself is the check."""

    def __init__(self):
        self.records: dict[int, AttendanceRecord] = {}
        self._lock = threading.Lock()
        self._id = 0

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self.records[record.attendance_id] = record
        self._id = max(self._id, record.attendance_id)
        return record

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.records.get(int(attendance_id))

    def get_for_user_and_date(self, user_id: int, date_key: str) -> Optional[AttendanceRecord]:
        return next((r for r in self.records.values() if r.user_id == user_id and r.date_key == date_key), None)

    def create_checkin(self, draft: CheckInDraft) -> int:
        with self._lock:
            if any(r.user_id == draft.user_id and r.date_key == draft.date_key for r in self.records.values()):
                raise AlreadyCheckedInError("User already checked in today")
            self._id += 1
            self.records[self._id] = AttendanceRecord.from_draft(self._id, draft)
            return self._id

    def list_for_date(self, date_key: str, *, user_id: Optional[int] = None) -> list[AttendanceRecord]:
        items = [r for r in self.records.values() if r.date_key == date_key]
        if user_id is not None:
            items = [r for r in items if r.user_id == user_id]
        return sorted(items, key=lambda r: r.captured_at)

    def list_for_user_month(self, user_id: int, month: str) -> list[AttendanceRecord]:
        items = [r for r in self.records.values() if r.user_id == user_id and r.date_key.startswith(f"{month}-")]
        return sorted(items, key=lambda r: r.captured_at)

    def list_range(self, *, start: str, end: str) -> list[AttendanceRecord]:
        items = [r for r in self.records.values() if start <= r.date_key <= end]
        return sorted(items, key=lambda r: (r.date_key, r.user_name))

    def set_flag(self, attendance_id: int, *, comment: Optional[str], flagged_at: Optional[datetime]) -> bool:
        record = self.records.get(attendance_id)
        if not record:
            return False
        self.records[attendance_id] = replace(record, flag_comment=comment, flagged_at=flagged_at)
        return True

    def delete_by_id(self, attendance_id: int) -> bool:
        return self.records.pop(attendance_id, None) is not None


def _make_user(user_id: int, name: str, *, role: Role = Role.USER, password: str = "secret123", active: bool = True) -> User:
    return User(
        user_id=user_id,
        name=name,
        email=f"{name.split()[0].lower()}@example.com",
        password_hash=generate_password_hash(password),
        role=role,
        is_active=active,
    )


def _make_record(
    attendance_id: int,
    user: User,
    captured_at: datetime,
    *,
    timezone_id: Optional[str] = "UTC",
    status_at_capture: AttendanceStatus = AttendanceStatus.ON_TIME,
    **extra,
) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=attendance_id,
        user_id=user.user_id,
        user_name=user.name,
        date_key=captured_at.astimezone(timezone.utc).strftime("%Y-%m-%d"),
        captured_at=captured_at,
        status_at_capture=status_at_capture,
        location_label=extra.pop("location_label", "Office"),
        timezone=timezone_id,
        **extra,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 15, 7, 45, tzinfo=timezone.utc)


@pytest.fixture
def settings_repo() -> InMemorySettings:
    return InMemorySettings()


@pytest.fixture
def cutoff_service(settings_repo) -> CutoffService:
    return CutoffService(settings_repo)


@pytest.fixture
def users() -> dict[str, User]:
    return {
        "admin": _make_user(1, "Admin Demo", role=Role.ADMIN, password="admin123"),
        "jane": _make_user(2, "Jane Doe", password="user1234"),
        "bob": _make_user(3, "Bob Stone"),
    }


@pytest.fixture
def users_repo(users) -> InMemoryUsers:
    return InMemoryUsers(list(users.values()))


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def make_record():
    return _make_record


@pytest.fixture
def make_user():
    return _make_user


@pytest.fixture
def users_repo_factory():
    return InMemoryUsers
