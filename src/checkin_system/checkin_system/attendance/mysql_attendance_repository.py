from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import as_utc
from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyCheckedInError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, optional_float
from .model import AttendanceRecord, CheckInDraft
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, user_name, date_key, captured_at, status_at_capture,
    location_label, photo_url, photo_public_id, flag_comment, flagged_at,
    latitude, longitude, accuracy, timezone
"""


def _utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    # DATETIME columns store UTC wall time without an offset.
    if value is None:
        return None
    return as_utc(value).replace(tzinfo=None)


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        user_name=r["user_name"],
        date_key=str(r["date_key"]),
        captured_at=as_utc(r["captured_at"]),
        status_at_capture=AttendanceStatus(r["status_at_capture"]),
        location_label=r["location_label"],
        photo_url=r.get("photo_url"),
        photo_public_id=r.get("photo_public_id"),
        flag_comment=r.get("flag_comment"),
        flagged_at=as_utc(r["flagged_at"]) if r.get("flagged_at") else None,
        latitude=optional_float(r.get("latitude")),
        longitude=optional_float(r.get("longitude")),
        accuracy=optional_float(r.get("accuracy")),
        timezone=r.get("timezone"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_user_and_date(self, user_id: int, date_key: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s AND date_key=%s",
                (int(user_id), date_key),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_checkin(self, draft: CheckInDraft) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        date_key, user_id, user_name, captured_at, status_at_capture, location_label,
                        photo_url, photo_public_id, latitude, longitude, accuracy, timezone
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        draft.date_key,
                        int(draft.user_id),
                        draft.user_name,
                        _utc_naive(draft.captured_at),
                        draft.status_at_capture.value,
                        draft.location_label,
                        draft.photo_url,
                        draft.photo_public_id,
                        draft.latitude,
                        draft.longitude,
                        draft.accuracy,
                        draft.timezone,
                    ),
                )
                return int(cur.lastrowid)
        except Exception as exc:
            if is_duplicate_key(exc):
                raise AlreadyCheckedInError("User already checked in today") from exc
            raise

    def list_for_date(self, date_key: str, *, user_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        clauses = ["date_key=%s"]
        params: list[object] = [date_key]
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE {where} ORDER BY captured_at ASC, attendance_id ASC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_user_month(self, user_id: int, month: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND date_key LIKE %s
                ORDER BY captured_at ASC, attendance_id ASC
                """,
                (int(user_id), f"{month}-%"),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_range(self, *, start: str, end: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE date_key BETWEEN %s AND %s
                ORDER BY date_key ASC, user_name ASC
                """,
                (start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def set_flag(self, attendance_id: int, *, comment: Optional[str], flagged_at: Optional[datetime]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET flag_comment=%s, flagged_at=%s WHERE attendance_id=%s",
                (comment, _utc_naive(flagged_at), int(attendance_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0
