from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class CheckInDraft:
    """A validated check-in, ready to be inserted."""

    user_id: int
    user_name: str
    date_key: str
    captured_at: datetime
    status_at_capture: AttendanceStatus
    location_label: str
    photo_url: Optional[str] = None
    photo_public_id: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy: Optional[float] = None
    timezone: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one check-in per (user, date_key).

    `status_at_capture` is an audit snapshot; read models expose a status
    re-derived with the current cutoff.
    """

    attendance_id: int
    user_id: int
    user_name: str
    date_key: str
    captured_at: datetime
    status_at_capture: AttendanceStatus
    location_label: str
    photo_url: Optional[str] = None
    photo_public_id: Optional[str] = None
    flag_comment: Optional[str] = None
    flagged_at: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy: Optional[float] = None
    timezone: Optional[str] = None

    @classmethod
    def from_draft(cls, attendance_id: int, draft: CheckInDraft) -> "AttendanceRecord":
        return cls(attendance_id=attendance_id, **asdict(draft))


@dataclass(frozen=True)
class AttendanceView:
    """Read-model: a record plus its status under the current cutoff."""

    record: AttendanceRecord
    status: AttendanceStatus

    def to_dict(self) -> dict:
        r = self.record
        data = {
            "id": str(r.attendance_id),
            "userId": str(r.user_id),
            "userName": r.user_name,
            "dateKey": r.date_key,
            "capturedAt": to_iso(r.captured_at),
            "status": self.status.value,
            "locationLabel": r.location_label,
            "photoUrl": r.photo_url,
            "photoPublicId": r.photo_public_id,
            "flagComment": r.flag_comment,
            "flaggedAt": to_iso(r.flagged_at),
            "latitude": r.latitude,
            "longitude": r.longitude,
            "accuracy": r.accuracy,
            "timezone": r.timezone,
        }
        return {k: v for k, v in data.items() if v is not None}
