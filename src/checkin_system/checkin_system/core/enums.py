from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account roles used for authorization."""

    ADMIN = "admin"
    USER = "user"


class AttendanceStatus(str, Enum):
    """Punctuality of a persisted check-in."""

    ON_TIME = "on-time"
    LATE = "late"


class ReportStatus(str, Enum):
    """Status as shown in reports.

    MISSING only exists for synthesized rows (no check-in that day) and has no
    AttendanceStatus counterpart, so it cannot reach the attendance table.
    """

    ON_TIME = "on-time"
    LATE = "late"
    MISSING = "missing"

    @classmethod
    def from_attendance(cls, status: AttendanceStatus) -> "ReportStatus":
        return cls(status.value)

    @property
    def label(self) -> str:
        return {
            ReportStatus.ON_TIME: "On time",
            ReportStatus.LATE: "Late",
            ReportStatus.MISSING: "Missing",
        }[self]
