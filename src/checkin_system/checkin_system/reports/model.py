from __future__ import annotations

from dataclasses import dataclass, field

from ..attendance.model import AttendanceView
from ..users.model import User


@dataclass(frozen=True)
class PunctualityStats:
    on_time: int = 0
    late: int = 0
    total: int = 0
    punctuality_rate: int = 0

    def to_dict(self) -> dict:
        return {
            "onTime": self.on_time,
            "late": self.late,
            "total": self.total,
            "punctualityRate": self.punctuality_rate,
        }


@dataclass(frozen=True)
class DailyRoster:
    date_key: str
    cutoff_time: str
    items: list[AttendanceView] = field(default_factory=list)
    users: list[User] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "date": self.date_key,
            "cutoffTime": self.cutoff_time,
            "items": [v.to_dict() for v in self.items],
            "users": [u.to_public_dict() for u in self.users],
        }


@dataclass(frozen=True)
class MonthlyHistory:
    user: User
    month: str
    cutoff_time: str
    stats: PunctualityStats
    items: list[AttendanceView] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "user": self.user.to_public_dict(),
            "month": self.month,
            "cutoffTime": self.cutoff_time,
            "stats": self.stats.to_dict(),
            "items": [v.to_dict() for v in self.items],
        }


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: bytes
