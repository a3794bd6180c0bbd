from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, CheckInDraft


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, date_key: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(self, draft: CheckInDraft) -> int:
        """Insert the record and return its id.

        Must raise AlreadyCheckedInError when (user_id, date_key) already exists;
        the check is atomic (storage uniqueness constraint), never read-then-write.
        """

        raise NotImplementedError

    def list_for_date(self, date_key: str, *, user_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        """Records of one day ordered by captured_at ascending."""

        raise NotImplementedError

    def list_for_user_month(self, user_id: int, month: str) -> Sequence[AttendanceRecord]:
        """Records of one user whose date_key starts with YYYY-MM, captured_at ascending."""

        raise NotImplementedError

    def list_range(self, *, start: str, end: str) -> Sequence[AttendanceRecord]:
        """Records with start <= date_key <= end, ordered by date_key then user_name."""

        raise NotImplementedError

    def set_flag(self, attendance_id: int, *, comment: Optional[str], flagged_at: Optional[datetime]) -> bool:
        """Write flag_comment and flagged_at together in one statement."""

        raise NotImplementedError

    def delete_by_id(self, attendance_id: int) -> bool:
        raise NotImplementedError
