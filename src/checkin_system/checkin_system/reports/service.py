from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Iterable, Optional

from ..attendance.classifier import StatusClassifier
from ..attendance.model import AttendanceRecord, AttendanceView
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import (
    format_local_date,
    format_local_time,
    is_valid_date_key,
    is_valid_month_key,
    iter_date_keys,
    month_key,
    today_key,
)
from ..common.validators import round_half_up
from ..core.constants import EXPORT_HEADERS
from ..core.enums import AttendanceStatus, ReportStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..settings.service import CutoffService
from ..users.model import User
from ..users.repository import UserRepository
from .model import DailyRoster, ExportFile, MonthlyHistory, PunctualityStats
from .spreadsheet import build_workbook

logger = logging.getLogger(__name__)

ExportRow = dict[str, str]


def safe_filename(value: str, *, default: str = "user", max_length: int = 40) -> str:
    """Lower-case slug: "Jane O'Doe" -> "jane-o-doe"."""
    slug = re.sub(r"[^a-z0-9]+", "-", (value or "").lower()).strip("-")
    return slug[:max_length] or default


def punctuality_stats(statuses: Iterable[AttendanceStatus]) -> PunctualityStats:
    statuses = list(statuses)
    on_time = sum(1 for s in statuses if s == AttendanceStatus.ON_TIME)
    late = sum(1 for s in statuses if s == AttendanceStatus.LATE)
    total = len(statuses)
    rate = 0 if total == 0 else round_half_up(on_time / total * 100)
    return PunctualityStats(on_time=on_time, late=late, total=total, punctuality_rate=rate)


def resolve_export_range(
    start: Optional[str] = None, end: Optional[str] = None, date: Optional[str] = None
) -> tuple[str, str]:
    """`date` is shorthand for start=end=date; a lone start or end stands for both."""

    start = start or None
    end = end or None
    if not start and not end and date:
        start = end = date
    if start and not end:
        end = start
    if end and not start:
        start = end

    if not start or not end or not is_valid_date_key(start) or not is_valid_date_key(end):
        raise ValidationError("Invalid date range. Use YYYY-MM-DD.")
    if start > end:
        raise ValidationError("Invalid date range. Use YYYY-MM-DD.")
    return start, end


class ReportService:
    """Admin read side: daily roster, monthly history and spreadsheet exports.

    Statuses are always derived from the current cutoff, so changing the cutoff
    changes the next report.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        cutoff_service: CutoffService,
        *,
        classifier: Optional[StatusClassifier] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._cutoff = cutoff_service
        self._classifier = classifier or StatusClassifier()

    def _get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def _resolve_month(self, month: Optional[str], now: Optional[datetime]) -> str:
        month = month or month_key(now)
        if not is_valid_month_key(month):
            raise ValidationError("Invalid month format")
        return month

    def _views(self, records: Iterable[AttendanceRecord], cutoff_time: str) -> list[AttendanceView]:
        return [AttendanceView(record=r, status=self._classifier.classify_record(r, cutoff_time)) for r in records]

    def _row(self, record: AttendanceRecord, cutoff_time: str, *, date_value: str) -> ExportRow:
        status = ReportStatus.from_attendance(self._classifier.classify_record(record, cutoff_time))
        return {
            "Date": date_value,
            "Time": format_local_time(record.captured_at, record.timezone),
            "Employee": record.user_name,
            "Status": status.label,
            "Location": record.location_label,
            "Flag Comment": record.flag_comment or "",
        }

    # ---- JSON reports ------------------------------------------------

    def daily_roster(
        self, date_key: Optional[str] = None, *, user_id: Optional[int] = None, now: Optional[datetime] = None
    ) -> DailyRoster:
        date_key = date_key or today_key(now)
        if not is_valid_date_key(date_key):
            raise ValidationError("Invalid date format")

        cutoff = self._cutoff.get_cutoff_time()
        records = sorted(
            self._attendance.list_for_date(date_key, user_id=user_id),
            key=lambda r: (r.captured_at, r.attendance_id),
        )
        return DailyRoster(
            date_key=date_key,
            cutoff_time=cutoff,
            items=self._views(records, cutoff),
            users=list(self._users.list_roster()),
        )

    def monthly_history(self, user_id: int, month: Optional[str] = None, *, now: Optional[datetime] = None) -> MonthlyHistory:
        month = self._resolve_month(month, now)
        user = self._get_user(user_id)

        cutoff = self._cutoff.get_cutoff_time()
        records = sorted(self._attendance.list_for_user_month(user.user_id, month), key=lambda r: r.captured_at)
        items = self._views(records, cutoff)
        return MonthlyHistory(
            user=user,
            month=month,
            cutoff_time=cutoff,
            stats=punctuality_stats(v.status for v in items),
            items=items,
        )

    # ---- exports -----------------------------------------------------

    def build_range_rows(self, start: str, end: str) -> list[ExportRow]:
        """Dense day x roster-user grid; absent user-days become Missing rows."""

        cutoff = self._cutoff.get_cutoff_time()
        roster = sorted(self._users.list_roster(), key=lambda u: (u.name, u.user_id))
        by_key = {(r.user_id, r.date_key): r for r in self._attendance.list_range(start=start, end=end)}

        rows: list[ExportRow] = []
        for date_key in iter_date_keys(start, end):
            for user in roster:
                record = by_key.get((user.user_id, date_key))
                if record is None:
                    rows.append(
                        {
                            "Date": date_key,
                            "Time": "",
                            "Employee": user.name,
                            "Status": ReportStatus.MISSING.label,
                            "Location": "",
                            "Flag Comment": "",
                        }
                    )
                else:
                    rows.append(self._row(record, cutoff, date_value=date_key))
        return rows

    def export_range(
        self, start: Optional[str] = None, end: Optional[str] = None, date: Optional[str] = None
    ) -> ExportFile:
        start, end = resolve_export_range(start, end, date)
        rows = self.build_range_rows(start, end)
        logger.info("Exporting %d rows for %s..%s", len(rows), start, end)
        return ExportFile(filename=f"attendance-{start}-to-{end}.xlsx", content=build_workbook(rows, EXPORT_HEADERS))

    def build_user_month_rows(self, user_id: int, month: str) -> list[ExportRow]:
        cutoff = self._cutoff.get_cutoff_time()
        records = sorted(self._attendance.list_for_user_month(user_id, month), key=lambda r: r.captured_at)
        return [self._row(r, cutoff, date_value=format_local_date(r.captured_at, r.timezone)) for r in records]

    def export_user_month(self, user_id: int, month: Optional[str] = None, *, now: Optional[datetime] = None) -> ExportFile:
        month = self._resolve_month(month, now)
        user = self._get_user(user_id)
        rows = self.build_user_month_rows(user.user_id, month)
        logger.info("Exporting %d rows for user %s month %s", len(rows), user.user_id, month)
        return ExportFile(
            filename=f"attendance-{safe_filename(user.name)}-{month}.xlsx",
            content=build_workbook(rows, EXPORT_HEADERS),
        )
