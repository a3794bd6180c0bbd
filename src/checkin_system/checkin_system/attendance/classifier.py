from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import local_time_parts
from ..core.constants import DEFAULT_CUTOFF_TIME
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord

CUTOFF_PATTERN = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")


def parse_cutoff_time(value: object) -> Optional[tuple[int, int]]:
    """Parse "HH:mm" (24h) into (hour, minute); None when malformed."""
    if not isinstance(value, str):
        return None
    match = CUTOFF_PATTERN.fullmatch(value)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


@dataclass(frozen=True)
class StatusClassifier:
    """Decide on-time / late from the wall clock of the person checking in.

    The cutoff minute itself counts as on time. A corrupt cutoff falls back to
    `default_cutoff`, and a missing or unknown timezone falls back to the host
    zone, so classification never fails.
    """

    default_cutoff: str = DEFAULT_CUTOFF_TIME

    def classify(self, captured_at: datetime, timezone_id: Optional[str], cutoff_time: Optional[str]) -> AttendanceStatus:
        cutoff = parse_cutoff_time(cutoff_time) or parse_cutoff_time(self.default_cutoff) or (8, 0)
        if local_time_parts(captured_at, timezone_id) <= cutoff:
            return AttendanceStatus.ON_TIME
        return AttendanceStatus.LATE

    def classify_record(self, record: AttendanceRecord, cutoff_time: Optional[str]) -> AttendanceStatus:
        return self.classify(record.captured_at, record.timezone, cutoff_time)
