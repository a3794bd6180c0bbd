from __future__ import annotations

import logging

from ..attendance.classifier import parse_cutoff_time
from ..core.constants import CUTOFF_SETTING_KEY, DEFAULT_CUTOFF_TIME
from ..core.exceptions import ValidationError
from .repository import SettingRepository

logger = logging.getLogger(__name__)


class CutoffService:
    """Read-through accessor for the daily cutoff ("HH:mm", employee local time).

    Reads are lenient (missing key -> default); writes are validated. Nothing is
    cached: every classification sees the latest value.
    """

    def __init__(self, settings: SettingRepository, *, default: str = DEFAULT_CUTOFF_TIME):
        self._settings = settings
        self._default = default

    def get_cutoff_time(self) -> str:
        return self._settings.get_value(CUTOFF_SETTING_KEY) or self._default

    def set_cutoff_time(self, value: object) -> str:
        if not isinstance(value, str) or parse_cutoff_time(value) is None:
            raise ValidationError("Cutoff time must be HH:mm")

        stored = self._settings.upsert_value(CUTOFF_SETTING_KEY, value)
        logger.info("Cutoff time set to %s", stored)
        return stored
