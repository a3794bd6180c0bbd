from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import now_utc, today_key
from ..common.validators import optional_text, require_coordinate, require_non_empty, round_half_up, to_number
from ..core.constants import FLAG_COMMENT_MAX_LENGTH
from ..core.enums import Role
from ..core.exceptions import (
    AlreadyCheckedInError,
    AuthorizationError,
    CollaboratorError,
    NotFoundError,
    PhotoDeletionError,
    PhotoStoreUnavailableError,
    ValidationError,
)
from ..location.chain import ProviderChain
from ..location.model import Coordinates, GeocodeResult
from ..location.timezone_lookup import TimezoneLookup
from ..photos.store import DESTROY_NOT_FOUND, DESTROY_OK, DisabledPhotoStore, PhotoStore
from ..settings.service import CutoffService
from .classifier import StatusClassifier
from .model import AttendanceRecord, AttendanceView, CheckInDraft
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def fallback_location_label(latitude: float, longitude: float, accuracy: Optional[float] = None) -> str:
    label = f"GPS {latitude:.5f}, {longitude:.5f}"
    if accuracy is not None:
        label += f" (+/-{round_half_up(accuracy)}m)"
    return label


class AttendanceService:
    """Check-in registration, flagging, deletion and record views.

    Every view is classified again with the cutoff in force at read time; the
    stored `status_at_capture` is never returned as the status.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        cutoff_service: CutoffService,
        *,
        reverse_geocoder: Optional[ProviderChain[Coordinates, GeocodeResult]] = None,
        timezone_lookup: Optional[TimezoneLookup] = None,
        photo_store: Optional[PhotoStore] = None,
        classifier: Optional[StatusClassifier] = None,
    ):
        self._attendance = attendance
        self._cutoff = cutoff_service
        self._geocoder = reverse_geocoder
        self._timezones = timezone_lookup
        self._photos = photo_store or DisabledPhotoStore()
        self._classifier = classifier or StatusClassifier()

    # ---- read models -------------------------------------------------

    def view(self, record: AttendanceRecord, *, cutoff_time: Optional[str] = None) -> AttendanceView:
        cutoff = cutoff_time if cutoff_time is not None else self._cutoff.get_cutoff_time()
        return AttendanceView(record=record, status=self._classifier.classify_record(record, cutoff))

    def views(self, records: Iterable[AttendanceRecord]) -> list[AttendanceView]:
        cutoff = self._cutoff.get_cutoff_time()
        return [self.view(r, cutoff_time=cutoff) for r in records]

    def list_today(self, *, actor_id: int, actor_role: Role, now: Optional[datetime] = None) -> list[AttendanceView]:
        """Admins see every check-in of the day, users only their own."""
        date_key = today_key(now)
        user_filter = None if actor_role == Role.ADMIN else int(actor_id)
        return self.views(self._attendance.list_for_date(date_key, user_id=user_filter))

    # ---- check-in ----------------------------------------------------

    def _lookup_timezone(self, latitude: float, longitude: float) -> Optional[str]:
        if self._timezones is None:
            return None
        try:
            return self._timezones.timezone_at(latitude, longitude) or None
        except Exception as exc:
            logger.warning("Timezone lookup failed for %.5f,%.5f: %s", latitude, longitude, exc)
            return None

    def _reverse_geocode(self, latitude: float, longitude: float) -> Optional[str]:
        if self._geocoder is None:
            return None
        result = self._geocoder.resolve(Coordinates(latitude=latitude, longitude=longitude))
        if result is None or not result.label.strip():
            return None
        return result.label.strip()

    def check_in(
        self,
        *,
        user_id: int,
        user_name: str,
        latitude: object,
        longitude: object,
        accuracy: object = None,
        location_label: object = None,
        photo_url: object = None,
        photo_public_id: object = None,
        now: Optional[datetime] = None,
    ) -> AttendanceView:
        user_name = require_non_empty(user_name, "User name")
        lat = require_coordinate(latitude, "Latitude", limit=90)
        lng = require_coordinate(longitude, "Longitude", limit=180)
        acc = to_number(accuracy)
        if acc is not None and acc < 0:
            acc = None

        photo_url = optional_text(photo_url, "Photo URL")
        photo_public_id = optional_text(photo_public_id, "Photo public id")
        if (photo_url is None) != (photo_public_id is None):
            raise ValidationError("Photo URL and public id must be provided together")

        captured_at = now or now_utc()
        date_key = today_key(captured_at)

        if self._attendance.get_for_user_and_date(int(user_id), date_key):
            raise AlreadyCheckedInError("User already checked in today")

        timezone_id = self._lookup_timezone(lat, lng)

        label = optional_text(location_label, "Location label") if isinstance(location_label, str) else None
        label = label or fallback_location_label(lat, lng, acc)
        label = self._reverse_geocode(lat, lng) or label

        cutoff = self._cutoff.get_cutoff_time()
        status = self._classifier.classify(captured_at, timezone_id, cutoff)

        draft = CheckInDraft(
            user_id=int(user_id),
            user_name=user_name,
            date_key=date_key,
            captured_at=captured_at,
            status_at_capture=status,
            location_label=label,
            photo_url=photo_url,
            photo_public_id=photo_public_id,
            latitude=lat,
            longitude=lng,
            accuracy=acc,
            timezone=timezone_id,
        )
        attendance_id = self._attendance.create_checkin(draft)
        logger.info(
            "Check-in %s user=%s date=%s status=%s tz=%s", attendance_id, user_id, date_key, status.value, timezone_id
        )
        return AttendanceView(record=AttendanceRecord.from_draft(attendance_id, draft), status=status)

    # ---- flag / delete -----------------------------------------------

    def set_flag(self, attendance_id: int, comment: object = None, *, now: Optional[datetime] = None) -> AttendanceView:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")

        text = optional_text(comment, "Flag comment", max_length=FLAG_COMMENT_MAX_LENGTH)
        flagged_at = (now or now_utc()) if text else None

        # rowcount is 0 when the values did not change; existence was checked above.
        self._attendance.set_flag(record.attendance_id, comment=text, flagged_at=flagged_at)
        logger.info("Attendance %s %s", record.attendance_id, "flagged" if text else "flag cleared")
        return self.view(replace(record, flag_comment=text, flagged_at=flagged_at))

    def delete_record(self, attendance_id: int, *, actor_id: int, actor_role: Role) -> None:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        if actor_role != Role.ADMIN and int(actor_id) != record.user_id:
            raise AuthorizationError("Not allowed to delete this record")

        if record.photo_public_id:
            if not self._photos.is_ready():
                raise PhotoStoreUnavailableError("Photo store not configured")
            try:
                result = self._photos.destroy(record.photo_public_id)
            except CollaboratorError:
                raise
            except Exception as exc:
                raise PhotoDeletionError("Failed to delete photo") from exc
            if result not in (DESTROY_OK, DESTROY_NOT_FOUND):
                raise PhotoDeletionError(f"Failed to delete photo ({result})")

        self._attendance.delete_by_id(record.attendance_id)
        logger.info("Attendance %s deleted by user %s", record.attendance_id, actor_id)
