from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_GEOCODE_PROVIDER, DEFAULT_PROVIDER_TIMEOUT_SECONDS, DEFAULT_USER_AGENT
from .database.connection import DBConfig, DatabaseConnection
from .location.chain import ProviderChain
from .location.factory import build_network_locator, build_reverse_geocoder
from .location.timezone_lookup import TimezoneFinderLookup, TimezoneLookup
from .photos.store import PhotoStore, build_photo_store
from .reports.service import ReportService
from .settings.mysql_setting_repository import MySQLSettingRepository
from .settings.repository import SettingRepository
from .settings.service import CutoffService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    settings_repo: SettingRepository

    reverse_geocoder: ProviderChain
    network_locator: ProviderChain
    timezone_lookup: TimezoneLookup
    photo_store: PhotoStore

    cutoff_service: CutoffService
    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    report_service: ReportService


def build_container(*, db_config: dict, integrations: Optional[Mapping[str, Any]] = None) -> Container:
    integrations = dict(integrations or {})

    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    users_repo = MySQLUserRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    settings_repo = MySQLSettingRepository(conn)

    timeout = float(integrations.get("PROVIDER_TIMEOUT_SECONDS") or DEFAULT_PROVIDER_TIMEOUT_SECONDS)
    reverse_geocoder = build_reverse_geocoder(
        providers=integrations.get("REVERSE_GEOCODE_PROVIDER") or DEFAULT_GEOCODE_PROVIDER,
        mapbox_token=integrations.get("MAPBOX_TOKEN"),
        google_maps_key=integrations.get("GOOGLE_MAPS_KEY"),
        user_agent=integrations.get("REVERSE_GEOCODE_USER_AGENT") or DEFAULT_USER_AGENT,
        language=integrations.get("REVERSE_GEOCODE_LANGUAGE") or "en",
        timeout_seconds=timeout,
    )
    network_locator = build_network_locator(timeout_seconds=timeout)
    timezone_lookup = TimezoneFinderLookup()
    photo_store = build_photo_store(
        cloud_name=integrations.get("CLOUDINARY_CLOUD_NAME"),
        api_key=integrations.get("CLOUDINARY_API_KEY"),
        api_secret=integrations.get("CLOUDINARY_API_SECRET"),
    )

    cutoff_service = CutoffService(settings_repo)
    auth_service = AuthService(users_repo)
    user_service = UserService(users_repo, admin_invite_code=integrations.get("ADMIN_INVITE_CODE"))
    attendance_service = AttendanceService(
        attendance_repo,
        cutoff_service,
        reverse_geocoder=reverse_geocoder,
        timezone_lookup=timezone_lookup,
        photo_store=photo_store,
    )
    report_service = ReportService(attendance_repo, users_repo, cutoff_service)

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        reverse_geocoder=reverse_geocoder,
        network_locator=network_locator,
        timezone_lookup=timezone_lookup,
        photo_store=photo_store,
        cutoff_service=cutoff_service,
        auth_service=auth_service,
        user_service=user_service,
        attendance_service=attendance_service,
        report_service=report_service,
    )
