"""Settings shared by every environment; read from the process environment."""

import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "checkin_db"),
}

# Reverse geocoding: one name or an ordered, comma-separated fallback list.
REVERSE_GEOCODE_PROVIDER = os.getenv("REVERSE_GEOCODE_PROVIDER", "nominatim")
REVERSE_GEOCODE_USER_AGENT = os.getenv("REVERSE_GEOCODE_USER_AGENT", "attendance-app")
REVERSE_GEOCODE_LANGUAGE = os.getenv("REVERSE_GEOCODE_LANGUAGE", "en")
MAPBOX_TOKEN = os.getenv("MAPBOX_TOKEN")
GOOGLE_MAPS_KEY = os.getenv("GOOGLE_MAPS_KEY")
PROVIDER_TIMEOUT_SECONDS = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "8"))

CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE") or None

# Required to sign up with role "admin"; unset disables admin signup.
ADMIN_INVITE_CODE = os.getenv("ADMIN_INVITE_CODE") or None
