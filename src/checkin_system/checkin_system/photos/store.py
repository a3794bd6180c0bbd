from __future__ import annotations

import logging
from typing import Optional, Protocol

import cloudinary
import cloudinary.uploader

from ..core.exceptions import PhotoStoreUnavailableError

logger = logging.getLogger(__name__)

DESTROY_OK = "ok"
DESTROY_NOT_FOUND = "not found"


class PhotoStore(Protocol):
    """Where check-in photos live; the core only ever deletes from it."""

    def is_ready(self) -> bool:
        raise NotImplementedError

    def destroy(self, public_id: str) -> str:
        """Delete an image; returns the store's result string ("ok", "not found", ...)."""

        raise NotImplementedError


class DisabledPhotoStore(PhotoStore):
    def is_ready(self) -> bool:
        return False

    def destroy(self, public_id: str) -> str:
        raise PhotoStoreUnavailableError("Photo store not configured")


class CloudinaryPhotoStore(PhotoStore):
    def __init__(self, *, cloud_name: str, api_key: str, api_secret: str):
        cloudinary.config(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret)

    def is_ready(self) -> bool:
        return True

    def destroy(self, public_id: str) -> str:
        result = cloudinary.uploader.destroy(public_id, resource_type="image")
        return str((result or {}).get("result", ""))


def build_photo_store(
    *,
    cloud_name: Optional[str] = None,
    api_key: Optional[str] = None,
    api_secret: Optional[str] = None,
) -> PhotoStore:
    if not cloud_name or not api_key or not api_secret:
        logger.info("Cloudinary credentials missing; photo deletion disabled")
        return DisabledPhotoStore()
    return CloudinaryPhotoStore(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret)
