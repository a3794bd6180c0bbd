from __future__ import annotations

from typing import Optional, Protocol


class SettingRepository(Protocol):
    """Key/value store for global settings."""

    def get_value(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def upsert_value(self, key: str, value: str) -> str:
        """Create the key on first write, overwrite afterwards. Returns the stored value."""

        raise NotImplementedError
