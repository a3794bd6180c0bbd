from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object (no DB access code). The check-in core only reads it.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    is_active: bool = True

    def to_public_dict(self) -> dict:
        return {"id": str(self.user_id), "name": self.name, "email": self.email}
