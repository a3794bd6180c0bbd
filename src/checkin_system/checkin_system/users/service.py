from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    name: str
    email: str
    role: Role

    def to_dict(self) -> dict:
        return {"id": str(self.user_id), "name": self.name, "email": self.email, "role": self.role.value}


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_non_empty(email, "Email").lower()
        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except Exception:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return SessionUser(user_id=user.user_id, name=user.name, email=user.email, role=user.role)


class UserService:
    """Use cases: account signup and roster queries for admins.

    Admin signup needs the configured invite code; without one, only regular
    accounts can be created.
    """

    def __init__(self, users: UserRepository, *, admin_invite_code: Optional[str] = None):
        self._users = users
        self._admin_invite_code = (admin_invite_code or "").strip() or None

    def register(
        self,
        name: object,
        email: object,
        password: object,
        *,
        role: object = Role.USER.value,
        invite_code: object = None,
    ) -> SessionUser:
        name = require_non_empty(name, "Name")
        if len(name) < 2:
            raise ValidationError("Name must be at least 2 characters")
        email = require_email(email)
        if not isinstance(password, str) or not 8 <= len(password) <= 64:
            raise ValidationError("Password must be 8 to 64 characters")
        try:
            role = Role(role)
        except ValueError:
            raise ValidationError("Invalid role")

        if role == Role.ADMIN:
            if not self._admin_invite_code:
                raise AuthorizationError("Admin signup is disabled")
            if not isinstance(invite_code, str) or invite_code.strip() != self._admin_invite_code:
                raise AuthorizationError("Invalid admin invite code")

        user_id = self._users.create(
            name=name, email=email, password_hash=generate_password_hash(password), role=role
        )
        logger.info("Registered %s account %s (%s)", role.value, user_id, email)
        return SessionUser(user_id=user_id, name=name, email=email, role=role)

    def list_roster(self) -> list[User]:
        return list(self._users.list_roster())
