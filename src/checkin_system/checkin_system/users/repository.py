from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def list_roster(self) -> Sequence[User]:
        """Active non-admin users ordered by name."""

        raise NotImplementedError

    def create(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        """Insert an account; must raise ConflictError when the email is taken."""

        raise NotImplementedError
