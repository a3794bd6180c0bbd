from __future__ import annotations

import pytest

from src.checkin_system.checkin_system.core.enums import Role
from src.checkin_system.checkin_system.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)
from src.checkin_system.checkin_system.users.service import AuthService, UserService
from src.checkin_system.checkin_system.users.model import User


def test_login_success_returns_session_user(users_repo):
    s_user = AuthService(users_repo).authenticate(" Jane@Example.com ", "user1234")

    assert s_user.user_id == 2
    assert s_user.role == Role.USER
    assert s_user.to_dict() == {"id": "2", "name": "Jane Doe", "email": "jane@example.com", "role": "user"}


@pytest.mark.parametrize("email, password", [("jane@example.com", "nope"), ("ghost@example.com", "user1234")])
def test_bad_credentials(users_repo, email, password):
    with pytest.raises(AuthenticationError):
        AuthService(users_repo).authenticate(email, password)


def test_inactive_or_corrupt_hash_rejected(make_user, users_repo_factory):
    inactive = make_user(5, "Old Timer", active=False)
    corrupt = User(
        user_id=6, name="Broken Hash", email="broken@example.com", password_hash="CHANGE_ME", role=Role.USER
    )
    svc = AuthService(users_repo_factory([inactive, corrupt]))

    with pytest.raises(AuthenticationError):
        svc.authenticate("old@example.com", "secret123")
    with pytest.raises(AuthenticationError):
        svc.authenticate("broken@example.com", "CHANGE_ME")


def test_email_required(users_repo):
    with pytest.raises(ValidationError):
        AuthService(users_repo).authenticate("", "x")


def test_roster_excludes_admins(users_repo):
    assert [u.name for u in UserService(users_repo).list_roster()] == ["Bob Stone", "Jane Doe"]


def test_register_then_login(users_repo):
    s_user = UserService(users_repo).register("  Carla Diaz ", "Carla@Example.com", "password1")

    assert s_user.role == Role.USER
    assert users_repo.get_by_id(s_user.user_id).email == "carla@example.com"
    assert AuthService(users_repo).authenticate("carla@example.com", "password1").user_id == s_user.user_id
    assert "Carla Diaz" in [u.name for u in UserService(users_repo).list_roster()]


def test_register_duplicate_email_conflicts(users_repo):
    with pytest.raises(ConflictError):
        UserService(users_repo).register("Jane Two", "jane@example.com", "password1")


@pytest.mark.parametrize(
    "name, email, password",
    [
        ("C", "c@example.com", "password1"),
        ("Carla", "not-an-email", "password1"),
        ("Carla", "c@example.com", "short"),
        ("Carla", "c@example.com", "x" * 65),
        (None, "c@example.com", "password1"),
    ],
)
def test_register_validation(users_repo, name, email, password):
    with pytest.raises(ValidationError):
        UserService(users_repo).register(name, email, password)


def test_admin_signup_needs_matching_invite(users_repo):
    with pytest.raises(AuthorizationError):
        UserService(users_repo).register("Eve Admin", "eve@example.com", "password1", role="admin", invite_code="x")
    with pytest.raises(AuthorizationError):
        UserService(users_repo, admin_invite_code="code").register(
            "Eve Admin", "eve@example.com", "password1", role="admin", invite_code="wrong"
        )

    s_user = UserService(users_repo, admin_invite_code="code").register(
        "Eve Admin", "eve@example.com", "password1", role="admin", invite_code=" code "
    )
    assert s_user.role == Role.ADMIN
    assert "Eve Admin" not in [u.name for u in UserService(users_repo).list_roster()]


def test_register_rejects_unknown_role(users_repo):
    with pytest.raises(ValidationError):
        UserService(users_repo).register("Carla", "c@example.com", "password1", role="owner")
