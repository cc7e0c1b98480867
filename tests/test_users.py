"""Tests for authentication, profile updates and user management."""

import pytest

from crud import users
from errors import CredentialsInvalid, NotFoundError, ValidationError
from models.users import UserRole
from schemas.users import UserCreate


class TestAuthenticate:

    def test_valid_credentials(self, store, clerk):
        user = users.authenticate(store, "nurse", "secret")
        assert user.id == clerk.id
        assert user.display_name == "Ward Nurse"

    @pytest.mark.parametrize("username,password", [
        ("nurse", "Secret"),
        ("Nurse", "secret"),
        ("nurse", ""),
        ("", "secret"),
        ("ghost", "secret"),
    ])
    def test_exact_case_sensitive_match_required(self, store, clerk, username, password):
        with pytest.raises(CredentialsInvalid):
            users.authenticate(store, username, password)

    def test_snapshot_has_no_password(self, store):
        admin = users.authenticate(store, "admin", "0000")
        assert "password" not in admin.model_dump()


class TestUpdateProfile:

    def test_rename_keeps_identity(self, store, clerk):
        updated = users.update_profile(store, clerk.id, "Head Nurse", "headnurse")

        assert updated.id == clerk.id
        assert updated.username == "headnurse"
        assert updated.display_name == "Head Nurse"
        assert users.authenticate(store, "headnurse", "secret").id == clerk.id
        with pytest.raises(CredentialsInvalid):
            users.authenticate(store, "nurse", "secret")
        assert len(store.get_all("users")) == 2

    def test_change_password(self, store, clerk):
        users.update_profile(store, clerk.id, "Ward Nurse", "nurse", password="n3w", confirm_password="n3w")

        assert users.authenticate(store, "nurse", "n3w").id == clerk.id
        with pytest.raises(CredentialsInvalid):
            users.authenticate(store, "nurse", "secret")

    def test_blank_password_keeps_old_one(self, store, clerk):
        users.update_profile(store, clerk.id, "Ward Nurse", "nurse", password="")
        assert users.authenticate(store, "nurse", "secret")

    def test_password_confirmation_must_match(self, store, clerk):
        with pytest.raises(ValidationError) as exc:
            users.update_profile(store, clerk.id, "Ward Nurse", "nurse", password="a", confirm_password="b")
        assert exc.value.field == "confirm_password"
        assert users.authenticate(store, "nurse", "secret")

    def test_empty_username_rejected(self, store, clerk):
        with pytest.raises(ValidationError):
            users.update_profile(store, clerk.id, "Ward Nurse", "   ")

    def test_duplicate_username_rejected(self, store, clerk):
        with pytest.raises(ValidationError) as exc:
            users.update_profile(store, clerk.id, "Ward Nurse", "admin")
        assert exc.value.field == "username"
        assert users.get_user(store, clerk.id).username == "nurse"

    def test_unknown_user(self, store):
        with pytest.raises(NotFoundError):
            users.update_profile(store, "missing", "X", "x")


class TestUserManagement:

    def test_create_rejects_taken_username(self, store, clerk):
        with pytest.raises(ValidationError):
            users.create_user(store, UserCreate(username="nurse", password="p", display_name="Other"))

    def test_list_users(self, store, clerk):
        assert [u.username for u in users.list_users(store)] == ["admin", "nurse"]

    def test_delete_user(self, store, clerk):
        users.delete_user(store, clerk.id)
        with pytest.raises(NotFoundError):
            users.get_user(store, clerk.id)

    def test_last_administrator_cannot_be_deleted(self, store, admin):
        with pytest.raises(ValidationError):
            users.delete_user(store, admin.id)

        second = users.create_user(store, UserCreate(
            username="deputy", password="p", display_name="Deputy", role=UserRole.ADMIN,
        ))
        users.delete_user(store, admin.id)
        assert users.list_users(store)[0].id == second.id
