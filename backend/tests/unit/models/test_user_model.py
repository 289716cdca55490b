from __future__ import annotations

from datetime import UTC, datetime

import pytest
from accounts.models.user import User
from sqlalchemy.exc import IntegrityError
from tests.factories.user import UserFactory


class TestUserModel:
    def test_password_is_hashed_and_verifiable(self, session):
        user = User(name="Ada", email="ada@example.com", password="correct horse")
        session.add(user)
        session.flush()

        assert user.password_hash != "correct horse"
        assert user.verify_password("correct horse") is True
        assert user.verify_password("wrong") is False

    def test_password_is_write_only(self):
        user = UserFactory.build()
        with pytest.raises(AttributeError):
            _ = user.password

    def test_empty_password_rejected(self):
        user = UserFactory.build()
        with pytest.raises(ValueError):
            user.password = ""

    def test_email_is_normalized(self):
        user = User(name="Ada", email="  Ada.Lovelace@Example.COM ", password="x" * 8)
        assert user.email == "ada.lovelace@example.com"

    @pytest.mark.parametrize("email", ["", "no-at-sign", "user@localhost"])
    def test_invalid_email_rejected(self, email):
        with pytest.raises(ValueError):
            User(name="Ada", email=email, password="x" * 8)

    def test_blank_name_rejected(self):
        with pytest.raises(ValueError):
            User(name="   ", email="ada@example.com", password="x" * 8)

    def test_email_unique_across_trashed_rows(self, session):
        UserFactory(email="taken@example.com", trashed=True)
        with pytest.raises(IntegrityError):
            UserFactory(email="taken@example.com")

    def test_timestamps_filled_by_database(self, session):
        user = UserFactory()
        session.refresh(user)
        assert user.created_at is not None
        assert user.updated_at is not None
        assert user.deleted_at is None


class TestSoftDeleteMixin:
    def test_soft_delete_and_restore(self):
        user = UserFactory.build()
        assert user.is_trashed is False

        user.soft_delete()
        assert user.is_trashed is True
        assert user.deleted_at.tzinfo is UTC

        user.restore()
        assert user.is_trashed is False
        assert user.deleted_at is None

    def test_soft_delete_uses_given_timestamp(self):
        when = datetime(2024, 5, 1, 10, 30, tzinfo=UTC)
        user = UserFactory.build()
        user.soft_delete(now=when)
        assert user.deleted_at == when

    def test_repr_includes_id(self, session):
        user = UserFactory()
        assert repr(user) == f"<User id={user.id}>"
