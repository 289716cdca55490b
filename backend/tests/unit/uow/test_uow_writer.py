from __future__ import annotations

import pytest
from accounts.models.user import User
from accounts.uow import SQLAlchemyUnitOfWork as RWuow
from sqlalchemy import select
from tests.factories.user import UserFactory


class TestSQLAlchemyUnitOfWork:
    def test_commits_on_success(self, session):
        with RWuow() as uow:
            user = UserFactory.build(email="committed@example.com")
            uow.users.add(user)

        found = session.execute(
            select(User).where(User.email == "committed@example.com")
        ).scalar_one_or_none()
        assert found is not None

    def test_rolls_back_on_error(self, session):
        with pytest.raises(RuntimeError, match="boom"), RWuow() as uow:
            uow.users.add(UserFactory.build(email="rolled-back@example.com"))
            raise RuntimeError("boom")

        found = session.execute(
            select(User).where(User.email == "rolled-back@example.com")
        ).scalar_one_or_none()
        assert found is None

    def test_repositories_share_the_uow_session(self):
        uow = RWuow()
        assert uow.users.session is uow.session
