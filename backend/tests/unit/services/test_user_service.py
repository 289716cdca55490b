from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from accounts.services._shared.errors import ConflictError, NotFoundError, ValidationError
from accounts.services.users.dto import UserCreateIn, UserOut, UserPageOut, UserUpdateIn
from accounts.services.users.service import EMAIL_TAKEN, UserService
from tests.factories.user import UserFactory


@pytest.fixture()
def service(app) -> UserService:
    return UserService()


# ------------------------------- Listing ----------------------------------- #
class TestGetAllUsers:
    def test_lists_active_users_with_meta(self, service):
        UserFactory.create_batch(3)
        UserFactory(trashed=True)

        page = service.get_all_users({})

        assert isinstance(page, UserPageOut)
        assert page.total == 3
        assert page.page == 1
        assert page.per_page == 15
        assert page.last_page == 1
        assert all(isinstance(u, UserOut) and u.deleted_at is None for u in page.items)

    def test_trashed_flag_lists_only_trashed(self, service):
        UserFactory.create_batch(2)
        gone = UserFactory(trashed=True)

        page = service.get_all_users({"trashed": "true"})

        assert [u.id for u in page.items] == [gone.id]

    def test_trashed_and_active_listings_are_disjoint(self, service):
        UserFactory.create_batch(4)
        UserFactory.create_batch(2, trashed=True)

        active = {u.id for u in service.get_all_users({"per_page": 100}).items}
        trashed = {u.id for u in service.get_all_users({"trashed": "1", "per_page": 100}).items}

        assert len(active) == 4
        assert len(trashed) == 2
        assert active.isdisjoint(trashed)

    def test_search_matches_name_or_email(self, service):
        by_name = UserFactory(name="Grace Hopper", email="admiral@example.com")
        by_email = UserFactory(name="Someone Else", email="grace.fan@example.com")
        UserFactory(name="Alan Turing", email="alan@example.com")

        page = service.get_all_users({"search": "GRACE"})

        assert {u.id for u in page.items} == {by_name.id, by_email.id}

    def test_search_treats_wildcards_literally(self, service):
        literal = UserFactory(name="100% Real")
        UserFactory(name="1000 Real")

        page = service.get_all_users({"search": "100%"})

        assert [u.id for u in page.items] == [literal.id]

    def test_search_inside_trashed_scope(self, service):
        UserFactory(name="Linus Active")
        trashed = UserFactory(name="Linus Trashed", trashed=True)

        page = service.get_all_users({"search": "linus", "trashed": True})

        assert [u.id for u in page.items] == [trashed.id]

    def test_orders_by_creation_time(self, service, session):
        older = UserFactory()
        newer = UserFactory()
        older.created_at = datetime.now(UTC) - timedelta(days=2)
        newer.created_at = datetime.now(UTC) - timedelta(days=3)
        session.flush()

        ids = [u.id for u in service.get_all_users({}).items]

        assert ids.index(newer.id) < ids.index(older.id)

    def test_paginates(self, service):
        UserFactory.create_batch(5)

        page = service.get_all_users({"per_page": "2", "page": "3"})

        assert page.total == 5
        assert page.last_page == 3
        assert len(page.items) == 1

    @pytest.mark.parametrize("per_page", [0, 101, -1])
    def test_rejects_out_of_range_per_page(self, service, per_page):
        with pytest.raises(ValidationError) as excinfo:
            service.get_all_users({"per_page": per_page})
        assert excinfo.value.field == "per_page"

    def test_rejects_non_numeric_page(self, service):
        with pytest.raises(ValidationError) as excinfo:
            service.get_all_users({"page": "first"})
        assert excinfo.value.field == "page"

    def test_empty_listing_has_one_page(self, service):
        page = service.get_all_users({"search": "nobody-matches-this"})
        assert page.total == 0
        assert page.last_page == 1
        assert list(page.items) == []

    def test_respects_injected_page_size(self, app):
        UserFactory.create_batch(3)
        page = UserService(default_per_page=2, max_per_page=5).get_all_users({})
        assert page.per_page == 2
        assert len(page.items) == 2


# ---------------------------- Point operations ----------------------------- #
class TestGetUser:
    def test_returns_active_user(self, service):
        user = UserFactory()
        out = service.get_user(user.id)
        assert out.id == user.id
        assert out.email == user.email

    def test_trashed_user_is_not_found(self, service):
        user = UserFactory(trashed=True)
        with pytest.raises(NotFoundError):
            service.get_user(user.id)
        assert service.get_user(user.id, with_trashed=True).deleted_at is not None

    def test_missing_user(self, service):
        with pytest.raises(NotFoundError):
            service.get_user(999_999)


class TestCreateUser:
    def test_creates_user_with_hashed_password(self, service, session):
        out = service.create_user(
            UserCreateIn(name="John Doe", email="John@Example.com", password="password123")
        )

        assert out.id is not None
        assert out.email == "john@example.com"
        assert out.deleted_at is None
        assert out.created_at is not None
        assert not hasattr(out, "password_hash")

        from accounts.models.user import User

        stored = session.get(User, out.id)
        assert stored.verify_password("password123")

    def test_duplicate_email_conflicts_on_email_field(self, service):
        UserFactory(email="dup@example.com")
        with pytest.raises(ConflictError) as excinfo:
            service.create_user(UserCreateIn(name="Dup", email="DUP@example.com", password="x" * 8))
        assert excinfo.value.field == "email"
        assert excinfo.value.detail == EMAIL_TAKEN

    def test_email_of_trashed_user_is_still_taken(self, service):
        UserFactory(email="ghost@example.com", trashed=True)
        with pytest.raises(ConflictError):
            service.create_user(UserCreateIn(name="New", email="ghost@example.com", password="x" * 8))


class TestModelRejections:
    def test_create_with_blank_name_is_a_validation_error(self, service):
        with pytest.raises(ValidationError) as excinfo:
            service.create_user(UserCreateIn(name="   ", email="blank.com", password="x" * 8))
        assert excinfo.value.field == "name"

    def test_create_with_undotted_domain_is_a_validation_error(self, service):
        with pytest.raises(ValidationError) as excinfo:
            service.create_user(UserCreateIn(name="Ada", email="a@localhost", password="x" * 8))
        assert excinfo.value.field == "email"

    def test_update_with_blank_name_is_a_validation_error(self, service):
        user = UserFactory()
        with pytest.raises(ValidationError) as excinfo:
            service.update_user(UserUpdateIn(name="  "), user.id)
        assert excinfo.value.field == "name"


class TestUpdateUser:
    def test_partial_update_keeps_other_fields(self, service):
        user = UserFactory(name="Before", raw_password="original-pass")

        out = service.update_user(UserUpdateIn(name="After"), user.id)

        assert out.name == "After"
        assert out.email == user.email
        assert service.get_user(user.id).name == "After"

    def test_empty_password_keeps_hash(self, service, session):
        user = UserFactory(raw_password="original-pass")
        old_hash = user.password_hash

        service.update_user(UserUpdateIn(password=""), user.id)

        session.refresh(user)
        assert user.password_hash == old_hash

    def test_new_password_is_rehashed(self, service, session):
        user = UserFactory(raw_password="original-pass")

        service.update_user(UserUpdateIn(password="another-pass"), user.id)

        session.refresh(user)
        assert user.verify_password("another-pass")
        assert not user.verify_password("original-pass")

    def test_keeping_own_email_is_allowed(self, service):
        user = UserFactory(email="me@example.com")
        out = service.update_user(UserUpdateIn(email="ME@example.com"), user.id)
        assert out.email == "me@example.com"

    def test_email_of_other_user_conflicts(self, service):
        UserFactory(email="other@example.com")
        user = UserFactory()
        with pytest.raises(ConflictError) as excinfo:
            service.update_user(UserUpdateIn(email="other@example.com"), user.id)
        assert excinfo.value.field == "email"

    def test_trashed_user_cannot_be_updated(self, service):
        user = UserFactory(trashed=True)
        with pytest.raises(NotFoundError):
            service.update_user(UserUpdateIn(name="X"), user.id)


class TestDeleteAndRestore:
    def test_delete_moves_user_to_trash(self, service):
        user = UserFactory()

        service.delete_user(user.id)

        with pytest.raises(NotFoundError):
            service.get_user(user.id)
        trashed = service.get_all_users({"trashed": "true"})
        assert [u.id for u in trashed.items] == [user.id]

    def test_delete_of_trashed_user_is_not_found(self, service):
        user = UserFactory(trashed=True)
        with pytest.raises(NotFoundError):
            service.delete_user(user.id)

    def test_restore_returns_active_user(self, service):
        user = UserFactory()
        service.delete_user(user.id)

        out = service.restore_user(user.id)

        assert out.deleted_at is None
        assert service.get_user(user.id).id == user.id

    def test_restore_of_active_user_is_a_noop(self, service):
        user = UserFactory()
        out = service.restore_user(user.id)
        assert out.id == user.id
        assert out.deleted_at is None

    def test_restore_of_missing_user(self, service):
        with pytest.raises(NotFoundError):
            service.restore_user(424_242)
