from __future__ import annotations

from accounts.models.user import User
from tests.factories.user import UserFactory
from tests.helpers.auth import bearer, issue_token
from tests.helpers.http import assert_problem, build_url

USERS = build_url("/users")


def _user_url(user_id: int, suffix: str = "") -> str:
    return build_url(f"/users/{user_id}{suffix}")


class TestListUsers:
    def test_requires_authentication(self, client):
        assert_problem(client.get(USERS), 401)

    def test_lists_active_users_with_meta(self, client, auth_header):
        UserFactory.create_batch(3)
        UserFactory(trashed=True)

        resp = client.get(USERS, headers=auth_header)

        assert resp.status_code == 200
        body = resp.get_json()
        # three created here plus the authenticated caller
        assert body["meta"] == {"current_page": 1, "per_page": 15, "total": 4, "last_page": 1}
        assert len(body["data"]) == 4
        assert all(item["deleted_at"] is None for item in body["data"])
        assert all("password_hash" not in item for item in body["data"])

    def test_trashed_listing(self, client, auth_header):
        gone = UserFactory(trashed=True)

        resp = client.get(build_url("/users", trashed="true"), headers=auth_header)

        body = resp.get_json()
        assert [item["id"] for item in body["data"]] == [gone.id]
        assert body["data"][0]["deleted_at"] is not None

    def test_active_and_trashed_listings_never_overlap(self, client, auth_header):
        UserFactory.create_batch(3)
        UserFactory.create_batch(2, trashed=True)

        active = client.get(build_url("/users", per_page=100), headers=auth_header).get_json()
        trashed = client.get(
            build_url("/users", trashed=1, per_page=100), headers=auth_header
        ).get_json()

        active_ids = {item["id"] for item in active["data"]}
        trashed_ids = {item["id"] for item in trashed["data"]}
        assert active_ids.isdisjoint(trashed_ids)
        assert len(trashed_ids) == 2

    def test_search(self, client, auth_header):
        match = UserFactory(name="Zelda Quibbleworth")
        UserFactory(name="Dorothy Vaughan")

        resp = client.get(build_url("/users", search="quibble"), headers=auth_header)

        assert [item["id"] for item in resp.get_json()["data"]] == [match.id]

    def test_pagination(self, client, auth_header):
        UserFactory.create_batch(4)

        body = client.get(build_url("/users", per_page=2, page=2), headers=auth_header).get_json()

        assert body["meta"] == {"current_page": 2, "per_page": 2, "total": 5, "last_page": 3}
        assert len(body["data"]) == 2

    def test_per_page_out_of_range(self, client, auth_header):
        for per_page in (0, 101):
            resp = client.get(build_url("/users", per_page=per_page), headers=auth_header)
            assert_problem(resp, 422, field="per_page")

    def test_invalid_trashed_value(self, client, auth_header):
        resp = client.get(build_url("/users", trashed="maybe"), headers=auth_header)
        assert_problem(resp, 422, field="trashed")


class TestCreateUser:
    def test_creates_user(self, client, auth_header, session):
        payload = {"name": "John Doe", "email": "john@example.com", "password": "password123"}

        resp = client.post(USERS, json=payload, headers=auth_header)

        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["email"] == "john@example.com"
        assert data["deleted_at"] is None
        assert "password" not in data

        stored = session.get(User, data["id"])
        assert stored.password_hash != "password123"
        assert stored.verify_password("password123")

    def test_duplicate_email(self, client, auth_header, session):
        UserFactory(email="john@example.com")
        session.commit()

        resp = client.post(
            USERS,
            json={"name": "John", "email": "JOHN@example.com", "password": "password123"},
            headers=auth_header,
        )

        assert_problem(resp, 422, field="email")

    def test_validation_errors(self, client, auth_header):
        resp = client.post(
            USERS, json={"name": "", "email": "nope", "password": "short"}, headers=auth_header
        )
        body = assert_problem(resp, 422)
        assert {"name", "email", "password"} <= set(body["errors"])


class TestRejectedInput:
    def test_create_with_blank_name(self, client, auth_header):
        resp = client.post(
            USERS,
            json={"name": "   ", "email": "blank@example.com", "password": "password123"},
            headers=auth_header,
        )
        assert_problem(resp, 422, field="name")

    def test_create_with_undotted_domain(self, client, auth_header):
        resp = client.post(
            USERS,
            json={"name": "Ada", "email": "a@localhost", "password": "password123"},
            headers=auth_header,
        )
        assert_problem(resp, 422, field="email")

    def test_update_with_blank_name(self, client, auth_header):
        target = UserFactory()
        resp = client.patch(_user_url(target.id), json={"name": "  "}, headers=auth_header)
        assert_problem(resp, 422, field="name")


class TestShowUpdateUser:
    def test_show(self, client, auth_header):
        target = UserFactory(name="Mary Jackson")
        resp = client.get(_user_url(target.id), headers=auth_header)
        assert resp.status_code == 200
        assert resp.get_json()["data"]["name"] == "Mary Jackson"

    def test_show_missing_and_trashed(self, client, auth_header):
        trashed = UserFactory(trashed=True)
        assert_problem(client.get(_user_url(999_999), headers=auth_header), 404)
        assert_problem(client.get(_user_url(trashed.id), headers=auth_header), 404)

    def test_partial_update(self, client, auth_header):
        target = UserFactory(name="Old Name")

        resp = client.patch(_user_url(target.id), json={"name": "New Name"}, headers=auth_header)

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["name"] == "New Name"
        assert data["email"] == target.email

    def test_put_with_blank_password_keeps_credentials(self, client, auth_header, session):
        target = UserFactory(raw_password="keep-this-pass")

        resp = client.put(
            _user_url(target.id), json={"name": "Renamed", "password": ""}, headers=auth_header
        )

        assert resp.status_code == 200
        session.refresh(target)
        assert target.verify_password("keep-this-pass")

    def test_update_email_taken(self, client, auth_header, session):
        UserFactory(email="taken@example.com")
        target = UserFactory()
        session.commit()

        resp = client.patch(
            _user_url(target.id), json={"email": "taken@example.com"}, headers=auth_header
        )

        assert_problem(resp, 422, field="email")

    def test_update_missing_user(self, client, auth_header):
        resp = client.patch(_user_url(999_999), json={"name": "X"}, headers=auth_header)
        assert_problem(resp, 404)


class TestDeleteRestoreUser:
    def test_delete_then_restore(self, client, auth_header):
        target = UserFactory()

        resp = client.delete(_user_url(target.id), headers=auth_header)
        assert resp.status_code == 200
        assert resp.get_json() == {"message": "User deleted successfully"}
        assert_problem(client.get(_user_url(target.id), headers=auth_header), 404)

        trashed = client.get(build_url("/users", trashed="true"), headers=auth_header).get_json()
        assert target.id in {item["id"] for item in trashed["data"]}

        resp = client.post(_user_url(target.id, "/restore"), headers=auth_header)
        assert resp.status_code == 200
        assert resp.get_json()["data"]["deleted_at"] is None
        assert client.get(_user_url(target.id), headers=auth_header).status_code == 200

    def test_delete_missing_user(self, client, auth_header):
        assert_problem(client.delete(_user_url(999_999), headers=auth_header), 404)

    def test_restore_missing_user(self, client, auth_header):
        assert_problem(client.post(_user_url(999_999, "/restore"), headers=auth_header), 404)

    def test_deleted_user_token_stops_working(self, client, user, auth_header):
        other = UserFactory()
        other_header = bearer(issue_token(other.id))
        assert client.delete(_user_url(other.id), headers=auth_header).status_code == 200
        assert_problem(client.get(build_url("/auth/me"), headers=other_header), 401)
