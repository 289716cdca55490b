"""User management endpoints."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from accounts.api.deps import (
    json_body,
    json_response,
    require_auth,
    service_errors,
    timing,
)
from accounts.schemas import (
    UserCreateSchema,
    UserListQuerySchema,
    UserSchema,
    UserUpdateSchema,
    build_meta,
)
from accounts.services.users import UserService
from accounts.services.users.dto import UserCreateIn, UserUpdateIn

bp = Blueprint("users", __name__, url_prefix="/users")

user_schema = UserSchema()
user_list_schema = UserSchema(many=True)
user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()


@bp.get("")
@require_auth
@timing
def list_users():
    """Return a filtered page of users (active by default, trashed on request)."""

    query_schema = UserListQuerySchema(
        max_per_page=int(current_app.config.get("USERS_MAX_PER_PAGE", 100))
    )
    params = query_schema.load(request.args)
    service = UserService()
    with service_errors(service):
        page = service.get_all_users(params)
    meta = build_meta(
        current_page=page.page,
        per_page=page.per_page,
        total=page.total,
        last_page=page.last_page,
    )
    return json_response({"data": user_list_schema.dump(page.items), "meta": meta})


@bp.post("")
@require_auth
@timing
def create_user():
    """Create a new user."""

    data = user_create_schema.load(json_body())
    service = UserService()
    with service_errors(service):
        user = service.create_user(UserCreateIn(**data))
    return json_response({"data": user_schema.dump(user)}, status=201)


@bp.get("/<int:user_id>")
@require_auth
@timing
def get_user(user_id: int):
    """Return one active user."""

    service = UserService()
    with service_errors(service):
        user = service.get_user(user_id)
    return json_response({"data": user_schema.dump(user)})


@bp.route("/<int:user_id>", methods=["PUT", "PATCH"])
@require_auth
@timing
def update_user(user_id: int):
    """Apply a partial update to an active user."""

    data = user_update_schema.load(json_body())
    service = UserService()
    with service_errors(service):
        user = service.update_user(UserUpdateIn(**data), user_id)
    return json_response({"data": user_schema.dump(user)})


@bp.delete("/<int:user_id>")
@require_auth
@timing
def delete_user(user_id: int):
    """Soft-delete an active user."""

    service = UserService()
    with service_errors(service):
        service.delete_user(user_id)
    return json_response({"message": "User deleted successfully"})


@bp.post("/<int:user_id>/restore")
@require_auth
@timing
def restore_user(user_id: int):
    """Restore a soft-deleted user."""

    service = UserService()
    with service_errors(service):
        user = service.restore_user(user_id)
    return json_response({"data": user_schema.dump(user)})
