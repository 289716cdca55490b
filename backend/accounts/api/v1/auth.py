"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint
from flask_jwt_extended import get_jwt

from accounts.api.deps import (
    build_auth_service,
    current_user_id,
    json_body,
    json_response,
    require_auth,
    service_errors,
    timing,
)
from accounts.schemas import AuthResultSchema, LoginSchema, RegisterSchema, UserSchema
from accounts.services.auth.dto import LoginIn, RegisterIn
from accounts.services.users import UserService

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
auth_result_schema = AuthResultSchema()
user_schema = UserSchema()


@bp.post("/register")
@timing
def register():
    """Register a new user and return it with a bearer token."""

    data = register_schema.load(json_body())
    service = build_auth_service()
    with service_errors(service):
        result = service.register(
            RegisterIn(name=data["name"], email=data["email"], password=data["password"])
        )
    return json_response(auth_result_schema.dump(result), status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue a bearer token."""

    data = login_schema.load(json_body())
    service = build_auth_service()
    with service_errors(service):
        result = service.login(LoginIn(email=data["email"], password=data["password"]))
    return json_response(auth_result_schema.dump(result))


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Revoke the bearer token used on this request."""

    service = build_auth_service()
    service.logout(current_user_id(), get_jwt())
    return json_response({"message": "Logged out successfully"})


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated user."""

    service = UserService()
    with service_errors(service):
        user = service.get_user(current_user_id())
    return json_response({"data": user_schema.dump(user)})
