"""User resource schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, pre_load, validate

NAME_RULES = [
    validate.Length(min=1, max=255, error="Name must be between 1 and 255 characters"),
    validate.Regexp(r"^\s*\S", error="Name cannot be blank"),
]
# Dotted domain required; `fields.Email` alone accepts bare hosts such as `localhost`.
EMAIL_RULES = [
    validate.Length(max=255),
    validate.Regexp(
        r"^[^@]+@[^@]+\.[^@]+$", error="Email must include a domain such as example.com"
    ),
]
PASSWORD_RULES = [validate.Length(min=8, error="Password must be at least 8 characters")]


class UserCreateSchema(Schema):
    """Payload for creating a new user from the admin surface."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(
        required=True, validate=NAME_RULES, error_messages={"required": "Name is required"}
    )
    email = fields.Email(
        required=True,
        validate=EMAIL_RULES,
        error_messages={
            "required": "Email is required",
            "invalid": "Email must be a valid email address",
        },
    )
    password = fields.String(
        required=True,
        validate=PASSWORD_RULES,
        load_only=True,
        error_messages={"required": "Password is required"},
    )


class UserUpdateSchema(Schema):
    """Partial update payload; every field is optional and a blank password is ignored."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(validate=NAME_RULES)
    email = fields.Email(
        validate=EMAIL_RULES,
        error_messages={"invalid": "Email must be a valid email address"},
    )
    password = fields.String(validate=PASSWORD_RULES, load_only=True, allow_none=True)

    @pre_load
    def blank_password_means_unchanged(self, data: Any, **_: Any) -> Any:
        if isinstance(data, dict) and data.get("password") == "":
            data = {**data, "password": None}
        return data


class UserSchema(Schema):
    """Public representation of a user; credentials are never dumped."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    email = fields.Email(required=True)
    email_verified_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)
    deleted_at = fields.DateTime(allow_none=True)
