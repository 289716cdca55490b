"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validates_schema

from .user import EMAIL_RULES, NAME_RULES, PASSWORD_RULES, UserSchema


class RegisterSchema(Schema):
    """Input payload for account registration."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=NAME_RULES)
    email = fields.Email(required=True, validate=EMAIL_RULES)
    password = fields.String(required=True, validate=PASSWORD_RULES, load_only=True)
    password_confirmation = fields.String(required=True, load_only=True)

    @validates_schema
    def passwords_match(self, data: dict[str, Any], **_: Any) -> None:
        password = data.get("password")
        confirmation = data.get("password_confirmation")
        if password is not None and confirmation is not None and password != confirmation:
            raise ValidationError(
                "The password field confirmation does not match.", field_name="password"
            )


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)


class AuthResultSchema(Schema):
    """Response payload pairing the user with its bearer token."""

    user = fields.Nested(UserSchema, required=True)
    token = fields.String(required=True)
