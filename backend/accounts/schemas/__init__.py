"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import AuthResultSchema, LoginSchema, RegisterSchema
from .common import UserListQuerySchema, build_meta
from .user import UserCreateSchema, UserSchema, UserUpdateSchema

__all__ = [
    "AuthResultSchema",
    "LoginSchema",
    "RegisterSchema",
    "UserListQuerySchema",
    "build_meta",
    "UserCreateSchema",
    "UserSchema",
    "UserUpdateSchema",
]
