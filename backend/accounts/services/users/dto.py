# accounts/services/users/dto.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from accounts.models.user import User

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class UserCreateIn:
    """
    Input DTO for creating a user.

    :param name: Display name.
    :type name: str
    :param email: Email address (normalized by the model).
    :type email: str
    :param password: Raw password (hashed by the model).
    :type password: str
    """

    name: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Input DTO for partial updates. ``None`` means "leave unchanged".

    An empty ``password`` is treated as absent, so the stored hash is kept.
    """

    name: str | None = None
    email: str | None = None
    password: str | None = None

    def changes(self) -> dict[str, Any]:
        """Return only the fields that should be written."""
        out: dict[str, Any] = {}
        if self.name is not None:
            out["name"] = self.name
        if self.email is not None:
            out["email"] = self.email
        if self.password:
            out["password"] = self.password
        return out


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Public-safe user projection (never carries credentials).
    """

    id: int
    name: str
    email: str
    email_verified_at: datetime | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None

    @classmethod
    def from_model(cls, user: User) -> UserOut:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            email_verified_at=user.email_verified_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
            deleted_at=user.deleted_at,
        )


@dataclass(frozen=True, slots=True)
class UserPageOut:
    """
    One page of users plus listing metadata.

    :param items: Users on this page.
    :param page: Current 1-based page.
    :param per_page: Page size used.
    :param total: Rows matching the filters across all pages.
    :param last_page: Last page number (``1`` for an empty result).
    """

    items: Sequence[UserOut]
    page: int
    per_page: int
    total: int
    last_page: int
