"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. They serve as stable contracts between repositories, domain
models, and application services.

The translation to HTTP responses (RFC 7807) is handled by
``accounts/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name in the message; SQLite reports the
    offending ``table.column`` instead, so ``uq_<table>_<column>`` names are
    also matched against that form.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    name = constraint_name.lower()
    if name in message:
        return True
    if name.startswith("uq_") and "unique" in message:
        _, table, column = name.split("_", 2)
        return f"{table}.{column}" in message
    return False


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories or domain logic.
    - The API layer asks BaseService to translate them to APIError.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    :param field: Input field to blame, when the conflict maps to one.
    :type field: str | None
    """

    entity: str
    detail: str
    field: str | None = None

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


@dataclass(slots=True)
class ValidationError(ServiceError):
    """
    Raised when service input breaks a rule the HTTP layer did not catch.

    :param field: Offending input field.
    :type field: str
    :param message: Human-readable explanation.
    :type message: str
    """

    field: str
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class AuthenticationError(ServiceError):
    """
    Raised when credentials do not match an active user.

    Reported against ``field`` (``email`` for login) so clients render it the
    same way as a validation failure.
    """

    field: str = "email"
    message: str = "The provided credentials are incorrect."

    def __str__(self) -> str:
        return self.message


class MissingTokenSessionError(RuntimeError):
    """
    Raised when logout is invoked without a current token.

    The HTTP layer only reaches logout through an authenticated route, so this
    signals a programming error and is intentionally not a ServiceError.
    """
