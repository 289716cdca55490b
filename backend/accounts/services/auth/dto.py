# accounts/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from accounts.services.users.dto import UserOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for self-registration.

    :param name: Display name.
    :type name: str
    :param email: Email address.
    :type email: str
    :param password: Raw password (confirmation already checked upstream).
    :type password: str
    """

    name: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthResult:
    """
    Authenticated user together with a freshly issued bearer token.

    :param user: Public-safe user projection.
    :type user: UserOut
    :param token: Encoded access token.
    :type token: str
    """

    user: UserOut
    token: str
