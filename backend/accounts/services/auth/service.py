# accounts/services/auth/service.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from accounts.repositories.user import UserRepository
from accounts.services._shared.base import BaseService
from accounts.services._shared.errors import AuthenticationError, MissingTokenSessionError
from accounts.services._shared.ports.denylist_store import TokenDenylistStore
from accounts.services._shared.ports.token_provider import TokenProvider
from accounts.services.auth.dto import AuthResult, LoginIn, RegisterIn
from accounts.services.users.dto import UserCreateIn, UserOut
from accounts.services.users.service import UserService

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Authentication lifecycle service (register / login / logout).

    Tokens are issued through a pluggable TokenProvider; logout revokes the
    caller's current access token through the TokenDenylistStore until the
    token would have expired on its own.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        denylist_store: TokenDenylistStore,
        users: UserService | None = None,
        access_expires: timedelta | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_provider: Adapter for issuing/decoding access tokens.
        :param denylist_store: Denylist for access tokens (JTI-based).
        :param users: User service used for registration.
        :param access_expires: Access token lifetime (library default when ``None``).
        """
        super().__init__()
        self.tokens = token_provider
        self.denylist = denylist_store
        self.users = users or UserService()
        self.access_expires = access_expires

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthResult:
        """
        Create a user and issue a token for it.

        :raises ConflictError: If the email is already taken.
        """
        user = self.users.create_user(
            UserCreateIn(name=dto.name, email=dto.email, password=dto.password)
        )
        token = self._issue(user)
        log.info("auth.registered", extra={"user_id": user.id})
        return AuthResult(user=user, token=token)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthResult:
        """
        Authenticate credentials of an active user and issue a token.

        :raises AuthenticationError: If the email/password pair does not match.
        """
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.authenticate(dto.email, dto.password)
            if user is None:
                raise AuthenticationError()
            out = UserOut.from_model(user)

        token = self._issue(out)
        log.info("auth.login", extra={"user_id": out.id})
        return AuthResult(user=out, token=token)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, user_id: int, token_claims: Mapping[str, Any] | None) -> None:
        """
        Revoke the caller's current access token.

        :param user_id: Authenticated user id (for logging).
        :param token_claims: Decoded claims of the token used on this request.
        :raises MissingTokenSessionError: If there is no current token.
        """
        jti = (token_claims or {}).get("jti")
        if not jti:
            raise MissingTokenSessionError("logout called without a current access token")

        self.denylist.revoke_jti(jti=str(jti), expires_at=self._expires_at(token_claims or {}))
        log.info("auth.logout", extra={"user_id": user_id})

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _issue(self, user: UserOut) -> str:
        return self.tokens.create_access_token(
            identity=str(user.id),
            expires_delta=self.access_expires,
        )

    def _expires_at(self, claims: Mapping[str, Any]) -> datetime:
        exp = claims.get("exp")
        if exp is not None:
            return datetime.fromtimestamp(int(exp), tz=UTC)
        return datetime.now(UTC) + (self.access_expires or timedelta(hours=1))
