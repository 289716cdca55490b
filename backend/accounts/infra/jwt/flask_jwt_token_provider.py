# accounts/infra/jwt/flask_jwt_token_provider.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from flask_jwt_extended import create_access_token, decode_token

from accounts.services._shared.ports import TokenProvider


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter for Flask-JWT-Extended.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def create_access_token(
        self,
        *,
        identity: int | str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        # flask-jwt-extended requires a string subject and generates the jti.
        kwargs: dict[str, Any] = {"identity": str(identity)}
        if additional_claims:
            kwargs["additional_claims"] = additional_claims
        if expires_delta is not None:
            kwargs["expires_delta"] = expires_delta
        return cast(str, create_access_token(**kwargs))

    def decode(self, token: str) -> dict[str, Any]:
        return cast(dict[str, Any], decode_token(token))

    def get_jti(self, token: str) -> str:
        return cast(str, self.decode(token)["jti"])

    def get_expires_at(self, token: str) -> datetime:
        exp = int(self.decode(token)["exp"])
        return datetime.fromtimestamp(exp, tz=UTC)
