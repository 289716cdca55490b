"""Bearer-token callbacks wiring ``flask-jwt-extended`` to the user store.

The callbacks decide three things for every protected request:

* whether the presented token was revoked (denylist lookup by ``jti``),
* which :class:`~accounts.models.user.User` the token identifies (active
  users only, so tokens of trashed users stop working immediately),
* how authentication failures are rendered (RFC 7807, ``401``).
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response

from accounts.core.errors import as_problem, problem_response
from accounts.core.extensions import get_denylist, jwt

log = logging.getLogger(__name__)


def _unauthorized(message: str) -> Response:
    log.warning("Bearer authentication failed: %s", message)
    return problem_response(
        as_problem(status=HTTPStatus.UNAUTHORIZED, code="unauthorized", message=message)
    )


def is_token_revoked(jwt_header: dict[str, Any], jwt_payload: dict[str, Any]) -> bool:
    """Return ``True`` when the token's ``jti`` is on the denylist."""
    jti = jwt_payload.get("jti")
    return bool(jti) and get_denylist().is_revoked(str(jti))


def load_user(jwt_header: dict[str, Any], jwt_data: dict[str, Any]):
    """Resolve the token subject to an *active* user, or ``None``."""
    from accounts.repositories.user import UserRepository

    subject = jwt_data.get("sub")
    try:
        user_id = int(subject)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return UserRepository().get(user_id)


def init_app(app: Flask) -> None:
    """Register the JWT callbacks on the shared :data:`jwt` manager."""
    jwt.token_in_blocklist_loader(is_token_revoked)
    jwt.user_lookup_loader(load_user)

    @jwt.unauthorized_loader
    def _missing_token(reason: str) -> Response:
        return _unauthorized("Unauthenticated.")

    @jwt.invalid_token_loader
    def _invalid_token(reason: str) -> Response:
        return _unauthorized("Invalid token.")

    @jwt.expired_token_loader
    def _expired_token(jwt_header: dict[str, Any], jwt_payload: dict[str, Any]) -> Response:
        return _unauthorized("Token has expired.")

    @jwt.revoked_token_loader
    def _revoked_token(jwt_header: dict[str, Any], jwt_payload: dict[str, Any]) -> Response:
        return _unauthorized("Token has been revoked.")

    @jwt.user_lookup_error_loader
    def _unknown_user(jwt_header: dict[str, Any], jwt_payload: dict[str, Any]) -> Response:
        return _unauthorized("Unauthenticated.")
