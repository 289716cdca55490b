"""Shared API helpers for authentication, service wiring and responses."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request
from flask_jwt_extended import current_user, verify_jwt_in_request

from accounts.core.extensions import get_denylist
from accounts.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from accounts.services._shared.base import BaseService
from accounts.services._shared.errors import ServiceError
from accounts.services.auth.service import AuthService

F = TypeVar("F", bound=Callable[..., Any])


def require_auth(func: F) -> F:
    """Ensure the request carries a valid, non-revoked token of an active user."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user_id() -> int:
    """Return the id of the user resolved by the JWT user loader."""

    return int(current_user.id)


@contextmanager
def service_errors(service: BaseService) -> Iterator[None]:
    """Re-raise service-level errors as their API counterparts."""

    try:
        yield
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc


def build_auth_service() -> AuthService:
    """Wire :class:`AuthService` with the JWT adapter and the app's denylist."""

    return AuthService(
        token_provider=JWTTokenProvider(),
        denylist_store=get_denylist(),
        access_expires=current_app.config.get("JWT_ACCESS_TOKEN_EXPIRES"),
    )


def json_body() -> dict[str, Any]:
    """Return the JSON request body, or an empty mapping when absent/invalid."""

    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
