# accounts/services/_shared/base.py
from __future__ import annotations

from dataclasses import dataclass

from accounts.core import errors as api_errors
from accounts.repositories.base import Pagination
from accounts.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from accounts.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (auth, request ids, etc.).

    :param actor_id: Authenticated user identifier.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: int | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize error translation.
    * Offer shared validation helpers (pagination).
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Domain rules (hashing, soft-delete stamping) live in the models.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context (auth, tracing).
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self, *, enforce_db_readonly: bool = True) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param enforce_db_readonly: Apply `SET TRANSACTION READ ONLY` when supported.
        :type enforce_db_readonly: bool
        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(enforce_db_readonly=enforce_db_readonly)

    # ----------------------- Validation utilities ---------------------------

    def ensure_pagination(self, *, page: int, per_page: int, max_per_page: int) -> Pagination:
        """
        Build a Pagination value object, rejecting out-of-range values.

        :param page: 1-based page number.
        :type page: int
        :param per_page: Page size, ``1..max_per_page``.
        :type per_page: int
        :param max_per_page: Largest accepted page size.
        :type max_per_page: int
        :returns: Pagination instance.
        :rtype: Pagination
        :raises ValidationError: When either value is out of range.
        """
        if not 1 <= per_page <= max_per_page:
            raise ValidationError(
                "per_page", f"The per page field must be between 1 and {max_per_page}."
            )
        if page < 1:
            raise ValidationError("page", "The page field must be at least 1.")
        return Pagination(page=page, per_page=per_page)

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, NotFoundError):
            # → 404 Not Found
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            # → 422 on the blamed field, 409 otherwise
            if exc.field:
                return api_errors.UnprocessableEntity(
                    exc.detail, errors={exc.field: [exc.detail]}
                )
            return api_errors.Conflict(str(exc))

        if isinstance(exc, ValidationError | AuthenticationError):
            # → 422 Unprocessable Entity
            return api_errors.UnprocessableEntity(exc.message, errors={exc.field: [exc.message]})

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(
                message=str(exc),
                status_code=400,
                code="bad_request",
            )

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
