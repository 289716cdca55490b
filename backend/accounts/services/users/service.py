"""
UserService
===========

Application service for the `User` aggregate:
- Filtered, paginated listing (trashed scope and search via FilterPipeline)
- Point lookups, creation and partial updates with email uniqueness
- Soft deletion and restore
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from flask import current_app, has_app_context
from sqlalchemy.exc import IntegrityError

from accounts.filters.pipeline import (
    PIPELINE_EXTENSION_KEY,
    FilterPipeline,
    build_user_filter_pipeline,
)
from accounts.models.user import InvalidUserField, User
from accounts.repositories.user import UserRepository
from accounts.services._shared.base import BaseService, ServiceContext
from accounts.services._shared.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    violates,
)
from accounts.services.users.dto import UserCreateIn, UserOut, UserPageOut, UserUpdateIn

log = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 15
MAX_PER_PAGE = 100
EMAIL_TAKEN = "The email has already been taken."


def _config_int(key: str, default: int) -> int:
    if has_app_context():
        return int(current_app.config.get(key, default))
    return default


def _resolve_pipeline() -> FilterPipeline:
    if has_app_context():
        pipeline = current_app.extensions.get(PIPELINE_EXTENSION_KEY)
        if pipeline is not None:
            return pipeline
    return build_user_filter_pipeline()


class UserService(BaseService):
    """
    Application service for the `User` aggregate.

    Responsibilities
    ----------------
    - List users through the configured filter pipeline.
    - Create and update users ensuring email uniqueness across all rows.
    - Soft-delete and restore users.

    Every write runs in a read-write unit of work; lookups and listings run in
    a read-only one. Results are returned as :class:`UserOut` projections.
    """

    def __init__(
        self,
        *,
        filters: FilterPipeline | None = None,
        default_per_page: int | None = None,
        max_per_page: int | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        self.filters = filters or _resolve_pipeline()
        self.default_per_page = default_per_page or _config_int(
            "USERS_DEFAULT_PER_PAGE", DEFAULT_PER_PAGE
        )
        self.max_per_page = max_per_page or _config_int("USERS_MAX_PER_PAGE", MAX_PER_PAGE)

    # --------------------------------------------------------------------- #
    # Listing
    # --------------------------------------------------------------------- #

    def get_all_users(self, params: Mapping[str, Any]) -> UserPageOut:
        """
        Return one page of users matching ``params``.

        Active users are listed unless ``trashed`` is true-like; ``search``
        narrows by name or email. Results are ordered by creation time.

        :param params: Flat filter map (``search``, ``trashed``, ``per_page``, ``page``).
        :type params: Mapping[str, Any]
        :returns: Page projection with listing metadata.
        :rtype: UserPageOut
        :raises ValidationError: If ``per_page`` or ``page`` is out of range.
        """
        pagination = self.ensure_pagination(
            page=self._int_param(params, "page", 1),
            per_page=self._int_param(params, "per_page", self.default_per_page),
            max_per_page=self.max_per_page,
        )

        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            query = self.filters.apply_filters(repo.query(), params)
            query = query.order_by(User.created_at.asc())
            page = repo.paginate(query, pagination)

            return UserPageOut(
                items=[UserOut.from_model(user) for user in page.items],
                page=page.page,
                per_page=page.per_page,
                total=page.total,
                last_page=page.last_page,
            )

    # --------------------------------------------------------------------- #
    # Point operations
    # --------------------------------------------------------------------- #

    def get_user(self, user_id: int, *, with_trashed: bool = False) -> UserOut:
        """
        Fetch one user by id.

        :raises NotFoundError: If no user exists in the lookup scope.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id, with_trashed=with_trashed)
            if user is None:
                raise NotFoundError("User", user_id)
            return UserOut.from_model(user)

    def create_user(self, dto: UserCreateIn) -> UserOut:
        """
        Create a user with a hashed password.

        :param dto: Creation input.
        :type dto: UserCreateIn
        :returns: Public-safe user DTO.
        :rtype: UserOut
        :raises ConflictError: If the email is used by any user, trashed included.
        :raises ValidationError: If the model rejects a field value.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users

            if repo.exists_by_email(dto.email):
                raise ConflictError("User", EMAIL_TAKEN, field="email")

            try:
                user = repo.model(
                    name=dto.name,
                    email=dto.email,
                    password=dto.password,  # model hashes via setter
                )
                repo.add(user)
            except InvalidUserField as exc:
                raise ValidationError(exc.field, str(exc)) from exc
            except IntegrityError as exc:
                if violates(exc, "uq_users_email"):
                    raise ConflictError("User", EMAIL_TAKEN, field="email") from exc
                raise  # unknown integrity error -> bubble up

            out = UserOut.from_model(repo.refresh(user))

        log.info("user.created", extra={"user_id": out.id})
        return out

    def update_user(self, dto: UserUpdateIn, user_id: int) -> UserOut:
        """
        Apply a partial update to an active user.

        A new password is hashed only when a non-empty one is supplied.

        :raises NotFoundError: If the user is absent or trashed.
        :raises ConflictError: If the new email belongs to another user.
        :raises ValidationError: If the model rejects a field value.
        """
        changes = dto.changes()

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            email = changes.get("email")
            if email is not None and repo.exists_by_email(email, exclude_id=user.id):
                raise ConflictError("User", EMAIL_TAKEN, field="email")

            try:
                repo.assign_updates(user, changes)
            except InvalidUserField as exc:
                raise ValidationError(exc.field, str(exc)) from exc
            except IntegrityError as exc:
                if violates(exc, "uq_users_email"):
                    raise ConflictError("User", EMAIL_TAKEN, field="email") from exc
                raise

            out = UserOut.from_model(repo.refresh(user))

        log.info("user.updated", extra={"user_id": user_id})
        return out

    def delete_user(self, user_id: int) -> None:
        """
        Soft-delete an active user.

        :raises NotFoundError: If the user is absent or already trashed.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            user.soft_delete()
            repo.flush()

        log.info("user.deleted", extra={"user_id": user_id})

    def restore_user(self, user_id: int) -> UserOut:
        """
        Clear the deletion marker of a user.

        Restoring an active user changes nothing and returns it as is.

        :raises NotFoundError: If no user with ``user_id`` exists at all.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id, with_trashed=True)
            if user is None:
                raise NotFoundError("User", user_id)

            restored = user.is_trashed
            if restored:
                user.restore()
                repo.flush()
                repo.refresh(user)
            out = UserOut.from_model(user)

        if restored:
            log.info("user.restored", extra={"user_id": user_id})
        return out

    # --------------------------------------------------------------------- #
    # Helpers
    # --------------------------------------------------------------------- #

    @staticmethod
    def _int_param(params: Mapping[str, Any], key: str, default: int) -> int:
        value = params.get(key)
        if value is None or value == "":
            return default
        if isinstance(value, bool):
            raise ValidationError(key, f"The {key.replace('_', ' ')} field must be an integer.")
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError(
                key, f"The {key.replace('_', ' ')} field must be an integer."
            ) from exc
