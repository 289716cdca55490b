"""Generic repository base and query utilities for SQLAlchemy 2.x.

This module centralizes persistence-only concerns shared by all repositories:
- Soft-delete aware query building (:class:`SoftDeleteQuery`).
- Deterministic pagination (adds primary-key tiebreaker) with a total count.
- Safe update helpers with per-repository updatable-field whitelists.
- No business logic, no commit/rollback; Services own transactions.

Design decisions
----------------
* Repositories MUST remain thin and persistence-focused:
  - They never implement use cases or domain policies.
  - They never call commit/rollback; Services define the Unit of Work.
* Soft-delete scope is explicit on every query: ``active`` (default),
  ``trashed`` or ``all``. The scope is rendered into the ``WHERE`` clause of
  the final statement, so ``COUNT`` subqueries see exactly the same rows as
  the page itself.
* Updates MUST NOT allow mass-assignment: each repo exposes an explicit
  ``_updatable_fields`` whitelist.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from accounts.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


# ------------------------------- Pagination ----------------------------------


@dataclass(slots=True)
class Pagination:
    """Pagination input parameters.

    :param page: 1-based page number.
    :type page: int
    :param per_page: Page size.
    :type per_page: int
    """

    page: int
    per_page: int


@dataclass(slots=True)
class Page(Generic[E]):
    """Result page with metadata.

    :param items: Listed entities in the current page.
    :type items: Sequence[E]
    :param total: Total item count for the query.
    :type total: int
    :param page: 1-based current page number.
    :type page: int
    :param per_page: Page size.
    :type per_page: int
    """

    items: Sequence[E]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        """Number of the last page; ``1`` for an empty result."""
        return max(1, math.ceil(self.total / self.per_page))


def paginate_select(
    session: Session,
    stmt: Select[Any],
    *,
    page: int,
    per_page: int,
) -> tuple[list[Any], int]:
    """Execute a select with pagination and a total count.

    The statement's existing ``ORDER BY`` is stripped for the ``COUNT`` to avoid
    unnecessary sorting overhead.

    :param session: Active SQLAlchemy session.
    :type session: :class:`sqlalchemy.orm.Session`
    :param stmt: Base select to paginate (already filtered/sorted).
    :type stmt: :class:`sqlalchemy.sql.Select`
    :param page: 1-based page number (clamped to ``>= 1``).
    :type page: int
    :param per_page: Page size (clamped to ``>= 1``).
    :type per_page: int
    :returns: Tuple of ``(items, total)``.
    :rtype: tuple[list[Any], int]
    """
    page = max(int(page), 1)
    per_page = max(int(per_page), 1)

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = int(session.execute(count_stmt).scalar_one())

    offset = (page - 1) * per_page
    sliced = stmt.limit(per_page).offset(offset)
    items = list(session.execute(sliced).scalars().all())
    return items, total


# ------------------------------ Soft-delete query -----------------------------


class Scope(str, Enum):
    """Which rows a :class:`SoftDeleteQuery` sees."""

    ACTIVE = "active"
    TRASHED = "trashed"
    ALL = "all"


@dataclass(frozen=True, slots=True)
class SoftDeleteQuery(Generic[E]):
    """Immutable, lazy query builder over a soft-deletable model.

    Every builder method returns a new instance; nothing touches the database
    until a repository renders :meth:`to_select` and executes it.

    :param model: Mapped class exposing a ``deleted_at`` column.
    :param scope: Soft-delete scope (``active`` by default).
    :param criteria: Extra ``WHERE`` clauses, AND-ed together.
    :param ordering: ``ORDER BY`` clauses in priority order.
    """

    model: type[E]
    scope: Scope = Scope.ACTIVE
    criteria: tuple[Any, ...] = field(default=())
    ordering: tuple[Any, ...] = field(default=())

    # ------------------------------ Scope --------------------------------

    def only_trashed(self) -> SoftDeleteQuery[E]:
        """Restrict to rows with a deletion timestamp."""
        return replace(self, scope=Scope.TRASHED)

    def with_trashed(self) -> SoftDeleteQuery[E]:
        """Drop the soft-delete restriction entirely."""
        return replace(self, scope=Scope.ALL)

    def only_active(self) -> SoftDeleteQuery[E]:
        """Restrict to rows without a deletion timestamp."""
        return replace(self, scope=Scope.ACTIVE)

    # --------------------------- Composition -----------------------------

    def where(self, *clauses: Any) -> SoftDeleteQuery[E]:
        """Append ``WHERE`` clauses (AND semantics)."""
        return replace(self, criteria=self.criteria + tuple(clauses))

    def order_by(self, *clauses: Any) -> SoftDeleteQuery[E]:
        """Append ``ORDER BY`` clauses after any existing ones."""
        return replace(self, ordering=self.ordering + tuple(clauses))

    # ------------------------------ Render -------------------------------

    def _scope_clause(self) -> Any | None:
        deleted_at = cast(InstrumentedAttribute[Any], getattr(self.model, "deleted_at"))
        if self.scope is Scope.ACTIVE:
            return deleted_at.is_(None)
        if self.scope is Scope.TRASHED:
            return deleted_at.is_not(None)
        return None

    def to_select(self) -> Select[Any]:
        """Render the builder as a SQLAlchemy ``Select``."""
        stmt: Select[Any] = select(self.model)
        scope_clause = self._scope_clause()
        if scope_clause is not None:
            stmt = stmt.where(scope_clause)
        if self.criteria:
            stmt = stmt.where(*self.criteria)
        if self.ordering:
            stmt = stmt.order_by(*self.ordering)
        return stmt


# ------------------------------ Base repository ------------------------------


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a soft-deletable aggregate.

    Subclasses MUST define:

    * ``model``: the SQLAlchemy mapped class (with a ``deleted_at`` column).

    Subclasses MAY override:

    * ``_updatable_fields`` to whitelist keys allowed for updates.

    This class NEVER:

    * opens/commits/rolls back transactions,
    * implements business rules or cross-aggregate coordination.

    Services orchestrate use cases and own transaction boundaries.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        When no explicit session is provided the repository falls back to the
        Flask-scoped session exposed by ``accounts.core.extensions``.

        :param session: Session shared across the Unit of Work scope.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    # ------------------------------ Session access ---------------------------

    @property
    def session(self) -> Session:
        """Return the active SQLAlchemy session.

        :returns: Active session bound to the current Unit of Work.
        :rtype: :class:`sqlalchemy.orm.Session`
        """
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any]:
        """Return the model's primary-key attribute (``model.id``)."""
        return cast(InstrumentedAttribute[Any], getattr(self.model, "id"))

    def _updatable_fields(self) -> set[str]:
        """Whitelist of public keys that can be assigned on update.

        :returns: Set of allowed public keys for update operations.
        :rtype: set[str]
        """
        return set()

    # ------------------------------ Internals --------------------------------

    def _sanitize_update_fields(
        self,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
    ) -> dict[str, Any]:
        """Return a dict with only whitelisted update keys.

        :param fields: Raw update mapping (public keys).
        :type fields: Mapping[str, Any]
        :param strict: When ``True``, raise ``ValueError`` on unknown keys.
        :type strict: bool
        :returns: Filtered mapping with only allowed keys.
        :rtype: dict[str, Any]
        :raises ValueError: If ``strict`` and unknown keys are present.
        """
        allowed = self._updatable_fields()
        if not allowed:
            if fields and strict:
                raise ValueError("No updatable fields configured for this repository.")
            return {}

        unknown = [k for k in fields if k not in allowed]
        if unknown and strict:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")

        return {k: v for k, v in fields.items() if k in allowed}

    # ------------------------------- Queries ---------------------------------

    def query(self, scope: Scope = Scope.ACTIVE) -> SoftDeleteQuery[E]:
        """Return a fresh query builder in the given scope."""
        return SoftDeleteQuery(self.model, scope=scope)

    def first(self, query: SoftDeleteQuery[E]) -> E | None:
        """Execute ``query`` and return the first row, or ``None``."""
        result = self.session.execute(query.to_select()).scalars().first()
        return cast(E | None, result)

    def exists(self, query: SoftDeleteQuery[E]) -> bool:
        """Return ``True`` when ``query`` matches at least one row."""
        pk = self._pk_attr()
        stmt = query.to_select().with_only_columns(pk).order_by(None).limit(1)
        return self.session.execute(stmt).first() is not None

    def get(self, entity_id: Any, *, with_trashed: bool = False) -> E | None:
        """Retrieve a single entity by primary key.

        :param entity_id: Primary-key value.
        :type entity_id: Any
        :param with_trashed: Also match soft-deleted rows.
        :type with_trashed: bool
        :returns: Entity or ``None``.
        :rtype: E | None
        """
        scope = Scope.ALL if with_trashed else Scope.ACTIVE
        return self.first(self.query(scope).where(self._pk_attr() == entity_id))

    def paginate(self, query: SoftDeleteQuery[E], pagination: Pagination) -> Page[E]:
        """Paginate ``query`` with a primary-key tiebreaker appended.

        :param query: Filtered and ordered query builder.
        :type query: SoftDeleteQuery
        :param pagination: Pagination parameters.
        :type pagination: Pagination
        :returns: :class:`Page` with items and metadata.
        :rtype: Page[E]
        """
        stmt = query.order_by(self._pk_attr().asc()).to_select()
        raw_items, total = paginate_select(
            self.session,
            stmt,
            page=pagination.page,
            per_page=pagination.per_page,
        )
        return Page(
            items=cast(list[E], raw_items),
            total=total,
            page=pagination.page,
            per_page=pagination.per_page,
        )

    # --------------------------------- Writes --------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity for persistence and flush to materialize the PK.

        :param instance: New entity instance.
        :type instance: E
        :returns: The same instance after ``flush()``.
        :rtype: E
        """
        self.session.add(instance)
        self.flush()
        return instance

    def flush(self) -> None:
        """Flush pending changes to the database without committing."""
        self.session.flush()

    def refresh(self, instance: E) -> E:
        """Reload ``instance`` from the store (server-computed columns included)."""
        self.session.refresh(instance)
        return instance

    def assign_updates(
        self,
        instance: E,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
        flush: bool = True,
    ) -> E:
        """Assign only whitelisted keys to ``instance`` and optionally flush.

        The assignment uses ``setattr`` to trigger SQLAlchemy ``@validates``
        decorators and property setters defined on the mapped class.

        :param instance: Entity to mutate.
        :type instance: E
        :param fields: Public mapping of fields to assign.
        :type fields: Mapping[str, Any]
        :param strict: Raise on unknown keys (recommended True).
        :type strict: bool
        :param flush: Call ``session.flush()`` after assignment.
        :type flush: bool
        :returns: The mutated instance.
        :rtype: E
        :raises ValueError: If ``strict`` and unknown keys are present.
        """
        updates = self._sanitize_update_fields(fields, strict=strict)
        for k, v in updates.items():
            setattr(instance, k, v)
        if flush:
            self.flush()
        return instance
