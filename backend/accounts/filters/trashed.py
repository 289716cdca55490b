"""Switch a user listing to soft-deleted rows only."""

from __future__ import annotations

from typing import Any

from accounts.filters.base import FilterParams
from accounts.models.user import User
from accounts.repositories.base import SoftDeleteQuery

TRUTHY = frozenset({"true", "1"})


def is_truthy(value: Any) -> bool:
    """Interpret ``True``, ``1``, ``"true"`` and ``"1"`` as true; anything else as false."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY
    return False


class TrashedUsersFilter:
    """Show trashed users instead of active ones when ``trashed`` is true-like."""

    def should_apply(self, params: FilterParams) -> bool:
        return is_truthy(params.get("trashed"))

    def apply(self, query: SoftDeleteQuery[User], params: FilterParams) -> SoftDeleteQuery[User]:
        return query.only_trashed()
