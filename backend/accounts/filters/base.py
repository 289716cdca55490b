"""Filter contract shared by every user-listing filter."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from accounts.models.user import User
from accounts.repositories.base import SoftDeleteQuery

FilterParams = Mapping[str, Any]


@runtime_checkable
class UserFilter(Protocol):
    """A predicate plus a query transform.

    ``should_apply`` decides from the request parameters whether the filter
    participates; ``apply`` returns a narrowed copy of the query. Neither
    method performs I/O.
    """

    def should_apply(self, params: FilterParams) -> bool: ...

    def apply(self, query: SoftDeleteQuery[User], params: FilterParams) -> SoftDeleteQuery[User]: ...
