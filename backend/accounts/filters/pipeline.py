"""Ordered execution of listing filters."""

from __future__ import annotations

from collections.abc import Iterable

from accounts.filters.base import FilterParams, UserFilter
from accounts.filters.search import SearchUsersFilter
from accounts.filters.trashed import TrashedUsersFilter
from accounts.models.user import User
from accounts.repositories.base import SoftDeleteQuery

PIPELINE_EXTENSION_KEY = "user_filter_pipeline"


class FilterPipeline:
    """Apply every participating filter, in configured order, to a query.

    The pipeline is stateless and safe to share across requests; it is built
    once at application start and stored on ``app.extensions``.
    """

    def __init__(self, filters: Iterable[UserFilter] = ()) -> None:
        self._filters: tuple[UserFilter, ...] = tuple(filters)

    @property
    def filters(self) -> tuple[UserFilter, ...]:
        return self._filters

    def apply_filters(
        self, query: SoftDeleteQuery[User], params: FilterParams
    ) -> SoftDeleteQuery[User]:
        """Return ``query`` narrowed by each filter whose predicate matches ``params``."""
        for user_filter in self._filters:
            if user_filter.should_apply(params):
                query = user_filter.apply(query, params)
        return query


def build_user_filter_pipeline() -> FilterPipeline:
    """Assemble the user-listing pipeline: trashed scope first, then search."""
    return FilterPipeline([TrashedUsersFilter(), SearchUsersFilter()])
