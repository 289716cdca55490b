"""Composable query filters for resource listings."""

from accounts.filters.base import FilterParams, UserFilter
from accounts.filters.pipeline import (
    PIPELINE_EXTENSION_KEY,
    FilterPipeline,
    build_user_filter_pipeline,
)
from accounts.filters.search import SearchUsersFilter
from accounts.filters.trashed import TrashedUsersFilter

__all__ = [
    "PIPELINE_EXTENSION_KEY",
    "FilterParams",
    "FilterPipeline",
    "SearchUsersFilter",
    "TrashedUsersFilter",
    "UserFilter",
    "build_user_filter_pipeline",
]
