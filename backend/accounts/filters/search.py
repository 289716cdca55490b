"""Case-insensitive substring search over user name and email."""

from __future__ import annotations

from sqlalchemy import or_

from accounts.filters.base import FilterParams
from accounts.models.user import User
from accounts.repositories.base import SoftDeleteQuery

ESCAPE_CHAR = "\\"


def like_pattern(term: str) -> str:
    """Wrap ``term`` in ``%`` after escaping ``LIKE`` wildcards so they match literally."""
    escaped = (
        term.replace(ESCAPE_CHAR, ESCAPE_CHAR * 2)
        .replace("%", ESCAPE_CHAR + "%")
        .replace("_", ESCAPE_CHAR + "_")
    )
    return f"%{escaped}%"


class SearchUsersFilter:
    """Keep users whose name or email contains ``search``.

    Case folding is the database's: on SQLite ``ILIKE`` renders as
    ``lower(x) LIKE lower(y)`` and ``lower()`` only folds ASCII, so "élodie"
    does not match "ÉLODIE" there. PostgreSQL folds Unicode.
    """

    def should_apply(self, params: FilterParams) -> bool:
        search = params.get("search")
        return isinstance(search, str) and search != ""

    def apply(self, query: SoftDeleteQuery[User], params: FilterParams) -> SoftDeleteQuery[User]:
        pattern = like_pattern(str(params["search"]))
        return query.where(
            or_(
                User.name.ilike(pattern, escape=ESCAPE_CHAR),
                User.email.ilike(pattern, escape=ESCAPE_CHAR),
            )
        )
