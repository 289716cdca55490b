from accounts.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    Scope,
    SoftDeleteQuery,
)
from accounts.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "Page",
    "Pagination",
    "Scope",
    "SoftDeleteQuery",
    "UserRepository",
]
