"""User repository for persistence and authentication utilities."""

from __future__ import annotations

from accounts.models.user import User
from accounts.repositories.base import BaseRepository, Scope


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    This repository focuses on safe lookup and password verification.
    It NEVER handles JWT or session creation, only DB-level user management.
    """

    model = User

    def _updatable_fields(self) -> set[str]:
        """Publicly allowed updatable fields (``password`` goes through the setter)."""
        return {"name", "email", "password"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str, *, scope: Scope = Scope.ACTIVE) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :param scope: Soft-delete scope of the lookup.
        :type scope: Scope
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        return self.first(self.query(scope).where(User.email == email.lower().strip()))

    def exists_by_email(self, email: str, *, exclude_id: int | None = None) -> bool:
        """Return ``True`` when any row (active or trashed) uses ``email``.

        :param email: Email address to normalise and search.
        :type email: str
        :param exclude_id: Ignore this user id (self-updates).
        :type exclude_id: int | None
        :returns: ``True`` if a row is found; otherwise ``False``.
        :rtype: bool
        """
        query = self.query(Scope.ALL).where(User.email == email.lower().strip())
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        return self.exists(query)

    # ---------------------------- Password ops ----------------------------

    def authenticate(self, email: str, password: str) -> User | None:
        """Authenticate an *active* user by email and password.

        :param email: Email address to authenticate.
        :type email: str
        :param password: Raw password to verify.
        :type password: str
        :returns: Authenticated user or ``None`` when credentials fail.
        :rtype: User | None
        """
        user = self.get_by_email(email)
        if not user or not user.verify_password(password):
            return None
        return user
