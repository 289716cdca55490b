"""
accounts.services._shared.ports
===============================

Ports (hexagonal interfaces) for token management.

Modules
-------
- :mod:`token_provider`:
    Defines :class:`~.TokenProvider`: abstraction for JWT creation and decoding.

- :mod:`denylist_store`:
    Defines :class:`~.TokenDenylistStore`: interface for access-token revocation.

Concrete adapters (Redis, flask-jwt-extended) live under ``accounts.infra``.
"""

from __future__ import annotations

from .denylist_store import InMemoryDenylistStore, TokenDenylistStore
from .token_provider import StubTokenProvider, TokenProvider

__all__ = [
    "InMemoryDenylistStore",
    "StubTokenProvider",
    "TokenDenylistStore",
    "TokenProvider",
]
