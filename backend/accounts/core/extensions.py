"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from accounts.services._shared.ports import TokenDenylistStore

# Constraint names are relied upon when translating IntegrityError
# (see ``accounts.services._shared.errors.violates``).
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()
redis_client: redis.Redis | None = None

DENYLIST_EXTENSION_KEY = "token_denylist"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, JWT and the token denylist backend.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`accounts.models` package so Alembic sees the full metadata.

    Notes
    -----
    When ``REDIS_URL`` is configured, revoked token ids are stored in Redis so
    every worker process sees the same denylist. Otherwise an in-process store
    is installed, which is only suitable for a single worker.
    """
    db.init_app(app)

    from accounts import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)

    from accounts.services._shared.ports import InMemoryDenylistStore

    global redis_client
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        redis_client = None
        app.extensions.pop("redis_client", None)
        app.extensions[DENYLIST_EXTENSION_KEY] = InMemoryDenylistStore()
        return

    redis_client = redis.Redis.from_url(redis_url)
    try:
        redis_client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = redis_client

    from accounts.infra.redis.redis_denylist_store import RedisTokenDenylistStore

    app.extensions[DENYLIST_EXTENSION_KEY] = RedisTokenDenylistStore(redis_client)


def get_denylist() -> TokenDenylistStore:
    """Return the token denylist bound to the current application."""
    store = current_app.extensions.get(DENYLIST_EXTENSION_KEY)
    if store is None:
        raise RuntimeError("Token denylist is not initialized. Call init_app() first.")
    return cast("TokenDenylistStore", store)
