"""Idempotent database seed helpers for local development environments."""

from __future__ import annotations

import logging
from typing import cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

from accounts.models.user import User

LOGGER = logging.getLogger(__name__)

USER_FIXTURES: list[dict[str, str | bool]] = [
    {
        "name": "Alex Martinez",
        "email": "alex.martinez@example.com",
        "password": "devPass123!",
    },
    {
        "name": "Jamie Lee",
        "email": "jamie.lee@example.com",
        "password": "strongPass123",
    },
    {
        "name": "Sara Kim",
        "email": "sara.kim@example.com",
        "password": "liftMore2024",
    },
    {
        "name": "Maria Garcia",
        "email": "maria.garcia@example.com",
        "password": "garciaPass99",
    },
    {
        "name": "Former Member",
        "email": "former.member@example.com",
        "password": "goneAway2024",
        "trashed": True,
    },
]


def _session(database: SQLAlchemy) -> Session:
    """Return the current SQLAlchemy session."""
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def seed_users(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create development users; existing rows (trashed included) are refreshed.

    Fixtures flagged ``trashed`` end up soft-deleted so the trashed listing
    has something to show.
    """
    if verbose:
        LOGGER.info("Seeding users...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    with session.begin():
        for fixture in USER_FIXTURES:
            email = str(fixture["email"]).strip().lower()
            user = session.execute(select(User).filter_by(email=email)).scalar_one_or_none()
            created = False
            if user is None:
                user = User(
                    name=str(fixture["name"]),
                    email=email,
                    password=str(fixture["password"]),
                )
                session.add(user)
                created = True
            else:
                user.name = str(fixture["name"])
            if fixture.get("trashed"):
                if not user.is_trashed:
                    user.soft_delete()
            elif user.is_trashed:
                user.restore()
            session.flush()
            _touch(summary, "users", created)

    return summary


def run_all(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Run all seeders."""
    if verbose:
        LOGGER.info("Running full seed pipeline...")
    return seed_users(database, verbose=verbose)


__all__ = ["USER_FIXTURES", "run_all", "seed_users"]
