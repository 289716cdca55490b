"""Flask CLI commands for user maintenance."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from accounts.services._shared.errors import NotFoundError
from accounts.services.users import UserService


@click.group("users")
def users_cli() -> None:
    """User maintenance commands."""


@users_cli.command("restore")
@click.argument("user_id", type=int)
@with_appcontext
def restore_command(user_id: int) -> None:
    """Restore the soft-deleted user USER_ID."""
    try:
        user = UserService().restore_user(user_id)
    except NotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Restored user {user.id} <{user.email}>")
