"""Flask CLI commands for session maintenance and account administration."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from sessionauth.models.user import User
from sessionauth.services._shared.errors import ServiceError
from sessionauth.services.credentials import CredentialHasher, PasswordPolicy
from sessionauth.services.provider import get_session_service
from sessionauth.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)


@click.group("sessions")
def sessions_cli() -> None:
    """Refresh-token session maintenance."""


@sessions_cli.command("sweep")
@with_appcontext
def sweep_command() -> None:
    """Delete expired refresh-token records. Meant to run periodically."""
    deleted = get_session_service().sweep_expired_tokens()
    click.echo(f"Deleted {deleted} expired session(s).")


@sessions_cli.command("disable-user")
@click.argument("user_id", type=int)
@with_appcontext
def disable_user_command(user_id: int) -> None:
    """Disable USER_ID and revoke every session it holds."""
    try:
        get_session_service().disable_user(user_id)
    except ServiceError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"User {user_id} disabled; all sessions revoked.")


@click.group("users")
def users_cli() -> None:
    """Account administration."""


@users_cli.command("create-admin")
@click.option("--email", required=True, help="Login email of the administrator.")
@click.password_option("--password", help="Password (prompted when omitted).")
@with_appcontext
def create_admin_command(email: str, password: str) -> None:
    """Create an enabled administrator account."""
    config = current_app.config
    policy = PasswordPolicy(
        min_length=int(config.get("PASSWORD_MIN_LENGTH", 6)),
        max_length=int(config.get("PASSWORD_MAX_LENGTH", 255)),
    )
    report = policy.check_strength(password)
    if not report.ok:
        raise click.ClickException("; ".join(report.messages))

    hasher = CredentialHasher(config.get("PASSWORD_HASH_METHOD", "scrypt"))
    with SQLAlchemyUnitOfWork() as uow:
        if uow.users.exists_by_email(email):
            raise click.ClickException(f"Email {email!r} is already registered.")
        user = uow.users.add(
            User(email=email, password_hash=hasher.hash(password), is_admin=True, enabled=True)
        )
        user_id = user.id
    LOGGER.info("users.admin_created", extra={"owner_id": user_id})
    click.echo(f"Administrator {user_id} created.")
