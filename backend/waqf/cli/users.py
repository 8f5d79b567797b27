"""Flask CLI commands for account administration."""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy.exc import IntegrityError

from waqf.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from waqf.models.user import User, UserRole
from waqf.uow import SQLAlchemyUnitOfWork


@click.group("users")
def users_cli() -> None:
    """Account administration commands."""


@users_cli.command("create-admin")
@click.option("--email", required=True, help="Login email of the administrator.")
@click.option("--password", required=True, help="Password (min 8 characters).")
@click.option("--phone", default=None, help="Optional login phone number.")
@with_appcontext
def create_admin_command(email: str, password: str, phone: str | None) -> None:
    """Create an ADMIN account, or promote and reset an existing one."""
    if len(password) < 8:
        raise click.BadParameter("must be at least 8 characters", param_hint="--password")

    hasher = WerkzeugPasswordHasher(method=current_app.config["PASSWORD_HASH_METHOD"])
    try:
        password_hash = hasher.hash(password)
        with SQLAlchemyUnitOfWork() as uow:
            user = uow.users.find_by_identifier(email)
            created = user is None
            if user is None:
                user = uow.users.add(User(email=email, phone=phone, password_hash=password_hash))
            else:
                if phone:
                    user.phone = phone
                uow.users.set_password_hash(user, password_hash)
            user.role = UserRole.ADMIN
            user.is_active = True
            user.is_verified = True
            identifier = user.identifier
    except (IntegrityError, ValueError) as exc:
        raise click.ClickException(f"Could not create admin: {exc}") from exc

    click.echo(f"{'Created' if created else 'Promoted'} admin {identifier}")
