"""Flask CLI commands for token housekeeping."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import click
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError

from waqf.core.extensions import get_refresh_store
from waqf.uow import SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)


@click.group("tokens")
def tokens_cli() -> None:
    """Refresh and reset token maintenance commands."""


@tokens_cli.command("purge-expired")
@with_appcontext
def purge_expired_command() -> None:
    """Delete expired refresh tokens and password reset tokens."""
    now = datetime.now(UTC)
    try:
        with SQLAlchemyUnitOfWork() as uow:
            refresh_count = get_refresh_store().purge_expired(now=now)
            reset_count = uow.password_resets.delete_expired(now)
    except SQLAlchemyError as exc:  # pragma: no cover - CLI safeguard
        raise click.ClickException(f"Purge failed: {exc}") from exc

    LOGGER.info(
        "tokens.purged",
        extra={"event": "tokens.purged", "count": refresh_count + reset_count},
    )
    click.echo(f"Purged refresh_tokens={refresh_count} password_reset_tokens={reset_count}")
