"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from contextlib import suppress

from flask import current_app
from sqlalchemy import event, text
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from waqf.core.extensions import db
from waqf.repositories import (
    PasswordResetTokenRepository,
    RefreshTokenRepository,
    UserRepository,
)
from waqf.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.refresh_tokens = RefreshTokenRepository(session=self.session)
        self.password_resets = PasswordResetTokenRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    The same session is shared across all repositories for a consistent
    transaction. Leaving the block commits; an exception rolls back and
    propagates.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # No-op: the session is lazily started on the first statement.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work backed by the Flask-scoped SQLAlchemy session.

    This UoW:
    - Applies ``SET TRANSACTION READ ONLY`` on PostgreSQL/MySQL when it owns
      the transaction.
    - Blocks ORM flushes carrying pending changes.
    - Always rolls back on exit and disallows ``commit()``.

    Notes
    -----
    *SQLite*: the read-only flag is not supported; the flush guard still
    prevents ORM writes.
    """

    def __init__(self, *, enforce_db_readonly: bool = True) -> None:
        # Bind to the concrete Session of the current scope so the flush guard
        # never leaks onto sessions of other requests.
        super().__init__(session=db.session())
        self.enforce_db_readonly = enforce_db_readonly
        self._txn_ctx: SessionTransaction | None = None
        self._guard_installed = False

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Own a fresh transaction when possible, else attach to the running one.

        When SQLAlchemy reports a transaction already in progress
        (``InvalidRequestError``) the scope attaches to it and skips the
        ``SET TRANSACTION`` directive; the flush guard still applies.
        """
        self._txn_ctx = None
        try:
            txn_ctx = self.session.begin()
            txn_ctx.__enter__()
            self._txn_ctx = txn_ctx
        except InvalidRequestError:
            pass

        self._install_guard()

        if self._txn_ctx is not None and self.enforce_db_readonly:
            dialect = self.session.get_bind().dialect.name
            if dialect in ("postgresql", "mysql", "mariadb"):
                try:
                    self.session.execute(text("SET TRANSACTION READ ONLY"))
                except SQLAlchemyError as exc:
                    current_app.logger.warning(
                        "SET TRANSACTION READ ONLY failed (%s). Falling back to guard-only.", exc
                    )
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        """Remove the guard; roll back only if this scope owns the transaction."""
        try:
            if self._txn_ctx is not None:
                with suppress(SQLAlchemyError):
                    self.session.rollback()
                # Leave the SessionTransaction context entered in __enter__.
                try:
                    self._txn_ctx.__exit__(exc_type, exc, tb)
                finally:
                    self._txn_ctx = None
        finally:
            self._remove_guard()

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always, to prevent accidental writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ----------------------------- Guard --------------------------------------

    @staticmethod
    def _before_flush(session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError(
                "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
            )

    def _install_guard(self) -> None:
        if not self._guard_installed:
            event.listen(self.session, "before_flush", self._before_flush)
            self._guard_installed = True

    def _remove_guard(self) -> None:
        if self._guard_installed:
            with suppress(InvalidRequestError):
                event.remove(self.session, "before_flush", self._before_flush)
            self._guard_installed = False
