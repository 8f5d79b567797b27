"""Relational refresh token store sharing the request's SQLAlchemy session."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from waqf.repositories.refresh_token import RefreshTokenRepository
from waqf.services._shared.ports import (
    ConsumeResult,
    RefreshTokenRecord,
    RefreshTokenStore,
    as_utc,
)


class SQLRefreshTokenStore(RefreshTokenStore):
    """
    Refresh token store over the ``refresh_tokens`` table.

    Writes join the caller's Unit of Work (the Flask-scoped session): nothing
    here commits. ``consume`` reads the row, then deletes it by primary key;
    the delete's row count decides the winner when two requests race on the
    same token.

    :param session: Optional explicit session (defaults to ``db.session``).
    """

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def repo(self) -> RefreshTokenRepository:
        return RefreshTokenRepository(session=self._session)

    @staticmethod
    def _to_record(row) -> RefreshTokenRecord:
        return RefreshTokenRecord(
            token=row.token, user_id=row.user_id, expires_at=as_utc(row.expires_at)
        )

    def save(self, *, token: str, user_id: str, expires_at: datetime) -> None:
        self.repo.create(token=token, user_id=str(user_id), expires_at=as_utc(expires_at))

    def get(self, token: str) -> RefreshTokenRecord | None:
        row = self.repo.get(token)
        return self._to_record(row) if row is not None else None

    def consume(self, token: str, *, now: datetime) -> tuple[ConsumeResult, RefreshTokenRecord | None]:
        repo = self.repo
        row = repo.get(token)
        if row is None:
            return ConsumeResult.NOT_FOUND, None
        record = self._to_record(row)
        # Detach so the bulk DELETE below does not leave a stale identity.
        repo.session.expunge(row)
        if repo.delete_by_token(token) == 0:
            # Lost the race: another request consumed it first.
            return ConsumeResult.NOT_FOUND, None
        if record.expires_at <= as_utc(now):
            return ConsumeResult.EXPIRED, record
        return ConsumeResult.OK, record

    def revoke(self, *, token: str, user_id: str) -> int:
        return self.repo.delete_for_user(token=token, user_id=str(user_id))

    def revoke_all_for_user(self, user_id: str) -> int:
        return self.repo.delete_all_for_user(str(user_id))

    def purge_expired(self, *, now: datetime) -> int:
        return self.repo.delete_expired(as_utc(now))
