"""Refresh token repository: one-time consumption and bulk revocation."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete

from waqf.models.refresh_token import RefreshToken
from waqf.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken`.

    Deletes are issued as bulk ``DELETE`` statements so the affected row count
    tells concurrent callers which one actually removed a row.
    """

    model = RefreshToken

    def _pk_attr(self):
        return RefreshToken.token

    def _filterable_fields(self):
        return {"user_id": RefreshToken.user_id}

    def create(self, *, token: str, user_id: str, expires_at: datetime) -> RefreshToken:
        """Insert a token row and flush."""
        return self.add(RefreshToken(token=token, user_id=user_id, expires_at=expires_at))

    def delete_by_token(self, token: str) -> int:
        """Delete the row keyed by ``token``. :returns: rows removed (0 or 1)."""
        result = self.session.execute(
            delete(RefreshToken)
            .where(RefreshToken.token == token)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    def delete_for_user(self, *, token: str, user_id: str) -> int:
        """Delete ``token`` only when owned by ``user_id``."""
        result = self.session.execute(
            delete(RefreshToken)
            .where(RefreshToken.token == token, RefreshToken.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    def delete_all_for_user(self, user_id: str) -> int:
        result = self.session.execute(
            delete(RefreshToken)
            .where(RefreshToken.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    def delete_expired(self, now: datetime) -> int:
        """Delete every row whose expiry is not after ``now``."""
        result = self.session.execute(
            delete(RefreshToken)
            .where(RefreshToken.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)
