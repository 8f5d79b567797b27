"""Password reset token repository."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete

from waqf.models.password_reset_token import PasswordResetToken
from waqf.repositories.base import BaseRepository


class PasswordResetTokenRepository(BaseRepository[PasswordResetToken]):
    """Persistence-only repository for :class:`PasswordResetToken`."""

    model = PasswordResetToken

    def _pk_attr(self):
        return PasswordResetToken.token_hash

    def replace_for_user(self, *, user_id: str, token_hash: str, expires_at: datetime) -> PasswordResetToken:
        """Drop any outstanding request of ``user_id`` and store the new digest."""
        self.session.execute(
            delete(PasswordResetToken)
            .where(PasswordResetToken.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return self.add(PasswordResetToken(token_hash=token_hash, user_id=user_id, expires_at=expires_at))

    def consume(self, token_hash: str) -> PasswordResetToken | None:
        """Return and delete the request keyed by ``token_hash`` (single use)."""
        row = self.get(token_hash)
        if row is None:
            return None
        self.delete(row)
        return row

    def delete_expired(self, now: datetime) -> int:
        result = self.session.execute(
            delete(PasswordResetToken)
            .where(PasswordResetToken.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)
