"""Refresh token rows: one per issued refresh JWT, deleted on use."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from waqf.core.extensions import db

if TYPE_CHECKING:
    from .user import User


class RefreshToken(db.Model):
    """
    Server-side record of a refresh token.

    The signed token value is the primary key, so a replayed value either
    finds its row (first use) or nothing (already rotated or revoked).
    """

    __tablename__ = "refresh_tokens"

    token: Mapped[str] = mapped_column(String(512), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    user: Mapped[User] = relationship(back_populates="refresh_tokens")

    __table_args__ = (
        Index("ix_refresh_tokens_user_id", "user_id"),
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )

    def __repr__(self) -> str:
        return f"<RefreshToken user_id={self.user_id} expires_at={self.expires_at}>"
