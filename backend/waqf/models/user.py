"""User model: the credential record behind every login."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, Enum, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from waqf.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin

if TYPE_CHECKING:
    from .refresh_token import RefreshToken


class UserRole(str, enum.Enum):
    """Platform roles, ordered from least to most privileged."""

    DONOR = "DONOR"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


class User(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity of a donor or staff member.

    Fields
    ------
    email : str | None
        Login email, stored normalized (lowercase, trimmed). Unique.
    phone : str | None
        Login phone number, stored trimmed. Unique.
    password_hash : str
        One-way hash produced by the configured password hasher.
    first_name, last_name : str | None
        Optional display names.
    role : UserRole
        ``DONOR`` on self-registration.
    is_active : bool
        ``False`` disables every authentication path.
    is_verified : bool
        Set once the identifier has been confirmed (seeded admins).
    last_login_at : datetime | None
        Refreshed on every successful login.

    At least one of ``email``/``phone`` is required (table check constraint).
    """

    __tablename__ = "users"

    email: Mapped[str | None] = mapped_column(String(254), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"), nullable=False, default=UserRole.DONOR
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    refresh_tokens: Mapped[list[RefreshToken]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("phone", name="uq_users_phone"),
        CheckConstraint("email IS NOT NULL OR phone IS NOT NULL", name="email_or_phone"),
    )

    @property
    def identifier(self) -> str:
        """Human-readable login handle carried in token claims (email, else phone)."""
        return self.email or self.phone or ""

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str | None) -> str | None:
        """
        Normalize email; blank values become ``None``.

        :raises ValueError: If a non-blank email is malformed.
        """
        if value is None:
            return None
        v = value.strip().lower()
        if not v:
            return None
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("phone")
    def _normalize_phone(self, key: str, value: str | None) -> str | None:
        if value is None:
            return None
        v = value.strip()
        return v or None
