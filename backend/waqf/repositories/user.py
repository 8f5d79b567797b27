"""User repository: identifier lookups and credential bookkeeping."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import or_, select

from waqf.models.user import User
from waqf.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER handles JWTs or hashing; services pass already-hashed values.
    """

    model = User

    # ---------------------------- Whitelists ----------------------------

    def _filterable_fields(self):
        return {
            "email": User.email,
            "phone": User.phone,
            "role": User.role,
            "is_active": User.is_active,
        }

    def _updatable_fields(self):
        """Self-service profile fields (role and active flag excluded)."""
        return {"email", "phone", "first_name", "last_name"}

    # ---------------------------- Lookup helpers ----------------------------

    def find_by_identifier(self, identifier: str) -> User | None:
        """Fetch the user whose email OR phone equals ``identifier``.

        Email comparison is case-insensitive (emails are stored lowercase).

        :param identifier: Email address or phone number.
        :returns: Matching user or ``None``.
        """
        ident = (identifier or "").strip()
        if not ident:
            return None
        stmt = select(User).where(or_(User.email == ident.lower(), User.phone == ident))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def find_any_by_identifiers(
        self,
        *,
        email: str | None = None,
        phone: str | None = None,
        exclude_id: str | None = None,
    ) -> User | None:
        """Return a user holding the supplied email or phone.

        Only non-empty arguments participate, so an absent field never matches
        a user whose column is NULL.

        :param email: Candidate email (normalized here).
        :param phone: Candidate phone.
        :param exclude_id: Ignore this user (profile updates).
        :returns: First clashing user or ``None``.
        """
        clauses = []
        if email and email.strip():
            clauses.append(User.email == email.strip().lower())
        if phone and phone.strip():
            clauses.append(User.phone == phone.strip())
        if not clauses:
            return None
        stmt = select(User).where(or_(*clauses))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return cast(User | None, self.session.execute(stmt).scalars().first())

    # ---------------------------- Credential ops ----------------------------

    def set_password_hash(self, user: User, password_hash: str) -> None:
        """Store a new password hash and flush.

        :param user: Target user.
        :param password_hash: Already-hashed password.
        """
        user.password_hash = password_hash
        self.flush()

    def touch_last_login(self, user: User, when: datetime) -> None:
        """Record a successful login timestamp."""
        user.last_login_at = when
        self.flush()

    def deactivate(self, user: User) -> None:
        """Soft-delete: the row stays, every authentication path closes."""
        user.is_active = False
        self.flush()
