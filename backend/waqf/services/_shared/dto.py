# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from waqf.models.user import User


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Sanitized user representation. Carries no password material.

    :param id: Opaque user id.
    :param email: Login email, if any.
    :param phone: Login phone, if any.
    :param first_name: Optional first name.
    :param last_name: Optional last name.
    :param role: Role name (``DONOR``, ``MANAGER`` or ``ADMIN``).
    :param is_active: Whether the account may authenticate.
    :param is_verified: Whether the identifier was confirmed.
    :param last_login_at: Last successful login.
    :param created_at: Creation timestamp.
    :param updated_at: Last update timestamp.
    """

    id: str
    email: str | None
    phone: str | None
    first_name: str | None
    last_name: str | None
    role: str
    is_active: bool
    is_verified: bool
    last_login_at: datetime | None
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_model(cls, user: User) -> UserOut:
        return cls(
            id=user.id,
            email=user.email,
            phone=user.phone,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role.value if hasattr(user.role, "value") else str(user.role),
            is_active=bool(user.is_active),
            is_verified=bool(user.is_verified),
            last_login_at=user.last_login_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@dataclass(frozen=True, slots=True)
class MessageOut:
    """
    Plain confirmation payload.

    :param message: Human-readable outcome.
    """

    message: str
