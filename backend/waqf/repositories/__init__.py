"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from waqf.repositories.base import BaseRepository
from waqf.repositories.password_reset_token import PasswordResetTokenRepository
from waqf.repositories.refresh_token import RefreshTokenRepository
from waqf.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "PasswordResetTokenRepository",
    "RefreshTokenRepository",
    "UserRepository",
]
