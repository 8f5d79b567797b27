"""
waqf.services._shared.ports
===========================

Collection of *ports* (hexagonal interfaces) that define the contracts
for credential hashing, token signing and refresh-token persistence.

Modules
-------
- :mod:`token_provider`:
    :class:`~.TokenProvider`, abstraction for JWT creation.
- :mod:`password_hasher`:
    :class:`~.PasswordHasher`, one-way salted hashing.
- :mod:`refresh_token_store`:
    :class:`~.RefreshTokenStore`, :class:`~.ConsumeResult` and
    :class:`~.RefreshTokenRecord`, one-time-use refresh token persistence.
- :mod:`password_reset_notifier`:
    :class:`~.PasswordResetNotifier`, delivery of reset tokens.

Concrete adapters live under ``waqf.infra``; in-memory doubles live next to
their port for unit tests.
"""

from __future__ import annotations

from .password_hasher import PasswordHasher
from .password_reset_notifier import (
    InMemoryPasswordResetNotifier,
    LoggingPasswordResetNotifier,
    PasswordResetNotifier,
)
from .refresh_token_store import (
    ConsumeResult,
    InMemoryRefreshTokenStore,
    RefreshTokenRecord,
    RefreshTokenStore,
    as_utc,
)
from .token_provider import StubTokenProvider, TokenProvider

__all__ = [
    "TokenProvider",
    "StubTokenProvider",
    "PasswordHasher",
    "PasswordResetNotifier",
    "LoggingPasswordResetNotifier",
    "InMemoryPasswordResetNotifier",
    "RefreshTokenStore",
    "RefreshTokenRecord",
    "ConsumeResult",
    "InMemoryRefreshTokenStore",
    "as_utc",
]
