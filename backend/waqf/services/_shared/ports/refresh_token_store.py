from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum, auto
from typing import Protocol


class ConsumeResult(Enum):
    """Outcome of a one-time refresh token consumption."""

    OK = auto()
    NOT_FOUND = auto()
    EXPIRED = auto()


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Read-model for a stored refresh token.

    :ivar token: Signed token value (primary key).
    :ivar user_id: Owner user id.
    :ivar expires_at: Absolute expiration (UTC, aware).
    """

    token: str
    user_id: str
    expires_at: datetime


def as_utc(dt: datetime) -> datetime:
    """Label naive datetimes as UTC (SQLite drops tzinfo on round-trip)."""
    return dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)


class RefreshTokenStore(Protocol):
    """
    Stateful store for refresh tokens.

    ``consume`` is the serialization point of rotation: among concurrent
    callers presenting the same token at most one observes ``OK``.
    """

    def save(self, *, token: str, user_id: str, expires_at: datetime) -> None:
        """Persist a new refresh token before it is handed to the client."""
        ...

    def get(self, token: str) -> RefreshTokenRecord | None:
        """Fetch a single token snapshot (if present)."""
        ...

    def consume(self, token: str, *, now: datetime) -> tuple[ConsumeResult, RefreshTokenRecord | None]:
        """
        Atomically delete ``token`` and report whether it was usable.

        Expired tokens are deleted as well and reported as ``EXPIRED``.
        """
        ...

    def revoke(self, *, token: str, user_id: str) -> int:
        """Delete the token when owned by ``user_id``. :returns: rows removed."""
        ...

    def revoke_all_for_user(self, user_id: str) -> int:
        """Delete every token of ``user_id``. :returns: rows removed."""
        ...

    def purge_expired(self, *, now: datetime) -> int:
        """Delete every token whose expiry is not after ``now``."""
        ...


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh token store with atomic consumption.

    .. note::
       Uses a threading lock to simulate atomicity in unit tests.
    """

    def __init__(self) -> None:
        self._by_token: dict[str, RefreshTokenRecord] = {}
        self._lock = threading.Lock()

    def save(self, *, token: str, user_id: str, expires_at: datetime) -> None:
        with self._lock:
            self._by_token[token] = RefreshTokenRecord(
                token=token, user_id=str(user_id), expires_at=as_utc(expires_at)
            )

    def get(self, token: str) -> RefreshTokenRecord | None:
        return self._by_token.get(token)

    def consume(self, token: str, *, now: datetime) -> tuple[ConsumeResult, RefreshTokenRecord | None]:
        with self._lock:
            record = self._by_token.pop(token, None)
        if record is None:
            return ConsumeResult.NOT_FOUND, None
        if record.expires_at <= as_utc(now):
            return ConsumeResult.EXPIRED, record
        return ConsumeResult.OK, record

    def revoke(self, *, token: str, user_id: str) -> int:
        with self._lock:
            record = self._by_token.get(token)
            if record is None or record.user_id != str(user_id):
                return 0
            del self._by_token[token]
            return 1

    def revoke_all_for_user(self, user_id: str) -> int:
        with self._lock:
            owned = [t for t, r in self._by_token.items() if r.user_id == str(user_id)]
            for t in owned:
                del self._by_token[t]
            return len(owned)

    def purge_expired(self, *, now: datetime) -> int:
        cutoff = as_utc(now)
        with self._lock:
            stale = [t for t, r in self._by_token.items() if r.expires_at <= cutoff]
            for t in stale:
                del self._by_token[t]
            return len(stale)
