# comments in English; reST docstrings
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import UTC, datetime

import redis  # type: ignore[import-untyped]

from waqf.services._shared.ports import (
    ConsumeResult,
    RefreshTokenRecord,
    RefreshTokenStore,
    as_utc,
)


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store.

    Layout:

    - ``rt:<sha256(token)>`` hash with ``token``, ``user_id``, ``expires_at``;
      the key carries a TTL matching the token expiry.
    - ``rt:u:<user_id>`` set indexing the digests of a user's tokens.

    Tokens are addressed by digest so key length stays bounded. ``consume``
    reads and deletes the hash inside one ``MULTI``/``EXEC`` block, so among
    concurrent callers only one sees the hash.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    # -------------------- helpers --------------------

    @staticmethod
    def _digest(token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    @classmethod
    def _k(cls, token: str) -> str:
        return f"rt:{cls._digest(token)}"

    @staticmethod
    def _ku(user_id: str) -> str:
        return f"rt:u:{user_id}"

    @staticmethod
    def _to_ts(dt: datetime) -> int:
        return int(as_utc(dt).timestamp())

    @staticmethod
    def _decode(h: dict[bytes, bytes]) -> RefreshTokenRecord:
        return RefreshTokenRecord(
            token=h[b"token"].decode(),
            user_id=h[b"user_id"].decode(),
            expires_at=datetime.fromtimestamp(int(h[b"expires_at"]), tz=UTC),
        )

    # -------------------- API ------------------------

    def save(self, *, token: str, user_id: str, expires_at: datetime) -> None:
        """Insert the token *before* it is handed to the client."""
        key = self._k(token)
        ttl = max(1, self._to_ts(expires_at) - self._to_ts(datetime.now(UTC)))
        pipe = self.r.pipeline(transaction=True)
        pipe.hset(
            key,
            mapping={
                "token": token,
                "user_id": str(user_id),
                "expires_at": str(self._to_ts(expires_at)),
            },
        )
        pipe.expire(key, ttl)
        pipe.sadd(self._ku(str(user_id)), self._digest(token))
        pipe.execute()

    def get(self, token: str) -> RefreshTokenRecord | None:
        h = self.r.hgetall(self._k(token))
        return self._decode(h) if h else None

    def consume(self, token: str, *, now: datetime) -> tuple[ConsumeResult, RefreshTokenRecord | None]:
        key = self._k(token)
        pipe = self.r.pipeline(transaction=True)
        pipe.hgetall(key)
        pipe.delete(key)
        h, deleted = pipe.execute()
        if not h or not deleted:
            return ConsumeResult.NOT_FOUND, None
        record = self._decode(h)
        self.r.srem(self._ku(record.user_id), self._digest(token))
        if record.expires_at <= as_utc(now):
            return ConsumeResult.EXPIRED, record
        return ConsumeResult.OK, record

    def revoke(self, *, token: str, user_id: str) -> int:
        key = self._k(token)
        owner = self.r.hget(key, "user_id")
        if owner is None or owner.decode() != str(user_id):
            return 0
        pipe = self.r.pipeline(transaction=True)
        pipe.delete(key)
        pipe.srem(self._ku(str(user_id)), self._digest(token))
        deleted, _ = pipe.execute()
        return int(deleted)

    def revoke_all_for_user(self, user_id: str) -> int:
        k_user = self._ku(str(user_id))
        digests = [d.decode() for d in self.r.smembers(k_user)]
        if not digests:
            return 0
        pipe = self.r.pipeline(transaction=True)
        for digest in digests:
            pipe.delete(f"rt:{digest}")
        pipe.delete(k_user)
        results = pipe.execute()
        return int(sum(results[:-1]))

    def purge_expired(self, *, now: datetime) -> int:
        """
        Drop index entries whose hash is gone (TTL eviction) or past expiry.

        Redis evicts expired hashes itself; this keeps the per-user sets from
        growing without bound. :returns: number of entries removed.
        """
        cutoff = self._to_ts(now)
        removed = 0
        for k_user in self.r.scan_iter(match="rt:u:*"):
            for raw in self.r.smembers(k_user):
                digest = raw.decode()
                key = f"rt:{digest}"
                exp = self.r.hget(key, "expires_at")
                if exp is None or int(exp) <= cutoff:
                    pipe = self.r.pipeline(transaction=True)
                    pipe.delete(key)
                    pipe.srem(k_user, digest)
                    pipe.execute()
                    removed += 1
        return removed
