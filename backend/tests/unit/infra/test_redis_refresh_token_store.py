"""
Unit tests for RedisRefreshTokenStore using fakeredis.

They use fakeredis.FakeRedis so they run entirely in-memory.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import fakeredis
import pytest

from waqf.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from waqf.services._shared.ports import ConsumeResult


def _now() -> datetime:
    """Return a timezone-aware UTC "now"."""
    return datetime.now(UTC)


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def store(fake_redis):
    """Provide a RedisRefreshTokenStore backed by FakeRedis."""
    return RedisRefreshTokenStore(r=fake_redis)


def test_save_sets_ttl_and_index(store, fake_redis):
    store.save(token="tok", user_id="u1", expires_at=_now() + timedelta(minutes=5))

    key = store._k("tok")
    assert 0 < fake_redis.ttl(key) <= 300
    assert fake_redis.sismember("rt:u:u1", store._digest("tok"))
    record = store.get("tok")
    assert record.user_id == "u1"
    assert record.token == "tok"


def test_consume_once(store):
    store.save(token="tok", user_id="u1", expires_at=_now() + timedelta(minutes=5))

    result, record = store.consume("tok", now=_now())
    assert result is ConsumeResult.OK
    assert record.user_id == "u1"
    assert store.consume("tok", now=_now()) == (ConsumeResult.NOT_FOUND, None)


def test_consume_past_expiry_reports_expired(store):
    store.save(token="tok", user_id="u1", expires_at=_now() + timedelta(minutes=5))

    result, _ = store.consume("tok", now=_now() + timedelta(minutes=10))
    assert result is ConsumeResult.EXPIRED
    assert store.get("tok") is None


def test_revoke_requires_owner(store):
    store.save(token="tok", user_id="u1", expires_at=_now() + timedelta(minutes=5))

    assert store.revoke(token="tok", user_id="u2") == 0
    assert store.revoke(token="tok", user_id="u1") == 1
    assert store.get("tok") is None


def test_revoke_all_for_user(store):
    for i in range(3):
        store.save(token=f"t{i}", user_id="u1", expires_at=_now() + timedelta(minutes=5))
    store.save(token="other", user_id="u2", expires_at=_now() + timedelta(minutes=5))

    assert store.revoke_all_for_user("u1") == 3
    assert store.get("other") is not None
    assert store.revoke_all_for_user("u1") == 0


def test_purge_expired_cleans_index(store, fake_redis):
    store.save(token="live", user_id="u1", expires_at=_now() + timedelta(hours=1))
    store.save(token="dead", user_id="u1", expires_at=_now() + timedelta(minutes=1))

    assert store.purge_expired(now=_now() + timedelta(minutes=30)) == 1
    assert fake_redis.smembers("rt:u:u1") == {store._digest("live").encode()}
