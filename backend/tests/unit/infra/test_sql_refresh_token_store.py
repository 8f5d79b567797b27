"""Unit tests for the relational refresh token store."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from tests.factories.user import RefreshTokenFactory, UserFactory
from waqf.infra.sqlalchemy.sql_refresh_token_store import SQLRefreshTokenStore
from waqf.services._shared.ports import ConsumeResult


def _now() -> datetime:
    return datetime.now(UTC)


@pytest.fixture()
def store(session):
    return SQLRefreshTokenStore()


class TestSQLRefreshTokenStore:
    def test_save_then_get_roundtrips_aware_expiry(self, store, session):
        user = UserFactory()
        expires = (_now() + timedelta(days=30)).replace(microsecond=0)
        store.save(token="rt-1", user_id=user.id, expires_at=expires)
        session.commit()

        record = store.get("rt-1")
        assert record.user_id == user.id
        assert record.expires_at == expires
        assert record.expires_at.tzinfo is not None

    def test_consume_is_single_use(self, store, session):
        rt = RefreshTokenFactory(token="rt-2")

        result, record = store.consume("rt-2", now=_now())
        session.commit()
        assert result is ConsumeResult.OK
        assert record.user_id == rt.user_id

        assert store.consume("rt-2", now=_now()) == (ConsumeResult.NOT_FOUND, None)

    def test_consume_expired_deletes_row(self, store, session):
        RefreshTokenFactory(token="rt-3", expires_at=_now() - timedelta(seconds=1))

        result, record = store.consume("rt-3", now=_now())
        session.commit()

        assert result is ConsumeResult.EXPIRED
        assert record is not None
        assert store.get("rt-3") is None

    def test_consume_unknown(self, store):
        assert store.consume("missing", now=_now()) == (ConsumeResult.NOT_FOUND, None)

    def test_revoke_checks_owner(self, store):
        rt = RefreshTokenFactory(token="rt-4")
        assert store.revoke(token="rt-4", user_id="someone-else") == 0
        assert store.revoke(token="rt-4", user_id=rt.user_id) == 1
        assert store.get("rt-4") is None

    def test_revoke_all_and_purge(self, store):
        user = UserFactory()
        RefreshTokenFactory(token="a", user=user)
        RefreshTokenFactory(token="b", user=user, expires_at=_now() - timedelta(days=1))
        RefreshTokenFactory(token="c", expires_at=_now() - timedelta(days=1))

        assert store.purge_expired(now=_now()) == 2
        assert store.revoke_all_for_user(user.id) == 1
        assert store.get("a") is None
