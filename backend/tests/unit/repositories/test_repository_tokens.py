"""Unit tests for the refresh and password-reset token repositories."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from tests.factories.user import RefreshTokenFactory, UserFactory
from waqf.repositories.password_reset_token import PasswordResetTokenRepository
from waqf.repositories.refresh_token import RefreshTokenRepository


@pytest.fixture()
def repo(session):
    return RefreshTokenRepository()


@pytest.fixture()
def resets(session):
    return PasswordResetTokenRepository()


def _now() -> datetime:
    return datetime.now(UTC)


class TestRefreshTokenRepository:
    def test_delete_for_user_requires_matching_owner(self, repo, session):
        rt = RefreshTokenFactory(token="t-1")
        other = UserFactory()

        assert repo.delete_for_user(token="t-1", user_id=other.id) == 0
        assert repo.delete_for_user(token="t-1", user_id=rt.user_id) == 1
        session.commit()
        assert repo.get("t-1") is None

    def test_delete_by_token_reports_rowcount(self, repo):
        RefreshTokenFactory(token="t-2")
        assert repo.delete_by_token("t-2") == 1
        assert repo.delete_by_token("t-2") == 0

    def test_delete_all_for_user(self, repo):
        user = UserFactory()
        RefreshTokenFactory(token="a", user=user)
        RefreshTokenFactory(token="b", user=user)
        RefreshTokenFactory(token="c")

        assert repo.delete_all_for_user(user.id) == 2
        assert repo.get("a") is None
        assert repo.get("b") is None
        assert repo.get("c") is not None

    def test_delete_expired_only_removes_past_rows(self, repo):
        RefreshTokenFactory(token="old", expires_at=_now() - timedelta(minutes=1))
        RefreshTokenFactory(token="new", expires_at=_now() + timedelta(days=1))

        assert repo.delete_expired(_now()) == 1
        assert repo.get("old") is None
        assert repo.get("new") is not None


class TestPasswordResetTokenRepository:
    def test_replace_for_user_keeps_single_row(self, resets, session):
        user = UserFactory()
        resets.replace_for_user(user_id=user.id, token_hash="a" * 64, expires_at=_now())
        resets.replace_for_user(user_id=user.id, token_hash="b" * 64, expires_at=_now())
        session.commit()

        assert resets.get("a" * 64) is None
        assert resets.get("b" * 64).user_id == user.id

    def test_consume_is_single_use(self, resets):
        user = UserFactory()
        resets.replace_for_user(user_id=user.id, token_hash="c" * 64, expires_at=_now())

        assert resets.consume("c" * 64).user_id == user.id
        assert resets.consume("c" * 64) is None

    def test_delete_expired(self, resets):
        u1, u2 = UserFactory(), UserFactory()
        resets.replace_for_user(user_id=u1.id, token_hash="d" * 64, expires_at=_now() - timedelta(hours=2))
        resets.replace_for_user(user_id=u2.id, token_hash="e" * 64, expires_at=_now() + timedelta(hours=1))

        assert resets.delete_expired(_now()) == 1
