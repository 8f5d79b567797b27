# tests/unit/services/test_account_service.py
from __future__ import annotations

import hashlib
from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time

from tests.factories.user import UserFactory
from tests.helpers.utils import DEFAULT_PASSWORD, TEST_HASHER
from waqf.models.password_reset_token import PasswordResetToken
from waqf.models.user import User
from waqf.services._shared.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from waqf.services._shared.ports import InMemoryPasswordResetNotifier, InMemoryRefreshTokenStore
from waqf.services.accounts import (
    AccountService,
    ChangePasswordIn,
    ForgotPasswordIn,
    ProfileUpdateIn,
    ResetPasswordIn,
)

GENERIC_RESET_MESSAGE = "If the account exists, a reset link has been sent"


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def store() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore()


@pytest.fixture()
def notifier() -> InMemoryPasswordResetNotifier:
    return InMemoryPasswordResetNotifier()


@pytest.fixture()
def service(session, store, notifier) -> AccountService:
    return AccountService(
        refresh_store=store,
        password_hasher=TEST_HASHER,
        notifier=notifier,
        reset_expires=timedelta(hours=1),
    )


def _seed_sessions(store, user_id: str, n: int = 2) -> None:
    for i in range(n):
        store.save(token=f"rt-{user_id}-{i}", user_id=user_id, expires_at=datetime.now(UTC) + timedelta(days=1))


# ------------------------------- Profile ----------------------------------- #
def test_update_profile_changes_names_and_email(service):
    user = UserFactory(email="a@x.com")

    out = service.update_profile(
        ProfileUpdateIn(user_id=user.id, changes={"first_name": "Fatou", "email": "NEW@x.com"})
    )

    assert out.first_name == "Fatou"
    assert out.email == "new@x.com"


def test_update_profile_conflicting_phone(service):
    UserFactory(phone="771234567")
    user = UserFactory()
    with pytest.raises(ConflictError):
        service.update_profile(ProfileUpdateIn(user_id=user.id, changes={"phone": "771234567"}))


def test_update_profile_keeping_own_email_is_not_a_conflict(service):
    user = UserFactory(email="a@x.com")
    out = service.update_profile(ProfileUpdateIn(user_id=user.id, changes={"email": "a@x.com"}))
    assert out.email == "a@x.com"


def test_update_profile_cannot_drop_last_identifier(service):
    user = UserFactory(email="a@x.com", phone=None)
    with pytest.raises(ValidationError):
        service.update_profile(ProfileUpdateIn(user_id=user.id, changes={"email": None}))


def test_update_profile_rejects_role(service):
    user = UserFactory()
    with pytest.raises(ValidationError):
        service.update_profile(ProfileUpdateIn(user_id=user.id, changes={"role": "ADMIN"}))


def test_update_profile_unknown_user(service):
    with pytest.raises(AuthorizationError):
        service.update_profile(ProfileUpdateIn(user_id="missing", changes={"first_name": "X"}))


# ---------------------------- Change password ------------------------------ #
def test_change_password_revokes_sessions(service, store, session):
    user = UserFactory()
    _seed_sessions(store, user.id)

    out = service.change_password(
        ChangePasswordIn(user_id=user.id, current_password=DEFAULT_PASSWORD, new_password="brand-new-pass")
    )

    assert out.message
    assert TEST_HASHER.verify(session.get(User, user.id).password_hash, "brand-new-pass")
    assert store.get(f"rt-{user.id}-0") is None


def test_change_password_wrong_current(service, store):
    user = UserFactory()
    _seed_sessions(store, user.id)

    with pytest.raises(ValidationError, match="Current password is incorrect"):
        service.change_password(
            ChangePasswordIn(user_id=user.id, current_password="nope-nope", new_password="brand-new-pass")
        )
    assert store.get(f"rt-{user.id}-0") is not None


def test_change_password_too_short(service):
    user = UserFactory()
    with pytest.raises(ValidationError):
        service.change_password(ChangePasswordIn(user_id=user.id, current_password=DEFAULT_PASSWORD, new_password="short"))


# ----------------------------- Password reset ------------------------------ #
def test_forgot_password_unknown_identifier_is_silent(service, notifier):
    out = service.request_password_reset(ForgotPasswordIn(identifier="ghost@x.com"))
    assert out.message == GENERIC_RESET_MESSAGE
    assert notifier.sent == []


def test_forgot_password_stores_digest_only(service, notifier, session):
    user = UserFactory(email="a@x.com")

    out = service.request_password_reset(ForgotPasswordIn(identifier="a@x.com"))

    assert out.message == GENERIC_RESET_MESSAGE
    raw = notifier.last_token
    assert notifier.sent[0]["user_id"] == user.id
    rows = session.query(PasswordResetToken).all()
    assert len(rows) == 1
    assert rows[0].token_hash == hashlib.sha256(raw.encode()).hexdigest()
    assert rows[0].token_hash != raw


def test_forgot_password_ignores_inactive_accounts(service, notifier):
    UserFactory(email="a@x.com", is_active=False)
    service.request_password_reset(ForgotPasswordIn(identifier="a@x.com"))
    assert notifier.sent == []


def test_reset_password_flow(service, notifier, store, session):
    user = UserFactory(email="a@x.com")
    _seed_sessions(store, user.id)
    service.request_password_reset(ForgotPasswordIn(identifier="a@x.com"))

    service.reset_password(ResetPasswordIn(token=notifier.last_token, new_password="fresh-password"))

    assert TEST_HASHER.verify(session.get(User, user.id).password_hash, "fresh-password")
    assert store.get(f"rt-{user.id}-1") is None
    with pytest.raises(ValidationError, match="Invalid or expired reset token"):
        service.reset_password(ResetPasswordIn(token=notifier.last_token, new_password="again-password"))


def test_reset_password_only_latest_token_valid(service, notifier):
    UserFactory(email="a@x.com")
    service.request_password_reset(ForgotPasswordIn(identifier="a@x.com"))
    first = notifier.last_token
    service.request_password_reset(ForgotPasswordIn(identifier="a@x.com"))

    with pytest.raises(ValidationError):
        service.reset_password(ResetPasswordIn(token=first, new_password="fresh-password"))
    service.reset_password(ResetPasswordIn(token=notifier.last_token, new_password="fresh-password"))


def test_reset_password_expired_token(service, notifier, session):
    UserFactory(email="a@x.com")
    with freeze_time("2026-03-01 10:00:00"):
        service.request_password_reset(ForgotPasswordIn(identifier="a@x.com"))
    with freeze_time("2026-03-01 11:00:01"), pytest.raises(ValidationError):
        service.reset_password(ResetPasswordIn(token=notifier.last_token, new_password="fresh-password"))
    assert session.query(PasswordResetToken).count() == 0


# ------------------------------ Deactivation ------------------------------- #
def test_deactivate_user_revokes_sessions(service, store, session):
    user = UserFactory()
    _seed_sessions(store, user.id, n=3)

    service.deactivate_user(user.id)

    assert session.get(User, user.id).is_active is False
    assert store.revoke_all_for_user(user.id) == 0


def test_deactivate_unknown_user(service):
    with pytest.raises(NotFoundError):
        service.deactivate_user("missing")
