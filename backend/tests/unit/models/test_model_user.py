"""Tests for the User model."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from tests.factories.user import UserFactory
from tests.helpers.utils import TEST_HASHER
from waqf.models.user import User, UserRole


class TestUser:
    def test_defaults_on_insert(self, session):
        u = User(email="donor@example.com", password_hash=TEST_HASHER.hash("x" * 8))
        session.add(u)
        session.commit()

        assert len(u.id) == 36
        assert u.role is UserRole.DONOR
        assert u.is_active is True
        assert u.is_verified is False
        assert u.last_login_at is None
        assert u.created_at is not None

    def test_email_normalized_and_unique(self, session):
        u1 = User(email="  Alice@Example.com ", password_hash="h")
        session.add(u1)
        session.commit()
        assert u1.email == "alice@example.com"

        u2 = User(email="alice@example.com", password_hash="h")
        session.add(u2)
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_phone_unique(self, session):
        UserFactory(email=None, phone="771234567")
        session.add(User(phone="771234567", password_hash="h"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_requires_email_or_phone(self, session):
        session.add(User(password_hash="h"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_blank_identifiers_become_null(self):
        u = User(email="   ", phone="  ", password_hash="h")
        assert u.email is None
        assert u.phone is None

    def test_malformed_email_rejected(self):
        with pytest.raises(ValueError):
            User(email="not-an-email", password_hash="h")

    def test_identifier_prefers_email(self):
        assert User(email="a@x.com", phone="771234567", password_hash="h").identifier == "a@x.com"
        assert User(phone="771234567", password_hash="h").identifier == "771234567"
