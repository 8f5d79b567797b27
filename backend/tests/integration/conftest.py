"""Fixtures for HTTP-level tests (no app context held open by the test)."""

from __future__ import annotations

from typing import Any

import pytest

from tests.factories.user import UserFactory
from tests.helpers.utils import DEFAULT_PASSWORD, bearer, login


@pytest.fixture()
def make_user(app, db):
    """Persist a user and return its plain identifiers.

    Returns a dict so tests never hold ORM instances across app contexts.
    """

    def _make(**kwargs: Any) -> dict[str, Any]:
        with app.app_context():
            user = UserFactory(**kwargs)
            return {"id": user.id, "email": user.email, "phone": user.phone, "role": user.role.value}

    return _make


@pytest.fixture()
def donor(make_user):
    return make_user(email="donor@example.com")


@pytest.fixture()
def donor_session(client, donor) -> dict[str, Any]:
    """Login response body for :func:`donor`."""
    resp = login(client, donor["email"], DEFAULT_PASSWORD)
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()


@pytest.fixture()
def donor_headers(donor_session) -> dict[str, str]:
    return bearer(donor_session["accessToken"])
