"""``flask tokens`` and ``flask users`` command groups."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from tests.factories.user import RefreshTokenFactory, UserFactory
from tests.helpers.utils import login
from waqf.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from waqf.models.refresh_token import RefreshToken
from waqf.models.user import User, UserRole


def test_purge_expired(app, db):
    with app.app_context():
        user = UserFactory()
        RefreshTokenFactory(token="old", user=user, expires_at=datetime.now(UTC) - timedelta(days=1))
        RefreshTokenFactory(token="new", user=user)

    result = app.test_cli_runner().invoke(args=["tokens", "purge-expired"])

    assert result.exit_code == 0, result.output
    assert "refresh_tokens=1" in result.output
    with app.app_context():
        assert [rt.token for rt in db.session.query(RefreshToken).all()] == ["new"]


def test_create_admin_then_login(app, client):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["users", "create-admin", "--email", "Admin@Waqf.sn", "--password", "admin-pass-1"])

    assert result.exit_code == 0, result.output
    assert "Created admin admin@waqf.sn" in result.output
    resp = login(client, "admin@waqf.sn", "admin-pass-1")
    assert resp.status_code == 200
    assert resp.get_json()["user"]["role"] == "ADMIN"
    assert resp.get_json()["user"]["isVerified"] is True


def test_create_admin_promotes_existing_user(app, db):
    with app.app_context():
        UserFactory(email="staff@waqf.sn")

    result = app.test_cli_runner().invoke(
        args=["users", "create-admin", "--email", "staff@waqf.sn", "--password", "admin-pass-1"]
    )

    assert result.exit_code == 0, result.output
    assert "Promoted" in result.output
    with app.app_context():
        user = db.session.query(User).filter_by(email="staff@waqf.sn").one()
        assert user.role is UserRole.ADMIN


def test_create_admin_rejects_short_password(app, db):
    result = app.test_cli_runner().invoke(
        args=["users", "create-admin", "--email", "x@waqf.sn", "--password", "short"]
    )
    assert result.exit_code != 0


def test_create_admin_hashes_password_once(app, db, monkeypatch):
    calls = []
    original = WerkzeugPasswordHasher.hash

    def counting_hash(self, raw):
        calls.append(raw)
        return original(self, raw)

    monkeypatch.setattr(WerkzeugPasswordHasher, "hash", counting_hash)
    result = app.test_cli_runner().invoke(
        args=["users", "create-admin", "--email", "once@waqf.sn", "--password", "admin-pass-1"]
    )

    assert result.exit_code == 0, result.output
    assert calls == ["admin-pass-1"]
