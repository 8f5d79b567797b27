"""Access-token guard and role guard behaviour over HTTP."""

from __future__ import annotations

from datetime import timedelta

from flask_jwt_extended import create_access_token

from tests.helpers.utils import DEFAULT_PASSWORD, bearer, login
from waqf.models.user import UserRole

ME = "/api/v1/auth/me"


def test_missing_bearer_is_401_problem(client):
    resp = client.get(ME)
    assert resp.status_code == 401
    assert resp.mimetype == "application/problem+json"
    body = resp.get_json()
    assert body["status"] == 401
    assert body["request_id"]


def test_garbage_token_is_401(client):
    assert client.get(ME, headers=bearer("not.a.jwt")).status_code == 401


def test_refresh_token_is_not_an_access_token(client, donor_session):
    resp = client.get(ME, headers=bearer(donor_session["refreshToken"]))
    assert resp.status_code == 401
    assert resp.get_json()["detail"] == "Invalid or expired token"


def test_expired_access_token_is_401(app, client, donor):
    with app.app_context():
        token = create_access_token(identity=donor["id"], expires_delta=timedelta(seconds=-30))
    resp = client.get(ME, headers=bearer(token))
    assert resp.status_code == 401
    assert resp.get_json()["detail"] == "Invalid or expired token"


def test_unknown_subject_is_401(app, client, db):
    with app.app_context():
        token = create_access_token(identity="00000000-0000-0000-0000-000000000000")
    assert client.get(ME, headers=bearer(token)).status_code == 401


def test_deactivated_user_is_rejected_and_cannot_refresh(client, make_user, donor, donor_session):
    admin = make_user(email="root@example.com", role=UserRole.ADMIN)
    admin_token = login(client, admin["email"], DEFAULT_PASSWORD).get_json()["accessToken"]

    resp = client.delete(f"/api/v1/users/{donor['id']}", headers=bearer(admin_token))
    assert resp.status_code == 200

    assert client.get(ME, headers=bearer(donor_session["accessToken"])).status_code == 401
    refreshed = client.post("/api/v1/auth/refresh", json={"refreshToken": donor_session["refreshToken"]})
    assert refreshed.status_code == 401


def test_require_roles_forbids_donor(client, donor, donor_headers, make_user):
    other = make_user()
    resp = client.delete(f"/api/v1/users/{other['id']}", headers=donor_headers)
    assert resp.status_code == 403
    assert resp.get_json()["code"] == "forbidden"


def test_require_roles_unknown_target_is_404(client, make_user):
    admin = make_user(email="root@example.com", role=UserRole.ADMIN)
    token = login(client, admin["email"], DEFAULT_PASSWORD).get_json()["accessToken"]
    resp = client.delete("/api/v1/users/missing-id", headers=bearer(token))
    assert resp.status_code == 404


def test_require_roles_without_token_is_401(client, make_user):
    other = make_user()
    assert client.delete(f"/api/v1/users/{other['id']}").status_code == 401
