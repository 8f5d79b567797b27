"""Tiny helpers shared across test modules."""

from __future__ import annotations

from typing import Any

from waqf.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher

DEFAULT_PASSWORD = "s3cret-pass"

#: Cheap work factor so the suite stays fast; matches ``TestingConfig``.
TEST_HASHER = WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")


def bearer(token: str) -> dict[str, str]:
    """Authorization header for ``token``."""
    return {"Authorization": f"Bearer {token}"}


def register(client, **body: Any):
    """POST ``/auth/register`` and return the response."""
    return client.post("/api/v1/auth/register", json=body)


def login(client, identifier: str, password: str = DEFAULT_PASSWORD):
    """POST ``/auth/login`` and return the response."""
    return client.post("/api/v1/auth/login", json={"identifier": identifier, "password": password})
