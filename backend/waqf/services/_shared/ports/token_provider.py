from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Protocol


class TokenProvider(Protocol):
    """Port for issuing signed JWTs.

    Access and refresh tokens are signed with independent secrets. The
    refresh token's expiry is an absolute instant chosen by the caller so the
    signed ``exp`` claim and the persisted record share one source of truth.
    """

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str: ...

    def create_refresh_token(
        self,
        *,
        identity: str,
        expires_at: datetime,
        additional_claims: dict[str, Any] | None = None,
    ) -> str: ...


class StubTokenProvider(TokenProvider):
    """Deterministic token provider used in unit tests."""

    def __init__(self) -> None:
        self._seq = 0
        self._issued: dict[str, dict[str, Any]] = {}

    def _mk(self, *, identity: str, ttype: str, exp: datetime, claims: dict[str, Any] | None) -> str:
        self._seq += 1
        token = f"{ttype}.{identity}.{self._seq}"
        payload: dict[str, Any] = {
            "sub": identity,
            "type": ttype,
            "jti": f"jti-{self._seq}",
            "exp": int(exp.timestamp()),
        }
        if claims:
            payload.update(claims)
        self._issued[token] = payload
        return token

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        exp = datetime.now(UTC) + (expires_delta or timedelta(days=7))
        return self._mk(identity=identity, ttype="access", exp=exp, claims=additional_claims)

    def create_refresh_token(
        self,
        *,
        identity: str,
        expires_at: datetime,
        additional_claims: dict[str, Any] | None = None,
    ) -> str:
        return self._mk(identity=identity, ttype="refresh", exp=expires_at, claims=additional_claims)

    def decode(self, token: str) -> dict[str, Any]:
        return self._issued[token]
