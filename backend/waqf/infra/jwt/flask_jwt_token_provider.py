# waqf/infra/jwt/flask_jwt_token_provider.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast
from uuid import uuid4

import jwt as pyjwt
from flask import current_app

from waqf.services._shared.ports import TokenProvider

REFRESH_TOKEN_TYPE = "refresh"


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter issuing access tokens through Flask-JWT-Extended and refresh
    tokens through PyJWT.

    Flask-JWT-Extended signs every token type with ``JWT_SECRET_KEY``; refresh
    tokens need their own key (``JWT_REFRESH_SECRET_KEY``), so they are
    encoded directly with the same algorithm and claim layout.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        from flask_jwt_extended import create_access_token as _create_access

        # expires_delta=None falls back to JWT_ACCESS_TOKEN_EXPIRES.
        return cast(
            str,
            _create_access(
                identity=str(identity),
                additional_claims=additional_claims or {},
                expires_delta=expires_delta,
            ),
        )

    def create_refresh_token(
        self,
        *,
        identity: str,
        expires_at: datetime,
        additional_claims: dict[str, Any] | None = None,
    ) -> str:
        config = current_app.config
        now = datetime.now(UTC)
        payload: dict[str, Any] = dict(additional_claims or {})
        payload.update(
            {
                "sub": str(identity),
                "type": REFRESH_TOKEN_TYPE,
                "jti": uuid4().hex,
                "iat": now,
                "nbf": now,
                "exp": expires_at,
            }
        )
        return pyjwt.encode(
            payload,
            config["JWT_REFRESH_SECRET_KEY"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )
