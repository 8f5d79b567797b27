"""Flask-JWT-Extended callbacks: identity loading and uniform 401 rendering.

Every token failure (missing, malformed, expired, wrong type, unknown or
inactive subject) answers with the same RFC 7807 shape used by the rest of the
API. Messages stay generic so callers cannot tell the causes apart.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask

from waqf.core.errors import problem_response
from waqf.core.extensions import jwt

log = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Invalid or expired token"
MISSING_TOKEN_MESSAGE = "Authentication required"


def _unauthorized(message: str = UNAUTHORIZED_MESSAGE):
    return problem_response(HTTPStatus.UNAUTHORIZED, message)


def init_app(app: Flask) -> None:
    """Register identity loading and error callbacks on the shared ``JWTManager``.

    :param app: Application whose JWT extension has been initialised.
    """

    @jwt.user_lookup_loader
    def _load_active_user(_jwt_header: dict[str, Any], jwt_data: dict[str, Any]):
        # Returning None triggers the user_lookup_error callback (401).
        from waqf.repositories.user import UserRepository

        user = UserRepository().get(jwt_data.get("sub"))
        if user is None or not user.is_active:
            return None
        return user

    @jwt.user_lookup_error_loader
    def _user_lookup_failed(_jwt_header: dict[str, Any], jwt_data: dict[str, Any]):
        log.warning("auth.guard.rejected", extra={"event": "guard.subject_unavailable"})
        return _unauthorized()

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return _unauthorized(MISSING_TOKEN_MESSAGE)

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        log.info("auth.guard.invalid_token", extra={"event": "guard.invalid_token"})
        return _unauthorized()

    @jwt.expired_token_loader
    def _expired_token(_jwt_header: dict[str, Any], _jwt_data: dict[str, Any]):
        return _unauthorized()
