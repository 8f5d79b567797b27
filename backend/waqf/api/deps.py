"""Shared API helpers: guards, service wiring and response helpers."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request
from flask_jwt_extended import current_user, get_jwt_identity, verify_jwt_in_request

from waqf.core.errors import Forbidden
from waqf.core.extensions import get_refresh_store
from waqf.core.logger import ensure_request_id
from waqf.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from waqf.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from waqf.models.user import UserRole
from waqf.services._shared.base import ServiceContext
from waqf.services._shared.ports import LoggingPasswordResetNotifier
from waqf.services.accounts import AccountService
from waqf.services.auth import AuthService
from waqf.services.auth.dto import AuthTokenConfig

F = TypeVar("F", bound=Callable[..., Any])


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token for an active user.

    On success the loaded user is available as
    ``flask_jwt_extended.current_user``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_roles(*roles: UserRole | str) -> Callable[[F], F]:
    """Ensure the authenticated user holds one of ``roles``.

    The role is read from the user loaded for this request, never from the
    token claims.
    """

    allowed = {r.value if isinstance(r, UserRole) else str(r) for r in roles}

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            verify_jwt_in_request(optional=False)
            role = getattr(current_user.role, "value", current_user.role)
            if role not in allowed:
                raise Forbidden("Insufficient role")
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def service_context() -> ServiceContext:
    """Build the request-scoped context handed to services."""

    try:
        actor = get_jwt_identity()
    except RuntimeError:
        # Public route: verify_jwt_in_request() never ran.
        actor = None
    return ServiceContext(actor_id=actor, request_id=ensure_request_id())


def get_auth_service() -> AuthService:
    """Wire an :class:`AuthService` from the application configuration."""

    cfg = current_app.config
    return AuthService(
        token_provider=JWTTokenProvider(),
        refresh_store=get_refresh_store(),
        password_hasher=WerkzeugPasswordHasher(method=cfg["PASSWORD_HASH_METHOD"]),
        token_cfg=AuthTokenConfig(
            access_expires=cfg["JWT_ACCESS_TOKEN_EXPIRES"],
            refresh_expires=cfg["JWT_REFRESH_TOKEN_EXPIRES"],
        ),
        ctx=service_context(),
    )


def get_account_service() -> AccountService:
    """Wire an :class:`AccountService` from the application configuration."""

    cfg = current_app.config
    return AccountService(
        refresh_store=get_refresh_store(),
        password_hasher=WerkzeugPasswordHasher(method=cfg["PASSWORD_HASH_METHOD"]),
        notifier=LoggingPasswordResetNotifier(),
        reset_expires=cfg["PASSWORD_RESET_EXPIRES"],
        ctx=service_context(),
    )


def json_body() -> dict[str, Any]:
    """Return the request JSON object, or an empty mapping."""

    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
