"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint
from flask_jwt_extended import current_user

from waqf.api.deps import get_account_service, get_auth_service, json_body, json_response, require_auth, timing
from waqf.schemas import (
    AuthSessionSchema,
    ForgotPasswordSchema,
    LoginSchema,
    LogoutSchema,
    MessageSchema,
    RefreshTokenSchema,
    RegisterSchema,
    ResetPasswordSchema,
    UserSchema,
)
from waqf.services.accounts import ForgotPasswordIn, ResetPasswordIn
from waqf.services.auth import LoginIn, LogoutIn, RefreshIn, RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshTokenSchema()
logout_schema = LogoutSchema()
forgot_schema = ForgotPasswordSchema()
reset_schema = ResetPasswordSchema()
session_schema = AuthSessionSchema()
user_schema = UserSchema()
message_schema = MessageSchema()


@bp.post("/register")
@timing
def register():
    """Create a DONOR account and return it with a first token pair."""

    data = register_schema.load(json_body())
    result = get_auth_service().register(RegisterIn(**data))
    return json_response(session_schema.dump(result), status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate an email or phone plus password."""

    data = login_schema.load(json_body())
    result = get_auth_service().login(LoginIn(**data))
    return json_response(session_schema.dump(result))


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Discard the supplied refresh token of the caller."""

    data = logout_schema.load(json_body())
    result = get_auth_service().logout(LogoutIn(user_id=current_user.id, refresh_token=data["refresh_token"]))
    return json_response(message_schema.dump(result))


@bp.post("/refresh")
@timing
def refresh():
    """Rotate a refresh token into a fresh pair."""

    data = refresh_schema.load(json_body())
    result = get_auth_service().refresh_tokens(RefreshIn(**data))
    return json_response(session_schema.dump(result))


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated user profile."""

    result = get_auth_service().get_profile(current_user.id)
    return json_response(user_schema.dump(result))


@bp.post("/forgot-password")
@timing
def forgot_password():
    """Start a password reset; the answer never reveals whether the account exists."""

    data = forgot_schema.load(json_body())
    result = get_account_service().request_password_reset(ForgotPasswordIn(**data))
    return json_response(message_schema.dump(result))


@bp.post("/reset-password")
@timing
def reset_password():
    data = reset_schema.load(json_body())
    result = get_account_service().reset_password(ResetPasswordIn(**data))
    return json_response(message_schema.dump(result))
