"""Marshmallow schemas for the HTTP surface (camelCase on the wire)."""

from .auth import (
    AuthSessionSchema,
    ForgotPasswordSchema,
    LoginSchema,
    LogoutSchema,
    RefreshTokenSchema,
    RegisterSchema,
    ResetPasswordSchema,
)
from .common import MessageSchema
from .user import ChangePasswordSchema, ProfileUpdateSchema, UserSchema

__all__ = [
    "AuthSessionSchema",
    "ChangePasswordSchema",
    "ForgotPasswordSchema",
    "LoginSchema",
    "LogoutSchema",
    "MessageSchema",
    "ProfileUpdateSchema",
    "RefreshTokenSchema",
    "RegisterSchema",
    "ResetPasswordSchema",
    "UserSchema",
]
