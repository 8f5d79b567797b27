"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates_schema

from .common import password_validator, phone_validator
from .user import UserSchema


class RegisterSchema(Schema):
    """Input payload for self-registration.

    Unknown keys are dropped so a client cannot smuggle ``role`` or
    ``isActive`` into the new account.
    """

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(load_default=None, allow_none=True, validate=validate.Length(max=254))
    phone = fields.String(load_default=None, allow_none=True, validate=phone_validator)
    password = fields.String(required=True, validate=password_validator)
    first_name = fields.String(
        load_default=None, allow_none=True, data_key="firstName", validate=validate.Length(max=100)
    )
    last_name = fields.String(
        load_default=None, allow_none=True, data_key="lastName", validate=validate.Length(max=100)
    )

    @validates_schema
    def _require_identifier(self, data: dict[str, Any], **_: Any) -> None:
        if not data.get("email") and not data.get("phone"):
            raise ValidationError("Email or phone is required.", field_name="email")


class LoginSchema(Schema):
    """Credentials: ``identifier`` is an email or a phone number."""

    identifier = fields.String(required=True, validate=validate.Length(min=1, max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshTokenSchema(Schema):
    refresh_token = fields.String(required=True, data_key="refreshToken", validate=validate.Length(min=1))


class LogoutSchema(RefreshTokenSchema):
    """Logout body; the owner comes from the access token, never the body."""


class ForgotPasswordSchema(Schema):
    identifier = fields.String(required=True, validate=validate.Length(min=1, max=254))


class ResetPasswordSchema(Schema):
    token = fields.String(required=True, validate=validate.Length(min=1))
    new_password = fields.String(required=True, data_key="newPassword", validate=password_validator)


class AuthSessionSchema(Schema):
    """Response payload for register, login and refresh."""

    user = fields.Nested(UserSchema, required=True)
    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")
