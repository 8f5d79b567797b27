"""User resource schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, validate, validates_schema

from .common import password_validator, phone_validator


class UserSchema(Schema):
    """Public (sanitized) representation of a user; never carries the hash."""

    id = fields.String(required=True)
    email = fields.String(allow_none=True)
    phone = fields.String(allow_none=True)
    first_name = fields.String(allow_none=True, data_key="firstName")
    last_name = fields.String(allow_none=True, data_key="lastName")
    role = fields.String(required=True)
    is_active = fields.Boolean(required=True, data_key="isActive")
    is_verified = fields.Boolean(required=True, data_key="isVerified")
    last_login_at = fields.DateTime(allow_none=True, data_key="lastLoginAt")
    created_at = fields.DateTime(allow_none=True, data_key="createdAt")
    updated_at = fields.DateTime(allow_none=True, data_key="updatedAt")


class ProfileUpdateSchema(Schema):
    """Partial self-service update. Unknown keys (``role``, ``isActive``) are rejected."""

    email = fields.Email(allow_none=True, validate=validate.Length(max=254))
    phone = fields.String(allow_none=True, validate=phone_validator)
    first_name = fields.String(allow_none=True, data_key="firstName", validate=validate.Length(max=100))
    last_name = fields.String(allow_none=True, data_key="lastName", validate=validate.Length(max=100))

    @validates_schema
    def _not_empty(self, data: dict[str, Any], **_: Any) -> None:
        if not data:
            raise ValidationError("At least one field is required.")


class ChangePasswordSchema(Schema):
    current_password = fields.String(required=True, data_key="currentPassword")
    new_password = fields.String(required=True, data_key="newPassword", validate=password_validator)
