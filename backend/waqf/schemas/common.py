"""Common Marshmallow schemas and validators shared across resources."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

# Senegalese numbers: optional +221 / 00221 prefix, then nine digits.
PHONE_PATTERN = r"^(\+221|00221)?[0-9]{9}$"

phone_validator = validate.Regexp(PHONE_PATTERN, error="Invalid phone number.")
password_validator = validate.Length(min=8, max=128)


class MessageSchema(Schema):
    """Plain confirmation payload."""

    message = fields.String(required=True)
