# waqf/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from waqf.services._shared.dto import UserOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for self-registration.

    :param password: Raw password (hashed by the service).
    :param email: Optional email; at least one of email/phone is required.
    :param phone: Optional phone number.
    :param first_name: Optional first name.
    :param last_name: Optional last name.
    """

    password: str
    email: str | None = None
    phone: str | None = None
    first_name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param identifier: Email or phone number.
    :type identifier: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    identifier: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param user_id: Authenticated user (from the access token).
    :param refresh_token: Refresh token to discard.
    """

    user_id: str
    refresh_token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :param refresh_token: Encoded refresh JWT.
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class AuthSessionOut:
    """
    Result of register/login/refresh: the sanitized user and a token pair.
    """

    user: UserOut
    access_token: str
    refresh_token: str


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param access_expires: Access token lifetime.
    :param refresh_expires: Refresh token lifetime (also the stored expiry).
    """

    access_expires: timedelta
    refresh_expires: timedelta
