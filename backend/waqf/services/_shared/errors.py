"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or
HTTP. They serve as stable contracts between repositories, domain models,
and application services.

The translation to HTTP responses (RFC 7807) is handled by
``waqf/core/errors.py`` via ``translate_service_error()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, *needles: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name (``uq_users_email``) while SQLite
    reports the column (``users.email``), so callers pass both forms.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    needles : str
        Constraint names or ``table.column`` references to look for.

    Returns
    -------
    bool
        True if the driver message mentions any of the needles.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return any(needle.lower() in message for needle in needles)


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories or domain logic.
    - The API layer translates them to ``APIError``.
    """


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class ValidationError(ServiceError):
    """Raised when input passes schema validation but breaks a service rule."""


class AuthorizationError(ServiceError):
    """
    Raised for every authentication failure.

    Bad credentials, unknown/expired/replayed tokens and inactive accounts all
    map here; the message stays generic so callers cannot tell them apart.
    """

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class PermissionDeniedError(ServiceError):
    """Raised when an authenticated actor lacks the role for an operation."""

    def __init__(self, message: str = "Insufficient role") -> None:
        super().__init__(message)


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"
