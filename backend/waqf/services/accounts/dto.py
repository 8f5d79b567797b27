# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """
    Partial profile update.

    :param user_id: Account being edited (always the caller).
    :param changes: Subset of ``email``, ``phone``, ``first_name``, ``last_name``.
    """

    user_id: str
    changes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ChangePasswordIn:
    user_id: str
    current_password: str
    new_password: str


@dataclass(frozen=True, slots=True)
class ForgotPasswordIn:
    identifier: str


@dataclass(frozen=True, slots=True)
class ResetPasswordIn:
    """
    Completion of a forgotten-password flow.

    :param token: Raw token delivered by the notifier.
    :param new_password: Replacement password (min 8 chars, schema-checked).
    """

    token: str
    new_password: str
