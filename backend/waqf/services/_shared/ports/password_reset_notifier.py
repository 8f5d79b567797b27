from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol

log = logging.getLogger(__name__)


class PasswordResetNotifier(Protocol):
    """Port delivering a freshly issued password-reset token to its owner."""

    def send_reset_token(self, *, user_id: str, identifier: str, token: str, expires_at: datetime) -> None: ...


class LoggingPasswordResetNotifier(PasswordResetNotifier):
    """Default notifier: records the issuance, exposing the token at DEBUG only.

    Stands in until an e-mail/SMS gateway is wired for the platform.
    """

    def send_reset_token(self, *, user_id: str, identifier: str, token: str, expires_at: datetime) -> None:
        log.info(
            "password_reset.issued",
            extra={"event": "password_reset.issued", "user_id": user_id},
        )
        log.debug("password_reset.token identifier=%s token=%s expires_at=%s", identifier, token, expires_at)


class InMemoryPasswordResetNotifier(PasswordResetNotifier):
    """Capture sent tokens for assertions in tests."""

    def __init__(self) -> None:
        self.sent: list[dict[str, object]] = []

    def send_reset_token(self, *, user_id: str, identifier: str, token: str, expires_at: datetime) -> None:
        self.sent.append(
            {"user_id": user_id, "identifier": identifier, "token": token, "expires_at": expires_at}
        )

    @property
    def last_token(self) -> str | None:
        return str(self.sent[-1]["token"]) if self.sent else None
