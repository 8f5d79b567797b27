# waqf/services/accounts/service.py
from __future__ import annotations

import hashlib
import logging
import secrets
from datetime import timedelta

from sqlalchemy.exc import IntegrityError

from waqf.services._shared.base import BaseService, ServiceContext
from waqf.services._shared.dto import MessageOut, UserOut
from waqf.services._shared.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
    violates,
)
from waqf.services._shared.ports import (
    PasswordHasher,
    PasswordResetNotifier,
    RefreshTokenStore,
    as_utc,
)
from waqf.services.accounts.dto import (
    ChangePasswordIn,
    ForgotPasswordIn,
    ProfileUpdateIn,
    ResetPasswordIn,
)

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
RESET_REQUESTED_MESSAGE = "If the account exists, a reset link has been sent"
RESET_DONE_MESSAGE = "Password has been reset"
PASSWORD_CHANGED_MESSAGE = "Password changed successfully"
DEACTIVATED_MESSAGE = "User deactivated"
INVALID_RESET_TOKEN = "Invalid or expired reset token"
WRONG_CURRENT_PASSWORD = "Current password is incorrect"
IDENTIFIER_IN_USE = "identifier already in use"

_PROFILE_FIELDS = frozenset({"email", "phone", "first_name", "last_name"})


def hash_reset_token(raw: str) -> str:
    """Digest stored in place of a raw reset token."""
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class AccountService(BaseService):
    """
    Profile maintenance, password changes/resets and administrative deactivation.

    Every path that replaces a credential or closes an account also revokes the
    user's refresh tokens, so open sessions cannot outlive the change.
    """

    def __init__(
        self,
        *,
        refresh_store: RefreshTokenStore,
        password_hasher: PasswordHasher,
        notifier: PasswordResetNotifier,
        reset_expires: timedelta = timedelta(hours=1),
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        :param refresh_store: Store whose tokens get revoked on credential changes.
        :param password_hasher: Adapter hashing and verifying passwords.
        :param notifier: Delivery port for reset tokens.
        :param reset_expires: Lifetime of a reset token.
        """
        super().__init__(ctx=ctx)
        self.refresh_store = refresh_store
        self.hasher = password_hasher
        self.notifier = notifier
        self.reset_expires = reset_expires

    # ------------------------------------------------------------------ #
    # Profile
    # ------------------------------------------------------------------ #

    def update_profile(self, dto: ProfileUpdateIn) -> UserOut:
        """
        Apply a partial profile update for the caller.

        :raises AuthorizationError: If the caller no longer exists.
        :raises ValidationError: On unknown fields or when both identifiers
            would end up empty.
        :raises ConflictError: If a new email/phone belongs to someone else.
        """
        unknown = set(dto.changes) - _PROFILE_FIELDS
        if unknown:
            raise ValidationError(f"Fields not editable: {sorted(unknown)}")

        with self.rw_uow() as uow:
            user = uow.users.get(dto.user_id)
            if user is None:
                raise AuthorizationError()

            changes = dict(dto.changes)
            for key in ("email", "phone"):
                if key in changes and isinstance(changes[key], str):
                    changes[key] = changes[key].strip() or None

            email = changes.get("email", user.email)
            phone = changes.get("phone", user.phone)
            if not email and not phone:
                raise ValidationError("Email or phone is required")

            clash = uow.users.find_any_by_identifiers(
                email=changes.get("email"),
                phone=changes.get("phone"),
                exclude_id=user.id,
            )
            if clash is not None:
                raise ConflictError("User", IDENTIFIER_IN_USE)

            try:
                uow.users.update(user, **changes)
            except IntegrityError as exc:
                if violates(exc, "uq_users_email", "uq_users_phone", "users.email", "users.phone"):
                    raise ConflictError("User", IDENTIFIER_IN_USE) from exc
                raise
            out = UserOut.from_model(user)

        log.info("account.profile_updated", extra={"event": "account.profile_updated", "user_id": out.id})
        return out

    # ------------------------------------------------------------------ #
    # Passwords
    # ------------------------------------------------------------------ #

    def change_password(self, dto: ChangePasswordIn) -> MessageOut:
        """
        Replace the caller's password after checking the current one.

        Other sessions are closed: every refresh token of the user is revoked.

        :raises ValidationError: Wrong current password or too-short new one.
        :raises AuthorizationError: If the caller no longer exists.
        """
        if len(dto.new_password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        with self.rw_uow() as uow:
            user = uow.users.get(dto.user_id)
            if user is None:
                raise AuthorizationError()
            if not self.hasher.verify(user.password_hash, dto.current_password):
                raise ValidationError(WRONG_CURRENT_PASSWORD)
            uow.users.set_password_hash(user, self.hasher.hash(dto.new_password))
            revoked = self.refresh_store.revoke_all_for_user(user.id)

        log.info(
            "account.password_changed",
            extra={"event": "account.password_changed", "user_id": dto.user_id, "count": revoked},
        )
        return MessageOut(message=PASSWORD_CHANGED_MESSAGE)

    def request_password_reset(self, dto: ForgotPasswordIn) -> MessageOut:
        """
        Issue a reset token for an active account, if one matches.

        The answer is identical whether or not the identifier is known.
        Only a sha256 digest of the token is stored; the raw value goes to the
        notifier.
        """
        with self.rw_uow() as uow:
            user = uow.users.find_by_identifier(dto.identifier)
            if user is None or not user.is_active:
                return MessageOut(message=RESET_REQUESTED_MESSAGE)

            raw = secrets.token_hex(32)
            expires_at = self.now_utc() + self.reset_expires
            uow.password_resets.replace_for_user(
                user_id=user.id,
                token_hash=hash_reset_token(raw),
                expires_at=expires_at,
            )
            user_id, identifier = user.id, user.identifier

        # Delivered only once the token is durable.
        self.notifier.send_reset_token(
            user_id=user_id,
            identifier=identifier,
            token=raw,
            expires_at=expires_at,
        )
        return MessageOut(message=RESET_REQUESTED_MESSAGE)

    def reset_password(self, dto: ResetPasswordIn) -> MessageOut:
        """
        Complete a reset: set the new password and close every session.

        :raises ValidationError: Unknown, used or expired token, or a
            too-short password.
        """
        if len(dto.new_password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        # Own transaction: a presented token is spent even when expired.
        with self.rw_uow() as uow:
            row = uow.password_resets.consume(hash_reset_token(dto.token or ""))
            user_id = row.user_id if row is not None else None
            expired = row is not None and as_utc(row.expires_at) <= self.now_utc()

        if user_id is None or expired:
            raise ValidationError(INVALID_RESET_TOKEN)

        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None or not user.is_active:
                raise ValidationError(INVALID_RESET_TOKEN)
            uow.users.set_password_hash(user, self.hasher.hash(dto.new_password))
            revoked = self.refresh_store.revoke_all_for_user(user.id)

        log.info(
            "account.password_reset",
            extra={"event": "account.password_reset", "user_id": user_id, "count": revoked},
        )
        return MessageOut(message=RESET_DONE_MESSAGE)

    # ------------------------------------------------------------------ #
    # Administration
    # ------------------------------------------------------------------ #

    def deactivate_user(self, user_id: str) -> MessageOut:
        """
        Disable an account and revoke its refresh tokens.

        Access tokens already handed out stop working at the next request,
        since the guard reloads the user.

        :raises NotFoundError: If no such user exists.
        """
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            uow.users.deactivate(user)
            revoked = self.refresh_store.revoke_all_for_user(user.id)

        log.info(
            "account.deactivated",
            extra={"event": "account.deactivated", "user_id": user_id, "count": revoked},
        )
        return MessageOut(message=DEACTIVATED_MESSAGE)
