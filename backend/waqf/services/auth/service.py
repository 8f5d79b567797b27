# waqf/services/auth/service.py
from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.exc import IntegrityError

from waqf.models.user import User, UserRole
from waqf.services._shared.base import BaseService, ServiceContext
from waqf.services._shared.dto import MessageOut, UserOut
from waqf.services._shared.errors import (
    AuthorizationError,
    ConflictError,
    ValidationError,
    violates,
)
from waqf.services._shared.ports import (
    ConsumeResult,
    PasswordHasher,
    RefreshTokenStore,
    TokenProvider,
)
from waqf.services.auth.dto import (
    AuthSessionOut,
    AuthTokenConfig,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
)

log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
ACCOUNT_DISABLED = "Account disabled"
INVALID_REFRESH = "Invalid or expired token"
IDENTIFIER_IN_USE = "identifier already in use"
LOGOUT_MESSAGE = "Logged out successfully"

_IDENTIFIER_CONSTRAINTS = ("uq_users_email", "uq_users_phone", "users.email", "users.phone")


class AuthService(BaseService):
    """
    Authentication lifecycle service (register / login / refresh / logout).

    Tokens are issued via a pluggable :class:`TokenProvider`; refresh tokens
    are tracked in a :class:`RefreshTokenStore` and consumed exactly once;
    passwords go through a :class:`PasswordHasher`.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        refresh_store: RefreshTokenStore,
        password_hasher: PasswordHasher,
        token_cfg: AuthTokenConfig | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_provider: Adapter issuing JWTs.
        :param refresh_store: One-time-use refresh token store.
        :param password_hasher: Adapter hashing and verifying passwords.
        :param token_cfg: Access/Refresh lifetimes (defaults: 7 days / 30 days).
        """
        super().__init__(ctx=ctx)
        self.tokens = token_provider
        self.refresh_store = refresh_store
        self.hasher = password_hasher
        self.cfg = token_cfg or AuthTokenConfig(
            access_expires=timedelta(days=7),
            refresh_expires=timedelta(days=30),
        )

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthSessionOut:
        """
        Create a DONOR account and open its first session.

        :param dto: Registration input (already schema-validated).
        :returns: Sanitized user plus a token pair.
        :raises ValidationError: If neither email nor phone is supplied.
        :raises ConflictError: If email or phone is already used.
        """
        email = (dto.email or "").strip() or None
        phone = (dto.phone or "").strip() or None
        if email is None and phone is None:
            raise ValidationError("Email or phone is required")

        with self.rw_uow() as uow:
            if uow.users.find_any_by_identifiers(email=email, phone=phone) is not None:
                raise ConflictError("User", IDENTIFIER_IN_USE)

            user = User(
                email=email,
                phone=phone,
                password_hash=self.hasher.hash(dto.password),
                first_name=dto.first_name,
                last_name=dto.last_name,
                role=UserRole.DONOR,
                is_active=True,
            )
            try:
                uow.users.add(user)
            except IntegrityError as exc:
                # Lost a race against a concurrent registration.
                if violates(exc, *_IDENTIFIER_CONSTRAINTS):
                    raise ConflictError("User", IDENTIFIER_IN_USE) from exc
                raise

            pair = self._issue_tokens(user)
            out = UserOut.from_model(user)

        log.info("auth.register", extra={"event": "auth.register", "user_id": out.id})
        return AuthSessionOut(user=out, access_token=pair.access_token, refresh_token=pair.refresh_token)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthSessionOut:
        """
        Authenticate credentials and issue a fresh token pair.

        Unknown identifiers and wrong passwords share one message and roughly
        the same cost, so responses do not reveal which accounts exist.

        :param dto: Login input.
        :returns: Sanitized user plus a token pair.
        :raises AuthorizationError: On bad credentials or a disabled account.
        """
        with self.rw_uow() as uow:
            user = uow.users.find_by_identifier(dto.identifier)
            if user is None:
                self.hasher.verify_dummy(dto.password)
                log.info("auth.login.failed", extra={"event": "auth.login.failed"})
                raise AuthorizationError(INVALID_CREDENTIALS)

            if not self.hasher.verify(user.password_hash, dto.password):
                log.info(
                    "auth.login.failed",
                    extra={"event": "auth.login.failed", "user_id": user.id},
                )
                raise AuthorizationError(INVALID_CREDENTIALS)

            if not user.is_active:
                log.info(
                    "auth.login.disabled",
                    extra={"event": "auth.login.disabled", "user_id": user.id},
                )
                raise AuthorizationError(ACCOUNT_DISABLED)

            uow.users.touch_last_login(user, self.now_utc())
            pair = self._issue_tokens(user)
            out = UserOut.from_model(user)

        log.info("auth.login", extra={"event": "auth.login", "user_id": out.id})
        return AuthSessionOut(user=out, access_token=pair.access_token, refresh_token=pair.refresh_token)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> MessageOut:
        """
        Discard a refresh token owned by the caller.

        Always succeeds, whether or not a row matched.
        """
        with self.rw_uow():
            removed = self.refresh_store.revoke(token=dto.refresh_token, user_id=dto.user_id)
        log.info(
            "auth.logout",
            extra={"event": "auth.logout", "user_id": dto.user_id, "count": removed},
        )
        return MessageOut(message=LOGOUT_MESSAGE)

    # ------------------------------------------------------------------ #
    # Refresh with one-time rotation
    # ------------------------------------------------------------------ #

    def refresh_tokens(self, dto: RefreshIn) -> AuthSessionOut:
        """
        Consume a refresh token and emit a new pair for its owner.

        Security
        --------
        - The stored record is deleted before anything is issued, so a replay
          finds nothing.
        - Expired records are deleted by the same lookup.
        - Among concurrent presentations of one token only one succeeds.

        :raises AuthorizationError: Missing, replayed or expired token, or an
            owner that no longer exists or is disabled.
        """
        # Own transaction: the deletion must stick even when we reject.
        with self.rw_uow():
            result, record = self.refresh_store.consume(dto.refresh_token, now=self.now_utc())

        if result is not ConsumeResult.OK or record is None:
            log.info(
                "auth.refresh.rejected",
                extra={
                    "event": f"auth.refresh.{result.name.lower()}",
                    "user_id": record.user_id if record else None,
                },
            )
            raise AuthorizationError(INVALID_REFRESH)

        with self.rw_uow() as uow:
            user = uow.users.get(record.user_id)
            if user is None or not user.is_active:
                raise AuthorizationError(INVALID_REFRESH)
            pair = self._issue_tokens(user)
            out = UserOut.from_model(user)

        return AuthSessionOut(user=out, access_token=pair.access_token, refresh_token=pair.refresh_token)

    # ------------------------------------------------------------------ #
    # Profile
    # ------------------------------------------------------------------ #

    def get_profile(self, user_id: str) -> UserOut:
        """
        Return the sanitized profile of ``user_id``.

        :raises AuthorizationError: If the user does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise AuthorizationError()
            return UserOut.from_model(user)

    # ------------------------------------------------------------------ #
    # Token issuance (shared)
    # ------------------------------------------------------------------ #

    def _issue_tokens(self, user: User) -> TokenPairOut:
        """
        Sign an access/refresh pair for ``user`` and persist the refresh token.

        The refresh expiry is computed once and used for both the signed
        ``exp`` claim and the stored record. Must run inside a read-write
        Unit of Work.
        """
        claims = {"identifier": user.identifier}
        refresh_expires_at = self.now_utc() + self.cfg.refresh_expires

        access = self.tokens.create_access_token(
            identity=user.id,
            additional_claims=claims,
            expires_delta=self.cfg.access_expires,
        )
        refresh = self.tokens.create_refresh_token(
            identity=user.id,
            expires_at=refresh_expires_at,
            additional_claims=claims,
        )
        self.refresh_store.save(token=refresh, user_id=user.id, expires_at=refresh_expires_at)
        return TokenPairOut(access_token=access, refresh_token=refresh)


__all__ = ["AuthService"]
