"""
SessionService
==============

Login, registration, refresh, logout and password change on top of four
collaborators injected at construction:

- a :class:`~sessionauth.services._shared.ports.UserDirectory`,
- a :class:`~sessionauth.services._shared.ports.SessionStore`,
- a :class:`~sessionauth.services._shared.ports.TokenCodec`,
- a :class:`~sessionauth.services.credentials.CredentialHasher`.

The service keeps no state between calls. Refresh tokens are looked up by
digest and are not rotated: a refresh mints a new access token and leaves the
stored record untouched.
"""

from __future__ import annotations

import logging

from sessionauth.services._shared.base import BaseService
from sessionauth.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from sessionauth.services._shared.ports.notification_bootstrap import NotificationBootstrap
from sessionauth.services._shared.ports.session_store import SessionStore, digest_token
from sessionauth.services._shared.ports.token_codec import (
    ACCESS_TOKEN_TYPE,
    ClaimSet,
    InvalidTokenError,
    TokenCodec,
)
from sessionauth.services._shared.ports.user_directory import NewUser, UserDirectory, UserRecord
from sessionauth.services.credentials import CredentialHasher, PasswordPolicy
from sessionauth.services.sessions.dto import (
    AccessTokenOut,
    AuthResultOut,
    ChangePasswordIn,
    LoginIn,
    RegisterIn,
    SessionOut,
    UserPublicOut,
)

log = logging.getLogger(__name__)


def to_user_public(user: UserRecord) -> UserPublicOut:
    """
    Map a directory record to :class:`UserPublicOut`.

    :param user: Directory snapshot.
    :type user: :class:`UserRecord`
    :returns: Public-safe DTO (no password hash).
    :rtype: :class:`UserPublicOut`
    """
    return UserPublicOut(
        id=user.id,
        email=user.email,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_picture_url=user.profile_picture_url,
        is_admin=user.is_admin,
        enabled=user.enabled,
    )


class SessionService(BaseService):
    """
    Session/token lifecycle service.

    A client moves from unauthenticated, to holding a valid access token, to
    holding only a valid refresh token, and back to unauthenticated once the
    refresh token is revoked or expires. All of that state lives in the two
    tokens and in the session store.
    """

    def __init__(
        self,
        *,
        users: UserDirectory,
        store: SessionStore,
        codec: TokenCodec,
        hasher: CredentialHasher,
        policy: PasswordPolicy | None = None,
        notifications: NotificationBootstrap | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param users: User directory (lookup, create, password/enabled updates).
        :param store: Refresh-token session store.
        :param codec: Token signer/verifier.
        :param hasher: Password hasher.
        :param policy: Password-strength policy; defaults to 6..255 characters.
        :param notifications: Optional post-registration bootstrap.
        """
        self.users = users
        self.store = store
        self.codec = codec
        self.hasher = hasher
        self.policy = policy or PasswordPolicy()
        self.notifications = notifications

    # ------------------------------------------------------------------ #
    # Login / registration
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthResultOut:
        """
        Verify credentials and issue a token pair.

        :param dto: Identifier (email or username) and password.
        :returns: Token pair, public user and access lifetime.
        :raises AuthenticationError: Unknown identifier, disabled account or
            wrong password. The three cases are indistinguishable to callers.
        """
        user = self.users.get_by_identifier(dto.identifier)
        if user is None:
            log.info("auth.login.rejected: unknown identifier")
            raise AuthenticationError("unknown identifier")
        if not user.enabled:
            log.info("auth.login.rejected: account disabled", extra={"owner_id": user.id})
            raise AuthenticationError("account disabled")
        if not self.hasher.verify(dto.password, user.password_hash):
            log.info("auth.login.rejected: bad password", extra={"owner_id": user.id})
            raise AuthenticationError("bad password")

        result = self._issue_pair(user)
        log.info("auth.login.succeeded", extra={"owner_id": user.id})
        return result

    def register(self, dto: RegisterIn) -> AuthResultOut:
        """
        Create an account and authenticate it immediately.

        The email check happens before anything is written. Notification
        preferences are bootstrapped best-effort: a failure there is logged
        and does not fail the registration.

        :param dto: Registration input.
        :returns: Same shape as :meth:`login`.
        :raises ConflictError: Email already registered.
        :raises ValidationError: Password fails the strength policy; carries
            every violated rule.
        """
        if self.users.email_taken(dto.email):
            log.info("auth.register.rejected: email taken")
            raise ConflictError("User", "email already in use")

        report = self.policy.check_strength(dto.password)
        if not report.ok:
            raise ValidationError("Password does not meet requirements", report.messages)

        user = self.users.create(
            NewUser(
                email=dto.email,
                password_hash=self.hasher.hash(dto.password),
                username=dto.username,
                first_name=dto.first_name,
                last_name=dto.last_name,
                profile_picture_url=dto.profile_picture_url,
            )
        )
        log.info("auth.register.succeeded", extra={"owner_id": user.id})

        self._bootstrap_notifications(user.id)
        return self._issue_pair(user)

    # ------------------------------------------------------------------ #
    # Refresh / logout
    # ------------------------------------------------------------------ #

    def refresh(self, refresh_token: str) -> AccessTokenOut:
        """
        Exchange a refresh token for a new access token.

        The stored record is consulted and left as is (no rotation). An
        expired record, or one whose owner is gone or disabled, is revoked on
        the way out.

        :param refresh_token: Encoded refresh token as issued.
        :raises AuthenticationError: Unknown, revoked or expired token, or
            owner missing/disabled.
        """
        token_digest = digest_token(refresh_token or "")
        record = self.store.find_by_digest(token_digest)
        if record is None:
            log.info("auth.refresh.rejected: unknown token")
            raise AuthenticationError("refresh token unknown")
        if record.revoked:
            log.info("auth.refresh.rejected: revoked", extra={"owner_id": record.owner_id})
            raise AuthenticationError("refresh token revoked")
        if record.is_expired(self.now_utc()):
            self.store.revoke(token_digest)
            log.info("auth.refresh.rejected: expired", extra={"owner_id": record.owner_id})
            raise AuthenticationError("refresh token expired")

        user = self.users.get_by_id(record.owner_id)
        if user is None or not user.enabled:
            self.store.revoke(token_digest)
            log.info(
                "auth.refresh.rejected: owner missing or disabled",
                extra={"owner_id": record.owner_id},
            )
            raise AuthenticationError("owner missing or disabled")

        access = self.codec.issue_access(self._claims_for(user))
        log.debug("auth.refresh.succeeded", extra={"owner_id": user.id})
        return AccessTokenOut(access_token=access, expires_in=self._expires_in())

    def logout(self, refresh_token: str | None) -> None:
        """Revoke the record for ``refresh_token``. Never fails on bad input."""
        if not refresh_token:
            return
        self.store.revoke(digest_token(refresh_token))
        log.debug("auth.logout")

    def logout_all(self, owner_id: int) -> None:
        """Revoke every refresh token of ``owner_id``. Idempotent."""
        self.store.revoke_all_for_owner(owner_id)
        log.info("auth.logout_all", extra={"owner_id": owner_id})

    # ------------------------------------------------------------------ #
    # Password change / account state
    # ------------------------------------------------------------------ #

    def change_password(self, dto: ChangePasswordIn) -> None:
        """
        Replace the password and force re-authentication everywhere.

        :raises NotFoundError: Owner does not exist.
        :raises AuthenticationError: ``current_password`` does not verify.
        :raises ValidationError: ``new_password`` fails the strength policy.
        """
        user = self.users.get_by_id(dto.owner_id)
        if user is None:
            raise NotFoundError("User", dto.owner_id)
        if not self.hasher.verify(dto.current_password, user.password_hash):
            log.info("auth.password.rejected: bad current password", extra={"owner_id": user.id})
            raise AuthenticationError("current password mismatch")

        report = self.policy.check_strength(dto.new_password)
        if not report.ok:
            raise ValidationError("New password does not meet requirements", report.messages)

        self.users.set_password_hash(user.id, self.hasher.hash(dto.new_password))
        self.logout_all(user.id)
        log.info("auth.password.changed", extra={"owner_id": user.id})

    def disable_user(self, owner_id: int) -> None:
        """
        Disable an account and revoke all of its sessions.

        :raises NotFoundError: Owner does not exist.
        """
        self.users.set_enabled(owner_id, False)
        self.logout_all(owner_id)
        log.warning("auth.user.disabled", extra={"owner_id": owner_id})

    def get_profile(self, owner_id: int) -> UserPublicOut:
        """:raises NotFoundError: Owner does not exist."""
        user = self.users.get_by_id(owner_id)
        if user is None:
            raise NotFoundError("User", owner_id)
        return to_user_public(user)

    # ------------------------------------------------------------------ #
    # Token checks / session management
    # ------------------------------------------------------------------ #

    def validate_token(self, access_token: str) -> bool:
        """
        Return ``True`` iff ``access_token`` verifies, is an access token, and
        its owner still exists and is enabled.
        """
        try:
            claims = self.codec.verify(access_token)
        except InvalidTokenError:
            return False
        if claims.token_type != ACCESS_TOKEN_TYPE:
            return False
        user = self.users.get_by_id(claims.owner_id)
        return user is not None and user.enabled

    def list_active_sessions(self, owner_id: int) -> list[SessionOut]:
        """Active sessions of ``owner_id``, newest first, without digests."""
        return [
            SessionOut(token_id=r.token_id, created_at=r.created_at, expires_at=r.expires_at)
            for r in self.store.list_active_for_owner(owner_id)
        ]

    def revoke_session(self, owner_id: int, token_id: int) -> None:
        """
        Revoke one of the caller's own sessions.

        :raises NotFoundError: No such session, or it belongs to someone else.
        """
        record = self.store.find_by_id(token_id)
        if record is None or record.owner_id != owner_id:
            raise NotFoundError("Session", token_id)
        self.store.revoke(record.token_digest)
        log.info("auth.session.revoked", extra={"owner_id": owner_id, "token_id": token_id})

    def sweep_expired_tokens(self) -> int:
        """Delete expired refresh-token records; returns how many went."""
        deleted = self.store.sweep_expired()
        log.info("auth.sweep", extra={"count": deleted})
        return deleted

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    @staticmethod
    def _claims_for(user: UserRecord) -> ClaimSet:
        return ClaimSet(owner_id=user.id, email=user.email, is_admin=user.is_admin)

    def _expires_in(self) -> int:
        return int(self.codec.access_lifetime.total_seconds())

    def _issue_pair(self, user: UserRecord) -> AuthResultOut:
        """Mint both tokens from one claim set and persist the refresh record."""
        claims = self._claims_for(user)
        access = self.codec.issue_access(claims)
        refresh = self.codec.issue_refresh(claims)

        expires_at = self.codec.expiry_of(refresh)
        if expires_at is None:
            raise RuntimeError("Refresh token was issued without an expiry.")
        self.store.create(user.id, digest_token(refresh), expires_at)

        return AuthResultOut(
            access_token=access,
            refresh_token=refresh,
            user=to_user_public(user),
            expires_in=self._expires_in(),
        )

    def _bootstrap_notifications(self, owner_id: int) -> None:
        if self.notifications is None:
            return
        try:
            self.notifications.create_defaults(owner_id)
        except Exception:
            # Registration already succeeded; the preferences can be created later.
            log.warning(
                "auth.register.notification_bootstrap_failed",
                extra={"owner_id": owner_id},
                exc_info=True,
            )
