"""Login, refresh and logout flows composed from the gate, guard, issuer and stores."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import lru_cache
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.core.errors import AuthenticationError
from app.core.security import RefreshGrant, TokenIssuer, hash_password, verify_password
from app.models import User
from app.services.accounts import find_by_email
from app.services.approval import approval_gate
from app.services.lockout import LockoutGuard
from app.services.revocation import revocation_list
from app.services.sessions import (
    create_refresh_session,
    delete_refresh_session,
    resolve_refresh_session,
)

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

MESSAGE_INVALID_CREDENTIALS = "Invalid credentials"


@lru_cache
def _placeholder_hash(rounds: int) -> str:
    """Compared against when the email is unknown, so both paths pay one bcrypt check."""
    return hash_password("unknown-account-placeholder", rounds)


@dataclass(frozen=True)
class LoginResult:
    user: User
    access_token: str
    refresh: RefreshGrant


def login(
    db: Session,
    settings: Settings,
    email: str,
    password: str,
    device: str | None = None,
    now: datetime | None = None,
) -> LoginResult:
    """
    Authenticate in the fixed order: approval gate, lockout gate, password.

    On success the failure counter is reset and both tokens are issued; the
    refresh session row is persisted before returning.
    """
    now = now or datetime.now(UTC)
    user = find_by_email(db, email)
    if user is None:
        verify_password(password, _placeholder_hash(settings.BCRYPT_ROUNDS))
        logger.info("Login failed: unknown email")
        raise AuthenticationError(MESSAGE_INVALID_CREDENTIALS)

    approval_gate.check(user)
    guard = LockoutGuard(settings)
    guard.check(user, now)

    user_id = user.id
    if not verify_password(password, user.password_hash):
        outcome = guard.record_failure(db, user_id, now)
        logger.info(
            "Login failed: bad password",
            extra={"user_id": user_id, "failed_attempts": outcome.failed_attempts},
        )
        raise AuthenticationError(MESSAGE_INVALID_CREDENTIALS)

    guard.record_success(db, user_id)
    db.refresh(user)
    issuer = TokenIssuer(settings)
    access_token = issuer.issue_access_token(user, now)
    refresh = create_refresh_session(db, issuer, user, device, now)
    logger.info("Login succeeded", extra={"user_id": user_id})
    return LoginResult(user=user, access_token=access_token, refresh=refresh)


def refresh_access_token(
    db: Session, settings: Settings, refresh_token: str, now: datetime | None = None
) -> tuple[User, str]:
    """Mint a new access token for a live refresh session; the session is not rotated."""
    session_row = resolve_refresh_session(db, refresh_token, now)
    if session_row is None:
        raise AuthenticationError("Invalid refresh token")
    user = db.get(User, session_row.user_id)
    if user is None:
        raise AuthenticationError("User not found")
    approval_gate.check(user)
    return user, TokenIssuer(settings).issue_access_token(user, now)


def logout(
    db: Session,
    settings: Settings,
    refresh_token: str | None,
    access_token: str | None,
    now: datetime | None = None,
) -> None:
    """Delete the presented refresh session and revoke the presented access token."""
    now = now or datetime.now(UTC)
    if refresh_token:
        delete_refresh_session(db, refresh_token)
    revoked = False
    if access_token:
        # Forged or already expired tokens can never authenticate; only live ones are stored.
        expires_at = TokenIssuer(settings).token_expiry(access_token)
        if expires_at is not None and expires_at > now:
            revoked = revocation_list.revoke(db, access_token, expires_at)
    logger.info(
        "Logout",
        extra={"had_refresh": bool(refresh_token), "access_revoked": revoked},
    )
