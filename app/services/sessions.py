"""Refresh-session lifecycle: create at login, resolve at refresh, delete at logout."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from app.core.security import RefreshGrant, TokenIssuer, as_utc
from app.models import RefreshSession, User

logger = logging.getLogger(__name__)

# User-Agent values are stored as a device hint only; keep them bounded.
DEVICE_MAX_LEN = 512


def create_refresh_session(
    db: Session,
    issuer: TokenIssuer,
    user: User,
    device: str | None,
    now: datetime | None = None,
) -> RefreshGrant:
    """Mint a refresh identifier for user and persist it."""
    grant = issuer.issue_refresh_session(now)
    db.add(
        RefreshSession(
            token=grant.token,
            user_id=user.id,
            issued_at=grant.issued_at,
            expires_at=grant.expires_at,
            device=device[:DEVICE_MAX_LEN] if device else None,
        )
    )
    db.commit()
    return grant


def resolve_refresh_session(
    db: Session, token: str, now: datetime | None = None
) -> RefreshSession | None:
    """
    Return the live session for token, or None.

    A session presented after its expiry is deleted on the spot; the row stays
    untouched otherwise (refresh does not rotate it).
    """
    now = now or datetime.now(UTC)
    session_row = db.query(RefreshSession).filter(RefreshSession.token == token).first()
    if session_row is None:
        return None
    if as_utc(session_row.expires_at) <= now:
        user_id = session_row.user_id
        db.delete(session_row)
        db.commit()
        logger.info("Expired refresh session presented and deleted", extra={"user_id": user_id})
        return None
    return session_row


def delete_refresh_session(db: Session, token: str) -> int:
    """Delete exactly the session matching token; returns the number of rows removed."""
    deleted = (
        db.query(RefreshSession)
        .filter(RefreshSession.token == token)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted or 0


def prune_expired_sessions(db: Session, now: datetime | None = None) -> int:
    now = now or datetime.now(UTC)
    deleted = (
        db.query(RefreshSession)
        .filter(RefreshSession.expires_at < now)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted or 0
