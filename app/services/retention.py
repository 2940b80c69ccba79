"""Retention: prune revocation rows and refresh sessions that can no longer matter."""

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.services.revocation import revocation_list
from app.services.sessions import prune_expired_sessions

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def run_retention(
    session: Session, settings: "Settings", now: datetime | None = None
) -> tuple[int, int]:
    """
    Delete revoked tokens past their own exp and refresh sessions past expires_at.

    Returns (revoked_tokens_deleted, refresh_sessions_deleted). Idempotent: safe to run repeatedly.
    """
    if not settings.RETENTION_ENABLED:
        logger.info("Retention is disabled (RETENTION_ENABLED=false); skipping.")
        return (0, 0)

    now = now or datetime.now(UTC)
    revoked_deleted = revocation_list.prune_expired(session, now)
    sessions_deleted = prune_expired_sessions(session, now)

    if revoked_deleted or sessions_deleted:
        logger.info(
            "Retention run: now=%s, revoked_tokens_deleted=%s, refresh_sessions_deleted=%s",
            now.isoformat(),
            revoked_deleted,
            sessions_deleted,
        )
    return (revoked_deleted, sessions_deleted)
