"""Revocation list: access tokens invalidated before their natural expiry."""

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError as SQLAlchemyIntegrityError
from sqlalchemy.orm import Session

from app.models import RevokedToken

logger = logging.getLogger(__name__)


class RevocationList:
    """Persisted set of raw access-token strings."""

    def is_revoked(self, db: Session, token: str) -> bool:
        return db.query(RevokedToken.id).filter(RevokedToken.token == token).first() is not None

    def revoke(self, db: Session, token: str, expires_at: datetime) -> bool:
        """
        Insert the token if absent. Returns True when this call added it.

        A concurrent insert of the same token surfaces as a unique violation,
        which means the token is already revoked.
        """
        if self.is_revoked(db, token):
            return False
        db.add(RevokedToken(token=token, expires_at=expires_at))
        try:
            db.commit()
        except SQLAlchemyIntegrityError:
            db.rollback()
            return False
        return True

    def prune_expired(self, db: Session, now: datetime | None = None) -> int:
        """Delete rows whose token could no longer verify anyway; returns the count."""
        now = now or datetime.now(UTC)
        deleted = (
            db.query(RevokedToken)
            .filter(RevokedToken.expires_at < now)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted or 0


revocation_list = RevocationList()
