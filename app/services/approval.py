"""Account approval state machine: PENDING -> APPROVED | REJECTED, gating login."""

import logging

from sqlalchemy.orm import Session

from app.core.errors import AuthorizationError, NotFoundError
from app.models import RefreshSession, User

logger = logging.getLogger(__name__)

MESSAGE_PENDING = "Account pending admin approval"
MESSAGE_REJECTED = "Account has been rejected by admin"


class ApprovalGate:
    """Only APPROVED accounts may authenticate; transitions are admin actions."""

    def check(self, user: User) -> None:
        """Raise AuthorizationError unless the account is APPROVED."""
        if user.approval_status == "APPROVED":
            return
        if user.approval_status == "REJECTED":
            raise AuthorizationError(MESSAGE_REJECTED)
        raise AuthorizationError(MESSAGE_PENDING)

    def approve(self, db: Session, user_id: int, actor_id: int) -> User:
        """Mark the account APPROVED. Re-approving is a no-op transition."""
        user = self._set_status(db, user_id, "APPROVED")
        logger.info("Account approved", extra={"user_id": user_id, "actor_id": actor_id})
        return user

    def reject(self, db: Session, user_id: int, actor_id: int) -> User:
        """Mark the account REJECTED and end its refresh sessions."""
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        user.approval_status = "REJECTED"
        db.query(RefreshSession).filter(RefreshSession.user_id == user_id).delete(
            synchronize_session=False
        )
        db.commit()
        db.refresh(user)
        logger.info("Account rejected", extra={"user_id": user_id, "actor_id": actor_id})
        return user

    def _set_status(self, db: Session, user_id: int, status: str) -> User:
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        user.approval_status = status
        db.commit()
        db.refresh(user)
        return user


approval_gate = ApprovalGate()
