"""Brute-force lockout: consecutive failed logins per account and a timed lock."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, case, literal, update
from sqlalchemy.orm import Session

from app.core.errors import AuthorizationError
from app.core.security import as_utc
from app.models.user import User

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FailureOutcome:
    failed_attempts: int
    locked_until: datetime | None


class LockoutGuard:
    """
    Tracks failures on the account row itself.

    check() must run before the password comparison: a correct password on a
    locked account still yields the lockout outcome.
    """

    def __init__(self, settings: Settings) -> None:
        self.threshold = settings.LOCKOUT_THRESHOLD
        self.duration = timedelta(minutes=settings.LOCKOUT_MINUTES)

    def remaining_minutes(self, user: User, now: datetime | None = None) -> int | None:
        """Whole minutes (rounded up) until the lock clears, or None when not locked."""
        if user.locked_until is None:
            return None
        now = now or datetime.now(UTC)
        remaining = as_utc(user.locked_until) - now
        if remaining <= timedelta(0):
            return None
        return max(1, math.ceil(remaining.total_seconds() / 60))

    def check(self, user: User, now: datetime | None = None) -> None:
        """Raise AuthorizationError while the account is locked."""
        minutes = self.remaining_minutes(user, now)
        if minutes is not None:
            raise AuthorizationError(f"Account locked. Try again in {minutes} minutes.")

    def record_failure(
        self, db: Session, user_id: int, now: datetime | None = None
    ) -> FailureOutcome:
        """
        Increment the counter and engage the lock at the threshold in one UPDATE.

        SET expressions read the pre-update row, so concurrent failures each add
        exactly one and the lock decision uses the value they produced.
        """
        now = now or datetime.now(UTC)
        lock_value = literal(now + self.duration, DateTime(timezone=True))
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(
                failed_attempts=User.failed_attempts + 1,
                locked_until=case(
                    (User.failed_attempts + 1 >= self.threshold, lock_value),
                    else_=User.locked_until,
                ),
            )
            .returning(User.failed_attempts, User.locked_until)
            .execution_options(synchronize_session=False)
        )
        row = db.execute(stmt).one()
        db.commit()
        locked_until = as_utc(row.locked_until) if row.locked_until is not None else None
        if row.failed_attempts >= self.threshold:
            logger.warning(
                "Account lockout engaged",
                extra={
                    "user_id": user_id,
                    "failed_attempts": row.failed_attempts,
                    "locked_until": locked_until.isoformat() if locked_until else None,
                },
            )
        return FailureOutcome(failed_attempts=row.failed_attempts, locked_until=locked_until)

    def record_success(self, db: Session, user_id: int) -> None:
        """Reset the counter to 0 and clear any lock."""
        db.query(User).filter(User.id == user_id).update(
            {User.failed_attempts: 0, User.locked_until: None}, synchronize_session=False
        )
        db.commit()
