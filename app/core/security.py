"""Password hashing, access-token signing and refresh-session identifiers."""

from __future__ import annotations

import re
import secrets
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

if TYPE_CHECKING:
    from app.core.config import Settings
    from app.models.user import User

# Input validation bounds for registration and login.
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{3,30}$")
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128
PASSWORD_SYMBOL_PATTERN = re.compile(r"[^A-Za-z0-9]")

# Entropy of opaque refresh identifiers, in bytes (before base64 encoding).
REFRESH_TOKEN_BYTES = 32

ACCESS_TOKEN_REQUIRED_CLAIMS = ["exp", "iat", "sub"]


def hash_password(plain_password: str, rounds: int) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def password_strength_problem(password: str) -> str | None:
    """Return a message describing why password is too weak, or None when it is acceptable."""
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        return f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters."
    if (
        not any(c.islower() for c in password)
        or not any(c.isupper() for c in password)
        or not any(c.isdigit() for c in password)
        or not PASSWORD_SYMBOL_PATTERN.search(password)
    ):
        return "Password must include uppercase, lowercase, number and symbol."
    return None


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes read back from the store as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@dataclass(frozen=True)
class RefreshGrant:
    """A freshly minted refresh identifier; the caller persists it."""

    token: str
    issued_at: datetime
    expires_at: datetime


class TokenIssuer:
    """
    Mints signed access tokens and opaque refresh identifiers.

    Access tokens are self-verifying: signature and exp are enough for baseline
    validity. Each carries a random jti so two tokens minted in the same second
    for the same account never share a raw value (revocation is keyed on it).
    """

    def __init__(self, settings: Settings) -> None:
        self._secret = settings.JWT_SECRET.get_secret_value()
        self._algorithm = settings.JWT_ALGORITHM
        self.access_ttl = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.refresh_ttl = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    def issue_access_token(self, user: User, now: datetime | None = None) -> str:
        """Create a JWT with sub (user id), email, role, iat, exp and jti."""
        now = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
            "iat": now,
            "exp": now + self.access_ttl,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode_access_token(self, token: str) -> dict[str, Any]:
        """
        Verify signature and expiry; return the payload.
        Raises jwt.PyJWTError on invalid or expired token.
        """
        return jwt.decode(
            token,
            self._secret,
            algorithms=[self._algorithm],
            options={"require": ACCESS_TOKEN_REQUIRED_CLAIMS},
        )

    def token_expiry(self, token: str) -> datetime | None:
        """Return the exp of a correctly signed token even if it has already expired."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except jwt.PyJWTError:
            return None
        exp = payload.get("exp")
        if not isinstance(exp, (int, float)):
            return None
        return datetime.fromtimestamp(exp, UTC)

    def issue_refresh_session(self, now: datetime | None = None) -> RefreshGrant:
        """Generate an unguessable refresh identifier and its expiry."""
        now = now or datetime.now(UTC)
        return RefreshGrant(
            token=secrets.token_urlsafe(REFRESH_TOKEN_BYTES),
            issued_at=now,
            expires_at=now + self.refresh_ttl,
        )
