"""ORM models for refresh sessions and revoked access tokens."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func

from app.models.base import Base


class RefreshSession(Base):
    """
    Long-lived, store-backed login session identified by an opaque token.

    Created at login, deleted at logout (or when presented after expiry). Not
    rotated on refresh.
    """

    __tablename__ = "refresh_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String(128), nullable=False, unique=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    issued_at = Column(DateTime(timezone=True), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    device = Column(String(512), nullable=True)


class RevokedToken(Base):
    """
    Access token invalidated before its natural expiry (logout).

    expires_at mirrors the token's own exp so rows can be pruned once the token
    could no longer verify anyway.
    """

    __tablename__ = "revoked_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(Text, nullable=False, unique=True)
    revoked_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
