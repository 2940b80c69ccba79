"""Account administration: registration, lookup, admin patch, deletion rules, bootstrap."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError as SQLAlchemyIntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    AuthorizationError,
    ConflictError,
    IntegrityError,
    NotFoundError,
    ValidationError,
)
from app.core.security import hash_password
from app.models import User
from app.schemas.auth import AccountUpdateRequest, Principal, RegisterRequest

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def get_account(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def register_account(db: Session, body: RegisterRequest, settings: Settings) -> User:
    """Create an account in PENDING state; role defaults to member."""
    if find_by_email(db, body.email) is not None:
        raise ValidationError("Email already exists")
    if db.query(User.id).filter(User.username == body.username).first() is not None:
        raise ValidationError("Username already exists")
    user = User(
        username=body.username,
        email=body.email,
        password_hash=hash_password(body.password, settings.BCRYPT_ROUNDS),
        role=body.role or "member",
        approval_status="PENDING",
        failed_attempts=0,
    )
    db.add(user)
    try:
        db.commit()
    except SQLAlchemyIntegrityError as e:
        db.rollback()
        raise ConflictError("Email or username already exists") from e
    db.refresh(user)
    logger.info("Account registered", extra={"user_id": user.id, "role": user.role})
    return user


def list_pending(db: Session) -> list[User]:
    """Accounts awaiting approval, oldest first."""
    return (
        db.query(User)
        .filter(User.approval_status == "PENDING")
        .order_by(User.created_at.asc(), User.id.asc())
        .all()
    )


def update_account(
    db: Session,
    user_id: int,
    body: AccountUpdateRequest,
    requester: Principal,
    settings: Settings,
) -> User:
    """Apply the fields present in body; a password is re-hashed, never stored raw."""
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise ValidationError("No fields to update")
    if fields.get("role") == "super_admin" and requester.role != "super_admin":
        raise AuthorizationError("Only a super admin can grant the super_admin role")
    user = get_account(db, user_id)
    if user_id == requester.id and (
        fields.get("role", user.role) != user.role
        or fields.get("approval_status", user.approval_status) != user.approval_status
    ):
        raise AuthorizationError("You cannot change your own role or approval status")
    if user.role == "super_admin" and requester.role != "super_admin":
        raise AuthorizationError("Super Admin can only be modified by a super admin")

    password = fields.pop("password", None)
    if password is not None:
        user.password_hash = hash_password(password, settings.BCRYPT_ROUNDS)
    for key, value in fields.items():
        setattr(user, key, value)
    try:
        db.commit()
    except SQLAlchemyIntegrityError as e:
        db.rollback()
        raise ConflictError("Email or username already exists") from e
    db.refresh(user)
    logger.info(
        "Account updated",
        extra={
            "user_id": user_id,
            "actor_id": requester.id,
            "fields": sorted([*fields, *(["password"] if password is not None else [])]),
        },
    )
    return user


def delete_account(db: Session, user_id: int, requester: Principal) -> None:
    """
    Delete an account subject to the deletion rules:

    - nobody deletes themselves
    - nobody deletes a super_admin
    - an admin deletes members only
    Dependent records (authored students, donors, ...) block deletion.
    """
    if user_id == requester.id:
        raise AuthorizationError("You cannot delete your own account")
    target = get_account(db, user_id)
    if target.role == "super_admin":
        raise AuthorizationError("Super Admin cannot be deleted")
    if requester.role == "admin" and target.role != "member":
        raise AuthorizationError("Admins can only delete members")
    try:
        db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyIntegrityError as e:
        db.rollback()
        raise IntegrityError("Cannot delete user: dependent records exist") from e
    logger.info("Account deleted", extra={"user_id": user_id, "actor_id": requester.id})


def ensure_super_admin(db: Session, settings: Settings) -> User | None:
    """Create the configured super admin (APPROVED) when no super_admin exists yet."""
    if not settings.SUPER_ADMIN_EMAIL or settings.SUPER_ADMIN_PASSWORD is None:
        logger.warning("SUPER_ADMIN_EMAIL or SUPER_ADMIN_PASSWORD not set; skipping super admin creation.")
        return None
    existing = db.query(User).filter(User.role == "super_admin").first()
    if existing is not None:
        logger.info("Super admin already exists", extra={"user_id": existing.id})
        return existing
    user = User(
        username=settings.SUPER_ADMIN_NAME,
        email=settings.SUPER_ADMIN_EMAIL.lower(),
        password_hash=hash_password(
            settings.SUPER_ADMIN_PASSWORD.get_secret_value(), settings.BCRYPT_ROUNDS
        ),
        role="super_admin",
        approval_status="APPROVED",
        failed_attempts=0,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created default super admin", extra={"user_id": user.id})
    return user
