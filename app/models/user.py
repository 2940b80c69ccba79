"""ORM model for application accounts (authentication, approval and RBAC)."""

from typing import Literal

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, func

from app.models.base import Base

RoleName = Literal["member", "staff", "admin", "finance", "super_admin"]
ROLE_VALUES: frozenset[str] = frozenset({"member", "staff", "admin", "finance", "super_admin"})

# Roles that bypass the record ownership check.
PRIVILEGED_ROLES: frozenset[str] = frozenset({"admin", "staff", "super_admin"})
# Roles allowed to run account administration (approve, reject, patch, delete).
ACCOUNT_ADMIN_ROLES: frozenset[str] = frozenset({"admin", "super_admin"})

ApprovalStatus = Literal["PENDING", "APPROVED", "REJECTED"]
APPROVAL_STATUS_VALUES: frozenset[str] = frozenset({"PENDING", "APPROVED", "REJECTED"})


def _in_clause(column: str, values: frozenset[str]) -> str:
    quoted = ", ".join(f"'{v}'" for v in sorted(values))
    return f"{column} IN ({quoted})"


class User(Base):
    """
    Account that may log in once approved.

    role: member, staff, admin, finance or super_admin
    approval_status: PENDING at registration, then APPROVED or REJECTED by an admin
    failed_attempts / locked_until: brute-force lockout state, reset on successful login
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(_in_clause("role", ROLE_VALUES), name="ck_users_role"),
        CheckConstraint(
            _in_clause("approval_status", APPROVAL_STATUS_VALUES),
            name="ck_users_approval_status",
        ),
        CheckConstraint("failed_attempts >= 0", name="ck_users_failed_attempts"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="member", server_default="member")
    approval_status = Column(
        String(16), nullable=False, default="PENDING", server_default="PENDING", index=True
    )
    failed_attempts = Column(Integer, nullable=False, default=0, server_default="0")
    locked_until = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())
