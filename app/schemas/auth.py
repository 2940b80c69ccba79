"""Request/response schemas for account and session endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.security import (
    PASSWORD_MAX_LEN,
    USERNAME_PATTERN,
    password_strength_problem,
)
from app.models.user import ApprovalStatus, RoleName

# Roles a visitor may request at registration; super_admin is bootstrap-only.
SelfServiceRole = Literal["member", "staff", "admin", "finance"]


def _validate_username(value: str) -> str:
    value = value.strip()
    if not USERNAME_PATTERN.match(value):
        raise ValueError("Username must be 3-30 chars: letters, numbers, underscore")
    return value


def _validate_password(value: str) -> str:
    problem = password_strength_problem(value)
    if problem:
        raise ValueError(problem)
    return value


class RegisterRequest(BaseModel):
    """New account; always stored PENDING until an admin approves it."""

    username: str = Field(..., description="3-30 chars: letters, numbers, underscore")
    email: EmailStr = Field(..., description="Unique email, used to log in")
    password: str = Field(..., description="8-128 chars with upper, lower, digit, symbol")
    role: SelfServiceRole | None = Field(default=None, description="Defaults to member")

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        return _validate_username(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _validate_password(v)


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Account email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class AccountSummary(BaseModel):
    """Account as returned to clients (no password hash, no lockout state)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: RoleName
    approval_status: ApprovalStatus
    created_at: datetime | None = None


class RegisterResponse(BaseModel):
    message: str = "Account created. Awaiting admin approval."
    user: AccountSummary


class LoginResponse(BaseModel):
    """Tokens travel in cookies; the body only confirms who logged in."""

    message: str = "Login successful"
    user: AccountSummary


class MessageResponse(BaseModel):
    message: str


class AccountActionResponse(BaseModel):
    """Result of an approve/reject transition."""

    message: str
    user: AccountSummary


class RejectRequest(BaseModel):
    """Optional reason included in the rejection notification."""

    reason: str | None = Field(default=None, max_length=1000)


class AccountUpdateRequest(BaseModel):
    """Admin patch of an account; only listed fields are accepted."""

    model_config = ConfigDict(extra="forbid")

    username: str | None = None
    email: EmailStr | None = None
    password: str | None = None
    role: RoleName | None = None
    approval_status: ApprovalStatus | None = None

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str | None) -> str | None:
        return None if v is None else _validate_username(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        return None if v is None else v.strip().lower()

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str | None) -> str | None:
        return None if v is None else _validate_password(v)


class Principal(BaseModel):
    """Verified identity attached to a request after token checks (no store lookup)."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    role: RoleName
