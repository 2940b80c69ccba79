"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AccountActionResponse,
    AccountSummary,
    AccountUpdateRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    Principal,
    RegisterRequest,
    RegisterResponse,
    RejectRequest,
)
from app.schemas.health import HealthResponse

__all__ = [
    "AccountActionResponse",
    "AccountSummary",
    "AccountUpdateRequest",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "Principal",
    "RegisterRequest",
    "RegisterResponse",
    "RejectRequest",
]
