"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.records import (
    BoardMember,
    Donor,
    FinanceReport,
    Project,
    Student,
    Volunteer,
)
from app.models.session import RefreshSession, RevokedToken
from app.models.user import User

__all__ = [
    "Base",
    "BoardMember",
    "Donor",
    "FinanceReport",
    "Project",
    "RefreshSession",
    "RevokedToken",
    "Student",
    "User",
    "Volunteer",
]
