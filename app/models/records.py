"""ORM models for the NGO record entities guarded by the access layer."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    false,
    func,
)
from sqlalchemy.orm import declared_attr

from app.models.base import Base


class RecordMixin:
    """
    Columns shared by every record entity.

    created_by_user_id / modified_by_user_id reference users without cascade, so
    an account that still authored records cannot be deleted.
    """

    id = Column(String(50), primary_key=True)
    email = Column(String(255), nullable=True)
    secondary_email = Column(String(255), nullable=True)
    email_opt_out = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    modified_date = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @declared_attr
    def created_by_user_id(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=True)

    @declared_attr
    def modified_by_user_id(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=True)


class Student(RecordMixin, Base):
    __tablename__ = "students"

    student_frf_name = Column(String(255), nullable=False)
    student_frf_owner = Column(String(255), nullable=True, index=True)
    date_of_birth = Column(Date, nullable=True)
    school = Column(String(255), nullable=True)
    class_name = Column(String(50), nullable=True)
    section = Column(String(10), nullable=True)


class Volunteer(RecordMixin, Base):
    __tablename__ = "volunteers"

    volunteer_frf_name = Column(String(255), nullable=False)
    volunteer_frf_owner = Column(String(255), nullable=True, index=True)
    contact_number = Column(String(20), nullable=True)
    skill = Column(String(100), nullable=True)
    joining_date = Column(Date, nullable=True)


class Donor(RecordMixin, Base):
    __tablename__ = "donors"

    donor_frf_name = Column(String(255), nullable=False)
    donor_frf_owner = Column(String(255), nullable=True, index=True)
    donor_type = Column(String(20), nullable=True)
    contact_person = Column(String(255), nullable=True)
    contact_number = Column(String(20), nullable=True)


class BoardMember(RecordMixin, Base):
    __tablename__ = "board_members"

    board_frf_name = Column(String(255), nullable=False)
    board_frf_owner = Column(String(255), nullable=True, index=True)
    designation = Column(String(100), nullable=True)
    tenure_end = Column(Date, nullable=True)


class Project(RecordMixin, Base):
    __tablename__ = "projects"

    project_frf_name = Column(String(255), nullable=False)
    project_frf_owner = Column(String(255), nullable=True, index=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    budget = Column(Numeric(15, 2), nullable=True)
    status = Column(String(50), nullable=True)


class FinanceReport(RecordMixin, Base):
    __tablename__ = "finance_reports"

    finance_report_frf_name = Column(String(255), nullable=False)
    finance_report_frf_owner = Column(String(255), nullable=True, index=True)
    project_name = Column(String(255), nullable=True)
