"""Add the six NGO record tables with owner and audit columns.

Revision ID: 20251017200000
Revises: 20251017100000
Create Date: 2025-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20251017200000"
down_revision: Union[str, None] = "20251017100000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# table -> (name column, owner column, entity-specific columns)
RECORD_TABLES: dict[str, tuple[str, str, list[sa.Column]]] = {
    "students": (
        "student_frf_name",
        "student_frf_owner",
        [
            sa.Column("date_of_birth", sa.Date(), nullable=True),
            sa.Column("school", sa.String(length=255), nullable=True),
            sa.Column("class_name", sa.String(length=50), nullable=True),
            sa.Column("section", sa.String(length=10), nullable=True),
        ],
    ),
    "volunteers": (
        "volunteer_frf_name",
        "volunteer_frf_owner",
        [
            sa.Column("contact_number", sa.String(length=20), nullable=True),
            sa.Column("skill", sa.String(length=100), nullable=True),
            sa.Column("joining_date", sa.Date(), nullable=True),
        ],
    ),
    "donors": (
        "donor_frf_name",
        "donor_frf_owner",
        [
            sa.Column("donor_type", sa.String(length=20), nullable=True),
            sa.Column("contact_person", sa.String(length=255), nullable=True),
            sa.Column("contact_number", sa.String(length=20), nullable=True),
        ],
    ),
    "board_members": (
        "board_frf_name",
        "board_frf_owner",
        [
            sa.Column("designation", sa.String(length=100), nullable=True),
            sa.Column("tenure_end", sa.Date(), nullable=True),
        ],
    ),
    "projects": (
        "project_frf_name",
        "project_frf_owner",
        [
            sa.Column("start_date", sa.Date(), nullable=True),
            sa.Column("end_date", sa.Date(), nullable=True),
            sa.Column("budget", sa.Numeric(precision=15, scale=2), nullable=True),
            sa.Column("status", sa.String(length=50), nullable=True),
        ],
    ),
    "finance_reports": (
        "finance_report_frf_name",
        "finance_report_frf_owner",
        [sa.Column("project_name", sa.String(length=255), nullable=True)],
    ),
}


def upgrade() -> None:
    for table, (name_column, owner_column, extra_columns) in RECORD_TABLES.items():
        op.create_table(
            table,
            sa.Column("id", sa.String(length=50), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=True),
            sa.Column("secondary_email", sa.String(length=255), nullable=True),
            sa.Column(
                "email_opt_out", sa.Boolean(), nullable=False, server_default=sa.false()
            ),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=True),
                server_default=sa.text("now()"),
                nullable=False,
            ),
            sa.Column(
                "modified_date",
                sa.DateTime(timezone=True),
                server_default=sa.text("now()"),
                nullable=False,
            ),
            sa.Column("created_by_user_id", sa.Integer(), nullable=True),
            sa.Column("modified_by_user_id", sa.Integer(), nullable=True),
            sa.Column(name_column, sa.String(length=255), nullable=False),
            sa.Column(owner_column, sa.String(length=255), nullable=True),
            *extra_columns,
            sa.ForeignKeyConstraint(
                ["created_by_user_id"],
                ["users.id"],
                name=op.f(f"fk_{table}_created_by_user_id_users"),
                ondelete="RESTRICT",
            ),
            sa.ForeignKeyConstraint(
                ["modified_by_user_id"],
                ["users.id"],
                name=op.f(f"fk_{table}_modified_by_user_id_users"),
                ondelete="RESTRICT",
            ),
            sa.PrimaryKeyConstraint("id", name=op.f(f"pk_{table}")),
        )
        op.create_index(
            op.f(f"ix_{table}_{owner_column}"), table, [owner_column], unique=False
        )


def downgrade() -> None:
    for table, (_, owner_column, _) in reversed(list(RECORD_TABLES.items())):
        op.drop_index(op.f(f"ix_{table}_{owner_column}"), table_name=table)
        op.drop_table(table)
