"""Initial schema: employee, leave_record, month_lock.

Revision ID: 0001
Revises:
Create Date: 2024-01-01 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "employee",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("team", sa.String(length=50), nullable=False),
        sa.Column("join_date", sa.Date(), nullable=False),
        sa.Column("leave_date", sa.Date(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_employee_team_name", "employee", ["team", "name"])

    op.create_table(
        "leave_record",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("employee_id", sa.Uuid(), sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("leave_type", sa.String(length=50), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("employee_id", "date", name="uq_leave_employee_date"),
    )
    op.create_index("ix_leave_record_employee_id", "leave_record", ["employee_id"])
    op.create_index("ix_leave_record_date", "leave_record", ["date"])

    op.create_table(
        "month_lock",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("is_locked", sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("year", "month", name="uq_month_lock_year_month"),
    )


def downgrade() -> None:
    op.drop_table("month_lock")
    op.drop_index("ix_leave_record_date", table_name="leave_record")
    op.drop_index("ix_leave_record_employee_id", table_name="leave_record")
    op.drop_table("leave_record")
    op.drop_index("ix_employee_team_name", table_name="employee")
    op.drop_table("employee")
