# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field

from meal_allowance.models.base import RecordBase


class LeaveRecord(RecordBase, table=True):
    """One employee's registered leave on one calendar date."""

    __tablename__ = "leave_record"
    __table_args__ = (sa.UniqueConstraint("employee_id", "date", name="uq_leave_employee_date"),)

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    date: datetime.date = Field(index=True)
    leave_type: str = Field(max_length=50)
