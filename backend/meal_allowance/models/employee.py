# ruff: noqa: TC003
from __future__ import annotations

import datetime

import sqlalchemy as sa
from sqlmodel import Field

from meal_allowance.models.base import RecordBase


class Employee(RecordBase, table=True):
    """A roster entry with its employment period."""

    __tablename__ = "employee"
    __table_args__ = (sa.Index("ix_employee_team_name", "team", "name"),)

    name: str = Field(max_length=100)
    team: str = Field(max_length=50)
    join_date: datetime.date
    leave_date: datetime.date | None = None
