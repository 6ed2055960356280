from __future__ import annotations

import sqlalchemy as sa
from sqlmodel import Field

from meal_allowance.models.base import RecordBase


class MonthLock(RecordBase, table=True):
    """Persisted finalization flag for one calendar month."""

    __tablename__ = "month_lock"
    __table_args__ = (sa.UniqueConstraint("year", "month", name="uq_month_lock_year_month"),)

    year: int
    month: int
    is_locked: bool = Field(default=False, sa_column_kwargs={"server_default": sa.false()})
