# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

from pydantic import BaseModel


class DayClassificationResponse(BaseModel):
    """One day of an employee's allowance ledger."""

    date: datetime.date
    day_of_week: int
    status: str
    leave_type: str | None
    workday_contribution: float
    payable_amount: int
    is_half_day: bool


class MonthlyCalculationResponse(BaseModel):
    """Allowance totals for one employee and month."""

    employee_id: uuid.UUID
    name: str
    team: str
    year: int
    month: int
    total_days: int
    work_days: float
    off_days: int
    half_days: int
    sundays: int
    total_allowance: int
    degraded: bool
    daily_ledger: list[DayClassificationResponse] | None = None


class TeamSummaryResponse(BaseModel):
    """Totals for one team."""

    team: str
    employee_count: int
    total_work_days: float
    total_allowance: int
    employees: list[MonthlyCalculationResponse]


class SkippedEmployeeResponse(BaseModel):
    """An employee excluded from the totals because its record is unusable."""

    employee_id: uuid.UUID
    name: str
    team: str
    reason: str


class RosterCalculationResponse(BaseModel):
    """Allowance calculation for the whole roster in one month."""

    year: int
    month: int
    daily_allowance: int
    degraded: bool
    degraded_reason: str | None = None
    employee_count: int
    total_work_days: float
    total_allowance: int
    by_team: list[TeamSummaryResponse]
    skipped: list[SkippedEmployeeResponse]
