# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

from pydantic import BaseModel

from meal_allowance.models.enums import LeaveType, Team


class SetLeaveRequest(BaseModel):
    """Register (or change) the leave type of an employee on a date."""

    employee_id: uuid.UUID
    date: datetime.date
    leave_type: LeaveType


class TeamLeaveRequest(BaseModel):
    """Register a leave type for every employee of a team on a date."""

    team: Team
    date: datetime.date
    leave_type: LeaveType


class UpdateLeaveRequest(BaseModel):
    """Change the type and optionally the date of an existing leave record."""

    leave_type: LeaveType
    date: datetime.date | None = None


class LeaveRecordResponse(BaseModel):
    """Response schema for a leave record."""

    id: uuid.UUID
    employee_id: uuid.UUID
    date: datetime.date
    leave_type: str


class LeaveRecordListResponse(BaseModel):
    """Leave records of one month."""

    items: list[LeaveRecordResponse]
    total: int
