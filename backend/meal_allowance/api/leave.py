# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Path, Query, Response, status

from meal_allowance.api.deps import AuthDep
from meal_allowance.schemas.leave import (
    LeaveRecordListResponse,
    LeaveRecordResponse,
    SetLeaveRequest,
    TeamLeaveRequest,
    UpdateLeaveRequest,
)
from meal_allowance.services import leave as leave_service

leave_router = APIRouter(
    prefix="/leave-records",
    tags=["leave-records"],
)


@leave_router.get(
    "",
    response_model=LeaveRecordListResponse,
)
async def list_leave_records(
    auth: AuthDep,
    year: int = Query(ge=1, le=9999),
    month: int = Query(ge=1, le=12),
    refresh: bool = Query(default=False),
) -> LeaveRecordListResponse:
    """List the leave records of a month."""
    return await leave_service.list_month_leave(year, month, force=refresh)


@leave_router.put(
    "",
    response_model=LeaveRecordResponse,
    responses={201: {"model": LeaveRecordResponse}},
)
async def set_leave(
    payload: SetLeaveRequest,
    response: Response,
    auth: AuthDep,
) -> LeaveRecordResponse:
    """Register or change an employee's leave type on a date."""
    record, created = await leave_service.set_leave(payload)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return record


@leave_router.post(
    "/team",
    response_model=list[LeaveRecordResponse],
    status_code=201,
)
async def add_team_leave(
    payload: TeamLeaveRequest,
    auth: AuthDep,
) -> list[LeaveRecordResponse]:
    """Register a leave type for every member of a team on a date."""
    return await leave_service.add_team_leave(payload)


@leave_router.delete(
    "",
    status_code=204,
)
async def remove_leave(
    auth: AuthDep,
    employee_id: uuid.UUID = Query(),
    day: date = Query(alias="date"),
) -> None:
    """Delete an employee's leave record on a date."""
    await leave_service.remove_leave(employee_id, day)


@leave_router.patch(
    "/{record_id}",
    response_model=LeaveRecordResponse,
)
async def update_leave_record(
    payload: UpdateLeaveRequest,
    auth: AuthDep,
    record_id: uuid.UUID = Path(),
) -> LeaveRecordResponse:
    """Change the type or date of a leave record."""
    return await leave_service.update_leave_record(record_id, payload)


@leave_router.delete(
    "/{record_id}",
    status_code=204,
)
async def delete_leave_record(
    record_id: uuid.UUID,
    auth: AuthDep,
) -> None:
    """Delete a leave record."""
    await leave_service.delete_leave_record(record_id)
