# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Query, Response

from meal_allowance.api.deps import AuthDep
from meal_allowance.schemas.employee import (
    CreateEmployeeRequest,
    EmployeeListResponse,
    EmployeeResponse,
    ImportEmployeesRequest,
    ImportEmployeesResponse,
    UpdateEmployeeRequest,
)
from meal_allowance.services import employee as employee_service

employees_router = APIRouter(
    prefix="/employees",
    tags=["employees"],
)


@employees_router.get(
    "",
    response_model=EmployeeListResponse,
)
async def list_employees(
    auth: AuthDep,
    refresh: bool = Query(default=False),
) -> EmployeeListResponse:
    """List the roster ordered by team, then name."""
    return await employee_service.list_employees(force=refresh)


@employees_router.post(
    "",
    response_model=EmployeeResponse,
    status_code=201,
)
async def create_employee(
    payload: CreateEmployeeRequest,
    auth: AuthDep,
) -> EmployeeResponse:
    """Add an employee to the roster."""
    return await employee_service.create_employee(payload)


@employees_router.post(
    "/import",
    response_model=ImportEmployeesResponse,
    status_code=201,
)
async def import_employees(
    payload: ImportEmployeesRequest,
    auth: AuthDep,
) -> ImportEmployeesResponse:
    """Bulk insert employees from CSV text (name,team,join_date,leave_date)."""
    return await employee_service.import_employees_csv(payload.csv)


@employees_router.get("/export")
async def export_employees(auth: AuthDep) -> Response:
    """Download the roster as CSV."""
    content = await employee_service.export_employees_csv()
    filename = f"employees_{date.today().isoformat()}.csv"
    return Response(
        content=content.encode("utf-8-sig"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@employees_router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
)
async def get_employee(
    employee_id: uuid.UUID,
    auth: AuthDep,
) -> EmployeeResponse:
    """Get a single employee."""
    employee = await employee_service.get_employee(employee_id)
    return EmployeeResponse(
        id=employee.id,
        name=employee.name,
        team=employee.team,
        join_date=employee.join_date,
        leave_date=employee.leave_date,
    )


@employees_router.put(
    "/{employee_id}",
    response_model=EmployeeResponse,
)
async def update_employee(
    employee_id: uuid.UUID,
    payload: UpdateEmployeeRequest,
    auth: AuthDep,
) -> EmployeeResponse:
    """Replace an employee's fields."""
    return await employee_service.update_employee(employee_id, payload)


@employees_router.delete(
    "/{employee_id}",
    status_code=204,
)
async def delete_employee(
    employee_id: uuid.UUID,
    auth: AuthDep,
) -> None:
    """Delete an employee and its leave records."""
    await employee_service.delete_employee(employee_id)
