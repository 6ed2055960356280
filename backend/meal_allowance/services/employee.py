"""Roster management: employee CRUD and CSV import/export."""

from __future__ import annotations

import csv
import io
import logging
from datetime import date
from typing import TYPE_CHECKING

from meal_allowance.config import get_settings
from meal_allowance.exceptions import AppError
from meal_allowance.models.employee import Employee
from meal_allowance.models.enums import Team
from meal_allowance.schemas.employee import (
    EmployeeListResponse,
    EmployeeResponse,
    ImportEmployeesResponse,
    ImportRejectedRow,
)
from meal_allowance.services.loader import get_data_loader
from meal_allowance.services.repository import get_repository

if TYPE_CHECKING:
    import uuid

    from meal_allowance.schemas.employee import CreateEmployeeRequest, UpdateEmployeeRequest

logger = logging.getLogger(__name__)

CSV_COLUMNS = ("name", "team", "join_date", "leave_date")
_TEAM_NAMES = frozenset(Team)


def _build_employee_response(employee: Employee) -> EmployeeResponse:
    return EmployeeResponse(
        id=employee.id,
        name=employee.name,
        team=employee.team,
        join_date=employee.join_date,
        leave_date=employee.leave_date,
    )


async def list_employees(*, force: bool = False) -> EmployeeListResponse:
    """List the roster ordered by team, then name."""
    employees = await get_data_loader().load_employees(force=force)
    return EmployeeListResponse(
        items=[_build_employee_response(e) for e in employees],
        total=len(employees),
    )


async def get_employee(employee_id: uuid.UUID) -> Employee:
    """Get a single employee or raise 404."""
    employee = await get_repository().get_employee(employee_id)
    if employee is None:
        raise AppError("Employee not found", status_code=404)
    return employee


async def create_employee(payload: CreateEmployeeRequest) -> EmployeeResponse:
    """Add an employee to the roster."""
    employee = Employee(
        name=payload.name,
        team=payload.team.value,
        join_date=payload.join_date,
        leave_date=payload.leave_date,
    )
    [created] = await get_repository().add_employees([employee])
    get_data_loader().invalidate_employees()
    logger.info("Created employee %s (%s, %s)", created.id, created.name, created.team)
    return _build_employee_response(created)


async def update_employee(employee_id: uuid.UUID, payload: UpdateEmployeeRequest) -> EmployeeResponse:
    """Replace an employee's fields. A null leave_date clears the departure."""
    existing = await get_employee(employee_id)
    changed = Employee(
        id=existing.id,
        created_at=existing.created_at,
        name=payload.name,
        team=payload.team.value,
        join_date=payload.join_date,
        leave_date=payload.leave_date,
    )
    updated = await get_repository().update_employee(changed)
    get_data_loader().invalidate_employees()
    return _build_employee_response(updated)


async def delete_employee(employee_id: uuid.UUID) -> None:
    """Delete an employee together with its leave records."""
    if not await get_repository().delete_employee(employee_id):
        raise AppError("Employee not found", status_code=404)
    get_data_loader().invalidate_all()
    logger.info("Deleted employee %s", employee_id)


# ---------------------------------------------------------------------------
# CSV import / export
# ---------------------------------------------------------------------------


def _parse_row(row: list[str]) -> Employee:
    """Build an employee from one CSV row or raise ValueError with the reason."""
    fields = [value.strip() for value in row] + [""] * (len(CSV_COLUMNS) - len(row))
    name, team, join_text, leave_text = fields[: len(CSV_COLUMNS)]

    if not name or not team or not join_text:
        msg = "name, team and join_date are required"
        raise ValueError(msg)
    if team not in _TEAM_NAMES:
        msg = f"unknown team {team!r}"
        raise ValueError(msg)

    join_date = date.fromisoformat(join_text)
    leave_date = date.fromisoformat(leave_text) if leave_text else None
    if leave_date is not None and leave_date < join_date:
        msg = "leave_date must not be before join_date"
        raise ValueError(msg)

    return Employee(name=name, team=team, join_date=join_date, leave_date=leave_date)


def parse_roster_csv(text: str) -> tuple[list[Employee], list[ImportRejectedRow]]:
    """Parse a roster CSV. A leading header row and blank lines are skipped."""
    employees: list[Employee] = []
    rejected: list[ImportRejectedRow] = []

    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    for line_number, row in enumerate(reader, start=1):
        if not any(value.strip() for value in row):
            continue
        if line_number == 1 and row[0].strip().lower() == "name":
            continue
        try:
            employees.append(_parse_row(row))
        except ValueError as exc:
            rejected.append(ImportRejectedRow(line=line_number, content=",".join(row), reason=str(exc)))

    return employees, rejected


async def import_employees_csv(text: str) -> ImportEmployeesResponse:
    """Bulk insert the valid rows of a roster CSV in batches."""
    employees, rejected = parse_roster_csv(text)
    if not employees:
        raise AppError("No valid employee rows in CSV", status_code=400)

    batch_size = get_settings().import_batch_size
    repository = get_repository()
    imported: list[Employee] = []
    try:
        for start in range(0, len(employees), batch_size):
            imported.extend(await repository.add_employees(employees[start : start + batch_size]))
    finally:
        # Earlier batches stay committed when a later one fails.
        get_data_loader().invalidate_employees()
    logger.info("Imported %d employees from CSV (%d rows rejected)", len(imported), len(rejected))
    return ImportEmployeesResponse(
        imported=[_build_employee_response(e) for e in imported],
        rejected=rejected,
    )


async def export_employees_csv() -> str:
    """Render the roster as CSV."""
    employees = await get_data_loader().load_employees()
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_COLUMNS)
    for employee in employees:
        writer.writerow(
            [
                employee.name,
                employee.team,
                employee.join_date.isoformat(),
                employee.leave_date.isoformat() if employee.leave_date else "",
            ]
        )
    return buffer.getvalue()
