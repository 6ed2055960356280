"""Leave record mutations guarded by the month lock."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from meal_allowance.exceptions import AppError, InvalidEmployeeDataError, MonthLockedError
from meal_allowance.models.leave import LeaveRecord
from meal_allowance.schemas.leave import LeaveRecordListResponse, LeaveRecordResponse
from meal_allowance.services.calculation import employment_period
from meal_allowance.services.loader import get_data_loader
from meal_allowance.services.repository import get_repository

if TYPE_CHECKING:
    import uuid
    from datetime import date

    from meal_allowance.schemas.leave import SetLeaveRequest, TeamLeaveRequest, UpdateLeaveRequest
    from meal_allowance.services.repository import AllowanceRepository

logger = logging.getLogger(__name__)


def _build_leave_response(record: LeaveRecord) -> LeaveRecordResponse:
    return LeaveRecordResponse(
        id=record.id,
        employee_id=record.employee_id,
        date=record.date,
        leave_type=record.leave_type,
    )


async def ensure_month_unlocked(repository: AllowanceRepository, day: date) -> None:
    """Read the lock of ``day``'s month from the store and refuse if it is set."""
    if await repository.get_month_lock(day.year, day.month):
        raise MonthLockedError(day.year, day.month)


async def _get_leave_record(repository: AllowanceRepository, record_id: uuid.UUID) -> LeaveRecord:
    record = await repository.get_leave_record(record_id)
    if record is None:
        raise AppError("Leave record not found", status_code=404)
    return record


async def list_month_leave(year: int, month: int, *, force: bool = False) -> LeaveRecordListResponse:
    """List the leave records of a month ordered by date."""
    records = await get_data_loader().load_month_leave(year, month, force=force)
    return LeaveRecordListResponse(
        items=[_build_leave_response(r) for r in records],
        total=len(records),
    )


async def set_leave(payload: SetLeaveRequest) -> tuple[LeaveRecordResponse, bool]:
    """Register an employee's leave type on a date, replacing any existing type.

    Returns the record and whether it was newly created.
    """
    repository = get_repository()
    if await repository.get_employee(payload.employee_id) is None:
        raise AppError("Employee not found", status_code=404)
    await ensure_month_unlocked(repository, payload.date)

    existing = await repository.find_leave_record(payload.employee_id, payload.date)
    if existing is None:
        [record] = await repository.add_leave_records(
            [LeaveRecord(employee_id=payload.employee_id, date=payload.date, leave_type=payload.leave_type.value)]
        )
        created = True
    else:
        record = await repository.update_leave_record(
            LeaveRecord(
                id=existing.id,
                created_at=existing.created_at,
                employee_id=existing.employee_id,
                date=existing.date,
                leave_type=payload.leave_type.value,
            )
        )
        created = False

    get_data_loader().invalidate_month(payload.date.year, payload.date.month)
    return _build_leave_response(record), created


async def add_team_leave(payload: TeamLeaveRequest) -> list[LeaveRecordResponse]:
    """Register a leave type for every team member employed on the date."""
    repository = get_repository()
    await ensure_month_unlocked(repository, payload.date)

    members = []
    for employee in await repository.list_employees():
        if employee.team != payload.team:
            continue
        try:
            join_date, leave_date = employment_period(employee)
        except InvalidEmployeeDataError as exc:
            logger.warning("Team leave skips employee %s: %s", employee.id, exc.message)
            continue
        if join_date <= payload.date and (leave_date is None or payload.date <= leave_date):
            members.append(employee)

    if not members:
        return []

    existing = {
        r.employee_id: r
        for r in await repository.list_leave_records(payload.date, payload.date, employee_ids={m.id for m in members})
    }
    records: list[LeaveRecord] = []
    new_records: list[LeaveRecord] = []
    try:
        for member in members:
            current = existing.get(member.id)
            if current is None:
                new_records.append(
                    LeaveRecord(employee_id=member.id, date=payload.date, leave_type=payload.leave_type.value)
                )
                continue
            records.append(
                await repository.update_leave_record(
                    LeaveRecord(
                        id=current.id,
                        created_at=current.created_at,
                        employee_id=current.employee_id,
                        date=current.date,
                        leave_type=payload.leave_type.value,
                    )
                )
            )
        if new_records:
            records.extend(await repository.add_leave_records(new_records))
    finally:
        # Updates already applied stay persisted when the insert fails.
        get_data_loader().invalidate_month(payload.date.year, payload.date.month)
    logger.info("Registered %s for %d members of %s on %s", payload.leave_type, len(records), payload.team, payload.date)
    return [_build_leave_response(r) for r in sorted(records, key=lambda r: str(r.employee_id))]


async def update_leave_record(record_id: uuid.UUID, payload: UpdateLeaveRequest) -> LeaveRecordResponse:
    """Change the type, and optionally the date, of a leave record."""
    repository = get_repository()
    record = await _get_leave_record(repository, record_id)
    new_date = payload.date or record.date

    await ensure_month_unlocked(repository, record.date)
    if (new_date.year, new_date.month) != (record.date.year, record.date.month):
        await ensure_month_unlocked(repository, new_date)

    updated = await repository.update_leave_record(
        LeaveRecord(
            id=record.id,
            created_at=record.created_at,
            employee_id=record.employee_id,
            date=new_date,
            leave_type=payload.leave_type.value,
        )
    )

    loader = get_data_loader()
    loader.invalidate_month(record.date.year, record.date.month)
    loader.invalidate_month(new_date.year, new_date.month)
    return _build_leave_response(updated)


async def delete_leave_record(record_id: uuid.UUID) -> None:
    """Delete a leave record by id."""
    repository = get_repository()
    record = await _get_leave_record(repository, record_id)
    await ensure_month_unlocked(repository, record.date)
    await repository.delete_leave_record(record.id)
    get_data_loader().invalidate_month(record.date.year, record.date.month)


async def remove_leave(employee_id: uuid.UUID, day: date) -> None:
    """Delete the leave record of an employee on a date."""
    repository = get_repository()
    record = await repository.find_leave_record(employee_id, day)
    if record is None:
        raise AppError("Leave record not found", status_code=404)
    await ensure_month_unlocked(repository, day)
    await repository.delete_leave_record(record.id)
    get_data_loader().invalidate_month(day.year, day.month)
