# ruff: noqa: TC003
"""Data store boundary: employees, leave records and month locks."""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from datetime import date
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlalchemy import delete, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import col

from meal_allowance.db import get_session_factory
from meal_allowance.exceptions import AppError, RepositoryError
from meal_allowance.models.employee import Employee
from meal_allowance.models.leave import LeaveRecord
from meal_allowance.models.month_lock import MonthLock

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Collection, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


def _conflict(message: str) -> AppError:
    return AppError(message, status_code=409)


@runtime_checkable
class AllowanceRepository(Protocol):
    """Interface the allowance service requires from the data store."""

    async def ping(self) -> None:
        """Raise RepositoryError when the store is unreachable."""
        ...

    async def list_employees(self) -> list[Employee]:
        """List all employees ordered by team, then name."""
        ...

    async def get_employee(self, employee_id: uuid.UUID) -> Employee | None:
        """Fetch one employee. Returns None if not found."""
        ...

    async def add_employees(self, employees: Sequence[Employee]) -> list[Employee]:
        """Insert employees in one batch."""
        ...

    async def update_employee(self, employee: Employee) -> Employee:
        """Persist changes to an existing employee."""
        ...

    async def delete_employee(self, employee_id: uuid.UUID) -> bool:
        """Delete an employee and its leave records. Returns False if not found."""
        ...

    async def list_leave_records(
        self,
        start: date,
        end: date,
        employee_ids: Collection[uuid.UUID] | None = None,
    ) -> list[LeaveRecord]:
        """List leave records dated within [start, end], ordered by date."""
        ...

    async def get_leave_record(self, record_id: uuid.UUID) -> LeaveRecord | None:
        """Fetch one leave record. Returns None if not found."""
        ...

    async def find_leave_record(self, employee_id: uuid.UUID, day: date) -> LeaveRecord | None:
        """Fetch the leave record of an employee on a date, if any."""
        ...

    async def add_leave_records(self, records: Sequence[LeaveRecord]) -> list[LeaveRecord]:
        """Insert leave records in one batch. Conflicts on (employee, date) raise 409."""
        ...

    async def update_leave_record(self, record: LeaveRecord) -> LeaveRecord:
        """Persist changes to an existing leave record."""
        ...

    async def delete_leave_record(self, record_id: uuid.UUID) -> bool:
        """Delete a leave record. Returns False if not found."""
        ...

    async def get_month_lock(self, year: int, month: int) -> bool:
        """Return whether a month is locked. An absent record means unlocked."""
        ...

    async def set_month_lock(self, year: int, month: int, locked: bool) -> None:
        """Create or update the lock flag of a month."""
        ...


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------


class InMemoryRepository:
    """In-memory stub implementation for development and tests."""

    def __init__(self) -> None:
        self._employees: dict[uuid.UUID, Employee] = {}
        self._leave_records: dict[uuid.UUID, LeaveRecord] = {}
        self._locks: dict[tuple[int, int], bool] = {}

    def seed(self, *items: Employee | LeaveRecord) -> None:
        """Seed employees or leave records directly, bypassing uniqueness checks."""
        for item in items:
            if isinstance(item, Employee):
                self._employees[item.id] = item
            else:
                self._leave_records[item.id] = item

    def _check_unique(self, record: LeaveRecord) -> None:
        for existing in self._leave_records.values():
            if existing.id != record.id and existing.employee_id == record.employee_id and existing.date == record.date:
                raise _conflict(f"Leave already registered for employee {record.employee_id} on {record.date}")

    async def ping(self) -> None:
        return None

    async def list_employees(self) -> list[Employee]:
        return sorted(self._employees.values(), key=lambda e: (e.team, e.name))

    async def get_employee(self, employee_id: uuid.UUID) -> Employee | None:
        return self._employees.get(employee_id)

    async def add_employees(self, employees: Sequence[Employee]) -> list[Employee]:
        for employee in employees:
            self._employees[employee.id] = employee
        return list(employees)

    async def update_employee(self, employee: Employee) -> Employee:
        self._employees[employee.id] = employee
        return employee

    async def delete_employee(self, employee_id: uuid.UUID) -> bool:
        if self._employees.pop(employee_id, None) is None:
            return False
        self._leave_records = {k: r for k, r in self._leave_records.items() if r.employee_id != employee_id}
        return True

    async def list_leave_records(
        self,
        start: date,
        end: date,
        employee_ids: Collection[uuid.UUID] | None = None,
    ) -> list[LeaveRecord]:
        records = [
            r
            for r in self._leave_records.values()
            if start <= r.date <= end and (employee_ids is None or r.employee_id in employee_ids)
        ]
        return sorted(records, key=lambda r: r.date)

    async def get_leave_record(self, record_id: uuid.UUID) -> LeaveRecord | None:
        return self._leave_records.get(record_id)

    async def find_leave_record(self, employee_id: uuid.UUID, day: date) -> LeaveRecord | None:
        for record in self._leave_records.values():
            if record.employee_id == employee_id and record.date == day:
                return record
        return None

    async def add_leave_records(self, records: Sequence[LeaveRecord]) -> list[LeaveRecord]:
        pending: set[tuple[uuid.UUID, date]] = set()
        for record in records:
            key = (record.employee_id, record.date)
            if key in pending:
                raise _conflict(f"Leave already registered for employee {record.employee_id} on {record.date}")
            pending.add(key)
            self._check_unique(record)
        for record in records:
            self._leave_records[record.id] = record
        return list(records)

    async def update_leave_record(self, record: LeaveRecord) -> LeaveRecord:
        self._check_unique(record)
        self._leave_records[record.id] = record
        return record

    async def delete_leave_record(self, record_id: uuid.UUID) -> bool:
        return self._leave_records.pop(record_id, None) is not None

    async def get_month_lock(self, year: int, month: int) -> bool:
        return self._locks.get((year, month), False)

    async def set_month_lock(self, year: int, month: int, locked: bool) -> None:
        self._locks[(year, month)] = locked


# ---------------------------------------------------------------------------
# SQL implementation
# ---------------------------------------------------------------------------


class SqlRepository:
    """SQLModel implementation. Each call uses its own session so reads can run concurrently."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except IntegrityError as exc:
            raise _conflict(f"{operation} conflicts with existing data") from exc
        except (SQLAlchemyError, OSError) as exc:
            raise RepositoryError(f"{operation} failed: {exc}") from exc

    async def ping(self) -> None:
        async with self._session("ping") as session:
            await session.execute(text("SELECT 1"))

    async def list_employees(self) -> list[Employee]:
        async with self._session("list_employees") as session:
            result = await session.execute(select(Employee).order_by(col(Employee.team), col(Employee.name)))
            return list(result.scalars().all())

    async def get_employee(self, employee_id: uuid.UUID) -> Employee | None:
        async with self._session("get_employee") as session:
            return await session.get(Employee, employee_id)

    async def add_employees(self, employees: Sequence[Employee]) -> list[Employee]:
        async with self._session("add_employees") as session:
            session.add_all(employees)
            await session.commit()
            return list(employees)

    async def update_employee(self, employee: Employee) -> Employee:
        async with self._session("update_employee") as session:
            merged = await session.merge(employee)
            await session.commit()
            return merged

    async def delete_employee(self, employee_id: uuid.UUID) -> bool:
        async with self._session("delete_employee") as session:
            employee = await session.get(Employee, employee_id)
            if employee is None:
                return False
            await session.execute(delete(LeaveRecord).where(col(LeaveRecord.employee_id) == employee_id))
            await session.delete(employee)
            await session.commit()
            return True

    async def list_leave_records(
        self,
        start: date,
        end: date,
        employee_ids: Collection[uuid.UUID] | None = None,
    ) -> list[LeaveRecord]:
        filters = [col(LeaveRecord.date) >= start, col(LeaveRecord.date) <= end]
        if employee_ids is not None:
            filters.append(col(LeaveRecord.employee_id).in_(list(employee_ids)))

        async with self._session("list_leave_records") as session:
            result = await session.execute(
                select(LeaveRecord).where(*filters).order_by(col(LeaveRecord.date), col(LeaveRecord.created_at))
            )
            return list(result.scalars().all())

    async def get_leave_record(self, record_id: uuid.UUID) -> LeaveRecord | None:
        async with self._session("get_leave_record") as session:
            return await session.get(LeaveRecord, record_id)

    async def find_leave_record(self, employee_id: uuid.UUID, day: date) -> LeaveRecord | None:
        async with self._session("find_leave_record") as session:
            result = await session.execute(
                select(LeaveRecord).where(
                    col(LeaveRecord.employee_id) == employee_id,
                    col(LeaveRecord.date) == day,
                )
            )
            return result.scalars().first()

    async def add_leave_records(self, records: Sequence[LeaveRecord]) -> list[LeaveRecord]:
        async with self._session("add_leave_records") as session:
            session.add_all(records)
            await session.commit()
            return list(records)

    async def update_leave_record(self, record: LeaveRecord) -> LeaveRecord:
        async with self._session("update_leave_record") as session:
            merged = await session.merge(record)
            await session.commit()
            return merged

    async def delete_leave_record(self, record_id: uuid.UUID) -> bool:
        async with self._session("delete_leave_record") as session:
            record = await session.get(LeaveRecord, record_id)
            if record is None:
                return False
            await session.delete(record)
            await session.commit()
            return True

    async def get_month_lock(self, year: int, month: int) -> bool:
        async with self._session("get_month_lock") as session:
            result = await session.execute(
                select(col(MonthLock.is_locked)).where(
                    col(MonthLock.year) == year,
                    col(MonthLock.month) == month,
                )
            )
            return bool(result.scalar_one_or_none())

    async def set_month_lock(self, year: int, month: int, locked: bool) -> None:
        async with self._session("set_month_lock") as session:
            result = await session.execute(
                select(MonthLock).where(
                    col(MonthLock.year) == year,
                    col(MonthLock.month) == month,
                )
            )
            lock = result.scalar_one_or_none()
            if lock is None:
                session.add(MonthLock(year=year, month=month, is_locked=locked))
            else:
                lock.is_locked = locked
            await session.commit()


_repository: AllowanceRepository | None = None


def get_repository() -> AllowanceRepository:
    """Return the configured repository, defaulting to the SQL store."""
    global _repository
    if _repository is None:
        _repository = SqlRepository(get_session_factory())
    return _repository


def set_repository(repository: AllowanceRepository) -> None:
    """Override the repository (for testing or alternative wiring)."""
    global _repository
    _repository = repository
