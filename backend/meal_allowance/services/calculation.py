"""Meal allowance calculator: classify every day of a month for one employee.

Pure computation over already-fetched data. No I/O and no clock reads.
"""

from __future__ import annotations

import logging
import math
from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from meal_allowance.exceptions import InvalidEmployeeDataError
from meal_allowance.models.enums import DayStatus
from meal_allowance.services.policy import SATURDAY, SUNDAY, day_of_week, lookup

if TYPE_CHECKING:
    import uuid
    from collections.abc import Iterable

    from meal_allowance.models.employee import Employee
    from meal_allowance.models.leave import LeaveRecord

logger = logging.getLogger(__name__)

DAILY_ALLOWANCE = 8000

_NOT_EMPLOYED = frozenset({DayStatus.NOT_YET_EMPLOYED, DayStatus.DEPARTED})

# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DayClassification:
    """One ledger line: how a single calendar day was classified."""

    date: date
    day_of_week: int
    status: DayStatus
    leave_type: str | None = None
    workday_contribution: float = 0
    payable_amount: int = 0
    is_half_day: bool = False

    @property
    def is_employed(self) -> bool:
        return self.status not in _NOT_EMPLOYED


@dataclass
class MonthlyCalculationResult:
    """Allowance totals and day-by-day ledger for one employee and month."""

    employee_id: uuid.UUID
    name: str
    team: str
    year: int
    month: int
    total_days: int
    work_days: float = 0
    off_days: int = 0
    half_days: int = 0
    sundays: int = 0
    total_allowance: int = 0
    daily_ledger: list[DayClassification] = field(default_factory=list)
    degraded: bool = False


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a month (leap-year aware)."""
    _, days_in_month = monthrange(year, month)
    return date(year, month, 1), date(year, month, days_in_month)


def _parse_date(value: object, label: str, employee: Employee) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            msg = f"Employee {employee.id} has an unparseable {label}: {value!r}"
            raise InvalidEmployeeDataError(msg) from None
    msg = f"Employee {employee.id} has an invalid {label}: {value!r}"
    raise InvalidEmployeeDataError(msg)


def employment_period(employee: Employee) -> tuple[date, date | None]:
    """Return the inclusive (join_date, leave_date) of an employee.

    Raises InvalidEmployeeDataError when the join date is missing or
    unparseable, or when the leave date precedes the join date.
    """
    join_date = _parse_date(employee.join_date, "join date", employee)
    if join_date is None:
        msg = f"Employee {employee.id} has no join date"
        raise InvalidEmployeeDataError(msg)
    leave_date = _parse_date(employee.leave_date, "leave date", employee)
    if leave_date is not None and leave_date < join_date:
        msg = f"Employee {employee.id} leave date {leave_date} precedes join date {join_date}"
        raise InvalidEmployeeDataError(msg)
    return join_date, leave_date


def _leave_by_date(
    employee_id: uuid.UUID,
    leave_records: Iterable[LeaveRecord],
    first_day: date,
    last_day: date,
) -> dict[date, LeaveRecord]:
    """Index the employee's leave records in the month by date, first record wins."""
    index: dict[date, LeaveRecord] = {}
    for record in leave_records:
        if record.employee_id != employee_id or not first_day <= record.date <= last_day:
            continue
        if record.date in index:
            logger.warning(
                "Duplicate leave record %s for employee %s on %s ignored",
                record.id,
                employee_id,
                record.date,
            )
            continue
        index[record.date] = record
    return index


def _classify_day(
    day: date,
    join_date: date,
    leave_date: date | None,
    record: LeaveRecord | None,
    daily_rate: int,
) -> DayClassification:
    dow = day_of_week(day)

    if day < join_date:
        return DayClassification(day, dow, DayStatus.NOT_YET_EMPLOYED)
    if leave_date is not None and day > leave_date:
        return DayClassification(day, dow, DayStatus.DEPARTED)
    if dow == SUNDAY:
        return DayClassification(day, dow, DayStatus.SUNDAY_REST)
    if record is None:
        return DayClassification(day, dow, DayStatus.WORKED, workday_contribution=1, payable_amount=daily_rate)

    outcome = lookup(record.leave_type, dow)
    return DayClassification(
        day,
        dow,
        DayStatus.SATURDAY_LEAVE if dow == SATURDAY else DayStatus.LEAVE,
        leave_type=record.leave_type,
        workday_contribution=outcome.workday_contribution,
        payable_amount=daily_rate if outcome.workday_contribution > 0 else 0,
        is_half_day=outcome.is_half_day,
    )


# ---------------------------------------------------------------------------
# Calculation
# ---------------------------------------------------------------------------


def calculate_month(
    employee: Employee,
    leave_records: Iterable[LeaveRecord],
    year: int,
    month: int,
    *,
    daily_rate: int = DAILY_ALLOWANCE,
) -> MonthlyCalculationResult:
    """Calculate one employee's meal allowance for a month.

    Leave records of other employees or outside the month are ignored.
    """
    join_date, leave_date = employment_period(employee)
    first_day, last_day = month_bounds(year, month)
    days = [first_day + timedelta(days=offset) for offset in range((last_day - first_day).days + 1)]

    result = MonthlyCalculationResult(
        employee_id=employee.id,
        name=employee.name,
        team=employee.team,
        year=year,
        month=month,
        total_days=len(days),
    )

    # Whole month outside the employment period.
    if join_date > last_day:
        result.daily_ledger = [DayClassification(d, day_of_week(d), DayStatus.NOT_YET_EMPLOYED) for d in days]
        return result
    if leave_date is not None and leave_date < first_day:
        result.daily_ledger = [DayClassification(d, day_of_week(d), DayStatus.DEPARTED) for d in days]
        return result

    leave_index = _leave_by_date(employee.id, leave_records, first_day, last_day)

    for day in days:
        entry = _classify_day(day, join_date, leave_date, leave_index.get(day), daily_rate)
        result.daily_ledger.append(entry)

        if entry.status == DayStatus.SUNDAY_REST:
            result.sundays += 1
        elif entry.status == DayStatus.WORKED:
            result.work_days += 1
        elif entry.status in (DayStatus.LEAVE, DayStatus.SATURDAY_LEAVE):
            result.work_days += entry.workday_contribution
            if entry.is_half_day:
                result.half_days += 1
            if entry.workday_contribution == 0:
                result.off_days += 1

    result.total_allowance = math.floor(result.work_days * daily_rate)
    return result
