"""Tests for the monthly meal allowance calculator."""

from __future__ import annotations

import uuid
from datetime import date, datetime

import pytest

from meal_allowance.exceptions import InvalidEmployeeDataError
from meal_allowance.models.employee import Employee
from meal_allowance.models.enums import DayStatus, LeaveType
from meal_allowance.models.leave import LeaveRecord
from meal_allowance.services.calculation import (
    DAILY_ALLOWANCE,
    calculate_month,
    employment_period,
    month_bounds,
)

# January 2024 starts on a Monday: Sundays 7, 14, 21, 28 and Saturdays 6, 13, 20, 27.
YEAR = 2024
MONTH = 1


def _employee(join_date: object = date(2023, 1, 1), leave_date: object = None, name: str = "Kim Minji") -> Employee:
    return Employee(name=name, team="Medical Office", join_date=join_date, leave_date=leave_date)


def _leave(employee: Employee, day: int, leave_type: str, month: int = MONTH) -> LeaveRecord:
    return LeaveRecord(employee_id=employee.id, date=date(YEAR, month, day), leave_type=leave_type)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("year", "month", "last_day"),
    [(2024, 1, 31), (2024, 2, 29), (2023, 2, 28), (2024, 4, 30), (2024, 12, 31)],
)
def test_month_bounds(year: int, month: int, last_day: int) -> None:
    assert month_bounds(year, month) == (date(year, month, 1), date(year, month, last_day))


def test_employment_period_accepts_iso_strings() -> None:
    employee = _employee(join_date="2024-01-15", leave_date="2024-02-01")
    assert employment_period(employee) == (date(2024, 1, 15), date(2024, 2, 1))


def test_employment_period_truncates_datetimes() -> None:
    employee = _employee(join_date=datetime(2024, 1, 15, 9, 30), leave_date=datetime(2024, 2, 1, 18, 0))
    assert employment_period(employee) == (date(2024, 1, 15), date(2024, 2, 1))

    result = calculate_month(employee, [], YEAR, MONTH)
    assert result.work_days == 15


# ---------------------------------------------------------------------------
# Full month scenarios
# ---------------------------------------------------------------------------


def test_full_month_without_leave() -> None:
    result = calculate_month(_employee(), [], YEAR, MONTH)
    assert result.total_days == 31
    assert result.sundays == 4
    assert result.work_days == 27
    assert result.off_days == 0
    assert result.half_days == 0
    assert result.total_allowance == 27 * DAILY_ALLOWANCE == 216000
    assert result.degraded is False


def test_afternoon_half_day_counts_as_full_workday() -> None:
    employee = _employee()
    result = calculate_month(employee, [_leave(employee, 15, LeaveType.AFTERNOON_HALF_DAY)], YEAR, MONTH)
    assert result.work_days == 27
    assert result.half_days == 1
    assert result.off_days == 0
    assert result.total_allowance == 216000

    entry = result.daily_ledger[14]
    assert entry.status == DayStatus.LEAVE
    assert entry.leave_type == "afternoon half-day"
    assert entry.payable_amount == DAILY_ALLOWANCE
    assert entry.is_half_day


def test_afternoon_annual_half_day_counts_as_full_workday() -> None:
    employee = _employee()
    result = calculate_month(employee, [_leave(employee, 16, LeaveType.AFTERNOON_ANNUAL_HALF_DAY)], YEAR, MONTH)
    assert result.work_days == 27
    assert result.half_days == 1


def test_morning_half_day_is_not_payable() -> None:
    employee = _employee()
    result = calculate_month(employee, [_leave(employee, 15, LeaveType.MORNING_HALF_DAY)], YEAR, MONTH)
    assert result.work_days == 26
    assert result.off_days == 1
    assert result.half_days == 0
    assert result.total_allowance == 208000
    assert result.daily_ledger[14].payable_amount == 0


@pytest.mark.parametrize(
    "leave_type",
    [
        LeaveType.DAY_OFF,
        LeaveType.ANNUAL_LEAVE,
        LeaveType.MORNING_AFTERNOON_HALF_DAY,
        LeaveType.MORNING_ANNUAL_HALF_DAY,
        LeaveType.SICK_LEAVE,
        LeaveType.ABSENCE,
    ],
)
def test_full_day_leave_types_remove_one_workday(leave_type: LeaveType) -> None:
    employee = _employee()
    result = calculate_month(employee, [_leave(employee, 10, leave_type)], YEAR, MONTH)
    assert result.work_days == 26
    assert result.off_days == 1


def test_saturday_leave_is_not_payable() -> None:
    employee = _employee()
    records = [
        _leave(employee, 13, LeaveType.DAY_OFF),
        _leave(employee, 20, LeaveType.AFTERNOON_HALF_DAY),
    ]
    result = calculate_month(employee, records, YEAR, MONTH)
    assert result.work_days == 25
    assert result.off_days == 2
    assert result.half_days == 0
    assert result.total_allowance == 200000
    for day in (13, 20):
        entry = result.daily_ledger[day - 1]
        assert entry.status == DayStatus.SATURDAY_LEAVE
        assert entry.payable_amount == 0


def test_leave_on_sunday_is_ignored() -> None:
    employee = _employee()
    result = calculate_month(employee, [_leave(employee, 7, LeaveType.DAY_OFF)], YEAR, MONTH)
    assert result.work_days == 27
    assert result.sundays == 4
    assert result.off_days == 0
    assert result.daily_ledger[6].status == DayStatus.SUNDAY_REST


def test_unlisted_half_day_label_earns_half_and_total_is_floored() -> None:
    employee = _employee()
    result = calculate_month(employee, [_leave(employee, 15, "evening half-day")], YEAR, MONTH, daily_rate=8001)
    assert result.work_days == 26.5
    assert result.half_days == 1
    assert result.total_allowance == 212026
    assert result.daily_ledger[14].payable_amount == 8001


def test_unknown_leave_type_is_an_off_day() -> None:
    employee = _employee()
    result = calculate_month(employee, [_leave(employee, 15, "business trip")], YEAR, MONTH)
    assert result.work_days == 26
    assert result.off_days == 1


# ---------------------------------------------------------------------------
# Employment period
# ---------------------------------------------------------------------------


def test_mid_month_join() -> None:
    result = calculate_month(_employee(join_date=date(2024, 1, 15)), [], YEAR, MONTH)
    assert result.work_days == 15
    assert result.sundays == 2
    assert result.total_allowance == 120000
    assert all(d.status == DayStatus.NOT_YET_EMPLOYED for d in result.daily_ledger[:14])
    assert result.daily_ledger[14].status == DayStatus.WORKED


def test_mid_month_departure_includes_last_day() -> None:
    result = calculate_month(_employee(leave_date=date(2024, 1, 20)), [], YEAR, MONTH)
    assert result.work_days == 18
    assert result.sundays == 2
    assert result.daily_ledger[19].status == DayStatus.WORKED
    assert all(d.status == DayStatus.DEPARTED for d in result.daily_ledger[20:])


def test_join_and_leave_on_same_day() -> None:
    result = calculate_month(_employee(join_date=date(2024, 1, 15), leave_date=date(2024, 1, 15)), [], YEAR, MONTH)
    assert result.work_days == 1
    assert result.total_allowance == DAILY_ALLOWANCE


def test_join_after_month_yields_empty_result() -> None:
    result = calculate_month(_employee(join_date=date(2024, 2, 1)), [], YEAR, MONTH)
    assert result.work_days == 0
    assert result.sundays == 0
    assert result.total_allowance == 0
    assert len(result.daily_ledger) == 31
    assert all(d.status == DayStatus.NOT_YET_EMPLOYED for d in result.daily_ledger)


def test_left_before_month_yields_empty_result() -> None:
    result = calculate_month(_employee(join_date=date(2022, 1, 1), leave_date=date(2023, 12, 31)), [], YEAR, MONTH)
    assert result.work_days == 0
    assert result.total_allowance == 0
    assert all(d.status == DayStatus.DEPARTED for d in result.daily_ledger)
    assert not any(d.is_employed for d in result.daily_ledger)


@pytest.mark.parametrize(
    ("year", "month", "total_days", "work_days"),
    [(2024, 2, 29, 25), (2023, 2, 28, 24)],
)
def test_february_leap_years(year: int, month: int, total_days: int, work_days: int) -> None:
    result = calculate_month(_employee(join_date=date(2020, 1, 1)), [], year, month)
    assert result.total_days == total_days
    assert result.sundays == 4
    assert result.work_days == work_days


# ---------------------------------------------------------------------------
# Record filtering
# ---------------------------------------------------------------------------


def test_records_of_other_employees_and_months_are_ignored() -> None:
    employee = _employee()
    other = _employee(name="Lee Jiwoo")
    records = [
        _leave(other, 15, LeaveType.DAY_OFF),
        _leave(employee, 15, LeaveType.DAY_OFF, month=2),
    ]
    result = calculate_month(employee, records, YEAR, MONTH)
    assert result.work_days == 27


def test_duplicate_records_first_one_wins() -> None:
    employee = _employee()
    records = [
        _leave(employee, 15, LeaveType.AFTERNOON_HALF_DAY),
        _leave(employee, 15, LeaveType.DAY_OFF),
    ]
    result = calculate_month(employee, records, YEAR, MONTH)
    assert result.work_days == 27
    assert result.daily_ledger[14].leave_type == "afternoon half-day"


# ---------------------------------------------------------------------------
# Invalid employee data
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("join_date", "leave_date"),
    [
        (None, None),
        ("not-a-date", None),
        (date(2024, 1, 15), date(2024, 1, 10)),
        (12345, None),
    ],
)
def test_invalid_employee_data_is_rejected(join_date: object, leave_date: object) -> None:
    with pytest.raises(InvalidEmployeeDataError):
        calculate_month(_employee(join_date=join_date, leave_date=leave_date), [], YEAR, MONTH)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


def test_ledger_is_consistent_with_totals() -> None:
    employee = _employee(join_date=date(2024, 1, 3), leave_date=date(2024, 1, 29))
    records = [
        _leave(employee, 5, LeaveType.SICK_LEAVE),
        _leave(employee, 9, LeaveType.AFTERNOON_HALF_DAY),
        _leave(employee, 13, LeaveType.ANNUAL_LEAVE),
        _leave(employee, 22, "custom half-day"),
    ]
    result = calculate_month(employee, records, YEAR, MONTH)

    assert len(result.daily_ledger) == result.total_days
    assert [d.date for d in result.daily_ledger] == [date(YEAR, MONTH, n) for n in range(1, 32)]
    assert sum(d.workday_contribution for d in result.daily_ledger) == result.work_days
    assert result.sundays == sum(1 for d in result.daily_ledger if d.status == DayStatus.SUNDAY_REST)
    assert 0 <= result.work_days <= result.total_days - result.sundays
    assert result.total_allowance == int(result.work_days * DAILY_ALLOWANCE)


def test_calculation_is_idempotent() -> None:
    employee = _employee()
    records = [_leave(employee, 15, LeaveType.MORNING_HALF_DAY)]
    assert calculate_month(employee, records, YEAR, MONTH) == calculate_month(employee, records, YEAR, MONTH)


@pytest.mark.parametrize("leave_type", [*LeaveType, "custom half-day", "unknown"])
def test_adding_leave_never_increases_allowance(leave_type: str) -> None:
    employee = _employee()
    baseline = calculate_month(employee, [], YEAR, MONTH)
    for day in range(1, 32):
        result = calculate_month(employee, [_leave(employee, day, leave_type)], YEAR, MONTH)
        assert result.total_allowance <= baseline.total_allowance


def test_result_identifies_employee() -> None:
    employee = _employee()
    result = calculate_month(employee, [], YEAR, MONTH)
    assert result.employee_id == employee.id
    assert isinstance(result.employee_id, uuid.UUID)
    assert (result.name, result.team, result.year, result.month) == ("Kim Minji", "Medical Office", YEAR, MONTH)


@pytest.mark.parametrize("day", [2, 10, 18, 31])
def test_non_payable_weekday_leave_removes_exactly_one_day(day: int) -> None:
    employee = _employee()
    baseline = calculate_month(employee, [], YEAR, MONTH)
    result = calculate_month(employee, [_leave(employee, day, LeaveType.ANNUAL_LEAVE)], YEAR, MONTH)

    assert result.work_days == baseline.work_days - 1
    changed = [
        (before.date, after.status)
        for before, after in zip(baseline.daily_ledger, result.daily_ledger, strict=True)
        if before != after
    ]
    assert changed == [(date(YEAR, MONTH, day), DayStatus.LEAVE)]
