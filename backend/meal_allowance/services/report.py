"""Allowance reports: roster and single-employee calculations, CSV export."""

from __future__ import annotations

import csv
import io
import logging
from typing import TYPE_CHECKING

from meal_allowance.config import get_settings
from meal_allowance.exceptions import AppError, RepositoryError
from meal_allowance.schemas.calculation import (
    DayClassificationResponse,
    MonthlyCalculationResponse,
    RosterCalculationResponse,
    SkippedEmployeeResponse,
    TeamSummaryResponse,
)
from meal_allowance.services.aggregation import calculate_for_roster
from meal_allowance.services.calculation import calculate_month
from meal_allowance.services.loader import get_data_loader
from meal_allowance.services.repository import get_repository

if TYPE_CHECKING:
    import uuid

    from meal_allowance.services.aggregation import RosterCalculation, TeamSummary
    from meal_allowance.services.calculation import MonthlyCalculationResult

logger = logging.getLogger(__name__)

CSV_HEADER = ("name", "team", "work_days", "half_days", "total_allowance")


# ---------------------------------------------------------------------------
# Calculations
# ---------------------------------------------------------------------------


async def calculate_roster_month(year: int, month: int, *, force: bool = False) -> RosterCalculation:
    """Calculate the whole roster for a month from freshly joined reads."""
    data = await get_data_loader().load_month(year, month, force=force)
    roster = calculate_for_roster(
        data.employees,
        data.leave_records,
        year,
        month,
        daily_rate=get_settings().daily_allowance,
        degraded=data.degraded,
    )
    roster.degraded_reason = data.leave_error
    return roster


async def calculate_employee_month(
    employee_id: uuid.UUID,
    year: int,
    month: int,
    *,
    force: bool = False,
) -> MonthlyCalculationResult:
    """Calculate one employee for a month, including the day-by-day ledger."""
    loader = get_data_loader()
    employee = await get_repository().get_employee(employee_id)
    if employee is None:
        raise AppError("Employee not found", status_code=404)

    degraded = False
    try:
        leave_records = await loader.load_month_leave(year, month, force=force)
    except RepositoryError as exc:
        logger.warning("Leave records for %d-%02d unavailable, computing without them: %s", year, month, exc)
        leave_records = []
        degraded = True

    result = calculate_month(
        employee,
        [r for r in leave_records if r.employee_id == employee_id],
        year,
        month,
        daily_rate=get_settings().daily_allowance,
    )
    result.degraded = degraded
    return result


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------


def build_calculation_response(
    result: MonthlyCalculationResult,
    *,
    include_ledger: bool = False,
) -> MonthlyCalculationResponse:
    ledger = None
    if include_ledger:
        ledger = [
            DayClassificationResponse(
                date=day.date,
                day_of_week=day.day_of_week,
                status=day.status.value,
                leave_type=day.leave_type,
                workday_contribution=day.workday_contribution,
                payable_amount=day.payable_amount,
                is_half_day=day.is_half_day,
            )
            for day in result.daily_ledger
        ]
    return MonthlyCalculationResponse(
        employee_id=result.employee_id,
        name=result.name,
        team=result.team,
        year=result.year,
        month=result.month,
        total_days=result.total_days,
        work_days=result.work_days,
        off_days=result.off_days,
        half_days=result.half_days,
        sundays=result.sundays,
        total_allowance=result.total_allowance,
        degraded=result.degraded,
        daily_ledger=ledger,
    )


def _build_team_response(summary: TeamSummary) -> TeamSummaryResponse:
    return TeamSummaryResponse(
        team=summary.team,
        employee_count=summary.employee_count,
        total_work_days=summary.total_work_days,
        total_allowance=summary.total_allowance,
        employees=[build_calculation_response(r) for r in summary.employees],
    )


def build_roster_response(roster: RosterCalculation) -> RosterCalculationResponse:
    return RosterCalculationResponse(
        year=roster.year,
        month=roster.month,
        daily_allowance=get_settings().daily_allowance,
        degraded=roster.degraded,
        degraded_reason=roster.degraded_reason,
        employee_count=roster.employee_count,
        total_work_days=roster.total_work_days,
        total_allowance=roster.total_allowance,
        by_team=[_build_team_response(s) for s in roster.by_team],
        skipped=[
            SkippedEmployeeResponse(employee_id=s.employee_id, name=s.name, team=s.team, reason=s.reason)
            for s in roster.skipped
        ],
    )


def render_roster_csv(roster: RosterCalculation) -> str:
    """Render per-employee allowance lines in team order as CSV."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADER)
    for summary in roster.by_team:
        for result in summary.employees:
            writer.writerow(
                [
                    result.name,
                    result.team,
                    f"{result.work_days:g}",
                    result.half_days,
                    result.total_allowance,
                ]
            )
    return buffer.getvalue()
