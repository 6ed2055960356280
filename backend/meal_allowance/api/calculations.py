# ruff: noqa: TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Path, Query, Response

from meal_allowance.api.deps import AuthDep
from meal_allowance.schemas.calculation import MonthlyCalculationResponse, RosterCalculationResponse
from meal_allowance.services import report as report_service

calculations_router = APIRouter(
    prefix="/calculations/{year}/{month}",
    tags=["calculations"],
)


@calculations_router.get(
    "",
    response_model=RosterCalculationResponse,
)
async def calculate_roster(
    auth: AuthDep,
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
    refresh: bool = Query(default=False),
) -> RosterCalculationResponse:
    """Meal allowance of every employee for a month, grouped by team."""
    roster = await report_service.calculate_roster_month(year, month, force=refresh)
    return report_service.build_roster_response(roster)


@calculations_router.get("/export")
async def export_roster(
    auth: AuthDep,
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
    refresh: bool = Query(default=False),
) -> Response:
    """Download the month's allowance lines as CSV."""
    roster = await report_service.calculate_roster_month(year, month, force=refresh)
    content = report_service.render_roster_csv(roster)
    return Response(
        content=content.encode("utf-8-sig"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="meal_allowance_{year}-{month:02d}.csv"'},
    )


@calculations_router.get(
    "/employees/{employee_id}",
    response_model=MonthlyCalculationResponse,
)
async def calculate_employee(
    employee_id: uuid.UUID,
    auth: AuthDep,
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
    refresh: bool = Query(default=False),
) -> MonthlyCalculationResponse:
    """One employee's allowance for a month with the day-by-day ledger."""
    result = await report_service.calculate_employee_month(employee_id, year, month, force=refresh)
    return report_service.build_calculation_response(result, include_ledger=True)
