# ruff: noqa: TC001
from __future__ import annotations

from fastapi import APIRouter, Path

from meal_allowance.api.deps import AdminDep, AuthDep
from meal_allowance.schemas.month_lock import MonthLockResponse, SetMonthLockRequest
from meal_allowance.services import month_lock as month_lock_service

month_locks_router = APIRouter(
    prefix="/month-locks/{year}/{month}",
    tags=["month-locks"],
)


@month_locks_router.get(
    "",
    response_model=MonthLockResponse,
)
async def get_month_lock(
    auth: AuthDep,
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
) -> MonthLockResponse:
    """Read whether a month is locked."""
    return await month_lock_service.get_month_lock(year, month)


@month_locks_router.put(
    "",
    response_model=MonthLockResponse,
)
async def set_month_lock(
    payload: SetMonthLockRequest,
    auth: AdminDep,
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
) -> MonthLockResponse:
    """Lock or unlock a month (admin only)."""
    return await month_lock_service.set_month_lock(auth, year, month, payload.is_locked)
