from __future__ import annotations

from pydantic import BaseModel


class SetMonthLockRequest(BaseModel):
    """Request body for locking or unlocking a month."""

    is_locked: bool


class MonthLockResponse(BaseModel):
    """Lock state of one month."""

    year: int
    month: int
    is_locked: bool
