"""Month lock: the persisted flag that freezes a month's leave records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from meal_allowance.schemas.month_lock import MonthLockResponse
from meal_allowance.services.repository import get_repository

if TYPE_CHECKING:
    from meal_allowance.schemas.auth import AuthContext

logger = logging.getLogger(__name__)


async def get_month_lock(year: int, month: int) -> MonthLockResponse:
    """Read the lock state of a month. An absent record means unlocked."""
    is_locked = await get_repository().get_month_lock(year, month)
    return MonthLockResponse(year=year, month=month, is_locked=is_locked)


async def set_month_lock(auth: AuthContext, year: int, month: int, is_locked: bool) -> MonthLockResponse:
    """Lock or unlock a month."""
    await get_repository().set_month_lock(year, month, is_locked)
    logger.info(
        "Month %d-%02d %s by %s",
        year,
        month,
        "locked" if is_locked else "unlocked",
        auth.user_id or "unknown user",
    )
    return MonthLockResponse(year=year, month=month, is_locked=is_locked)
