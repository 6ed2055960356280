"""Leave policy table: how a registered leave on a given weekday affects the meal allowance.

The table is plain data so the full (leave type x day of week) matrix can be
inspected and tested. Day of week uses 0=Sunday .. 6=Saturday throughout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import TYPE_CHECKING

from meal_allowance.models.enums import LeaveType

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

SUNDAY = 0
SATURDAY = 6
DAYS_OF_WEEK = range(7)

# Unlisted leave labels containing this marker earn a half workday.
HALF_DAY_MARKER = "half-day"


@dataclass(frozen=True)
class PolicyOutcome:
    """Effect of one leave day on the allowance."""

    is_payable: bool
    workday_contribution: float
    is_half_day: bool = False


NOT_PAYABLE = PolicyOutcome(is_payable=False, workday_contribution=0)
# Morning attendance before an afternoon leave counts as a full day.
AFTERNOON_OFF = PolicyOutcome(is_payable=True, workday_contribution=1, is_half_day=True)
HALF_DAY_FALLBACK = PolicyOutcome(is_payable=True, workday_contribution=0.5, is_half_day=True)
WORKED = PolicyOutcome(is_payable=True, workday_contribution=1)

WEEKDAY_POLICY: Mapping[LeaveType, PolicyOutcome] = MappingProxyType(
    {
        LeaveType.DAY_OFF: NOT_PAYABLE,
        LeaveType.ANNUAL_LEAVE: NOT_PAYABLE,
        LeaveType.MORNING_HALF_DAY: NOT_PAYABLE,
        LeaveType.AFTERNOON_HALF_DAY: AFTERNOON_OFF,
        LeaveType.MORNING_AFTERNOON_HALF_DAY: NOT_PAYABLE,
        LeaveType.MORNING_ANNUAL_HALF_DAY: NOT_PAYABLE,
        LeaveType.AFTERNOON_ANNUAL_HALF_DAY: AFTERNOON_OFF,
        LeaveType.SICK_LEAVE: NOT_PAYABLE,
        LeaveType.ABSENCE: NOT_PAYABLE,
    }
)

# Sunday is rest before any leave lookup; Saturday leave never earns the allowance.
FIXED_DAY_POLICY: Mapping[int, PolicyOutcome] = MappingProxyType(
    {
        SUNDAY: NOT_PAYABLE,
        SATURDAY: NOT_PAYABLE,
    }
)


def day_of_week(day: date) -> int:
    """Return the day of week with 0=Sunday .. 6=Saturday."""
    return (day.weekday() + 1) % 7


def lookup(leave_type: str, dow: int) -> PolicyOutcome:
    """Return the policy outcome of ``leave_type`` registered on day of week ``dow``.

    Never raises: an unrecognized leave type is treated as not payable and
    logged as a warning.
    """
    if dow not in DAYS_OF_WEEK:
        msg = f"day of week must be in 0..6, got {dow}"
        raise ValueError(msg)

    # StrEnum keys hash and compare like their plain string values.
    outcome = WEEKDAY_POLICY.get(leave_type)  # type: ignore[call-overload]
    if outcome is None and HALF_DAY_MARKER in leave_type:
        outcome = HALF_DAY_FALLBACK
    if outcome is None:
        logger.warning("Unknown leave type %r treated as not payable", leave_type)
        outcome = NOT_PAYABLE

    fixed = FIXED_DAY_POLICY.get(dow)
    return fixed if fixed is not None else outcome


def policy_matrix() -> dict[tuple[LeaveType, int], PolicyOutcome]:
    """Enumerate the outcome of every known leave type on every day of the week."""
    return {(leave_type, dow): lookup(leave_type, dow) for leave_type in LeaveType for dow in DAYS_OF_WEEK}
