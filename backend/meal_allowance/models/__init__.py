from sqlmodel import SQLModel

from meal_allowance.models.base import RecordBase
from meal_allowance.models.employee import Employee
from meal_allowance.models.enums import DayStatus, LeaveType, Team
from meal_allowance.models.leave import LeaveRecord
from meal_allowance.models.month_lock import MonthLock

__all__ = [
    "DayStatus",
    "Employee",
    "LeaveRecord",
    "LeaveType",
    "MonthLock",
    "RecordBase",
    "SQLModel",
    "Team",
]
