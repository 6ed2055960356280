"""Cached, instrumented loading of the data a monthly calculation needs."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from meal_allowance.config import get_settings
from meal_allowance.exceptions import RepositoryError
from meal_allowance.services.cache import TTLCache
from meal_allowance.services.calculation import month_bounds
from meal_allowance.services.repository import get_repository
from meal_allowance.services.timing import timed

if TYPE_CHECKING:
    from meal_allowance.models.employee import Employee
    from meal_allowance.models.leave import LeaveRecord
    from meal_allowance.services.cache import Cache
    from meal_allowance.services.repository import AllowanceRepository
    from meal_allowance.services.timing import DurationHook

logger = logging.getLogger(__name__)

EMPLOYEES_KEY = "employees:list"
LEAVE_KEY_PREFIX = "leave:"


def leave_cache_key(year: int, month: int) -> str:
    return f"{LEAVE_KEY_PREFIX}{year}-{month:02d}"


@dataclass
class MonthData:
    """Employees and leave records fetched for one month."""

    employees: list[Employee]
    leave_records: list[LeaveRecord] = field(default_factory=list)
    degraded: bool = False
    leave_error: str | None = None


class MonthDataLoader:
    """Loads roster and monthly leave data through a cache.

    Month locks are deliberately not loaded here: they must be read from the
    repository right before each mutation.
    """

    def __init__(
        self,
        repository: AllowanceRepository,
        cache: Cache | None = None,
        *,
        on_duration: DurationHook | None = None,
        employee_ttl_seconds: float = 600.0,
        leave_ttl_seconds: float = 300.0,
    ) -> None:
        self.repository = repository
        self.cache = cache if cache is not None else TTLCache()
        self._on_duration = on_duration
        self._employee_ttl = employee_ttl_seconds
        self._leave_ttl = leave_ttl_seconds

    async def load_employees(self, *, force: bool = False) -> list[Employee]:
        """Return the roster, from cache unless ``force`` is set."""
        if not force:
            cached = self.cache.get(EMPLOYEES_KEY)
            if cached is not None:
                return cached

        async with timed("list_employees", self._on_duration):
            employees = await self.repository.list_employees()
        self.cache.set(EMPLOYEES_KEY, employees, self._employee_ttl)
        return employees

    async def load_month_leave(self, year: int, month: int, *, force: bool = False) -> list[LeaveRecord]:
        """Return the leave records dated within a month, from cache unless ``force`` is set."""
        key = leave_cache_key(year, month)
        if not force:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        first_day, last_day = month_bounds(year, month)
        async with timed("list_leave_records", self._on_duration):
            records = await self.repository.list_leave_records(first_day, last_day)
        self.cache.set(key, records, self._leave_ttl)
        return records

    async def load_month(self, year: int, month: int, *, force: bool = False) -> MonthData:
        """Fetch roster and month leave concurrently and join both.

        A failed roster read propagates. A failed leave read degrades the
        result to an empty leave set, flagged as such.
        """
        employees, leave_records = await asyncio.gather(
            self.load_employees(force=force),
            self.load_month_leave(year, month, force=force),
            return_exceptions=True,
        )
        if isinstance(employees, BaseException):
            raise employees
        if isinstance(leave_records, RepositoryError):
            logger.warning("Leave records for %d-%02d unavailable, computing without them: %s", year, month, leave_records)
            return MonthData(employees=employees, degraded=True, leave_error=leave_records.message)
        if isinstance(leave_records, BaseException):
            raise leave_records
        return MonthData(employees=employees, leave_records=leave_records)

    def invalidate_employees(self) -> None:
        self.cache.invalidate_by_prefix(EMPLOYEES_KEY)

    def invalidate_month(self, year: int, month: int) -> None:
        self.cache.invalidate_by_prefix(leave_cache_key(year, month))

    def invalidate_all(self) -> None:
        self.cache.clear()


_data_loader: MonthDataLoader | None = None


def get_data_loader() -> MonthDataLoader:
    """Return the shared loader over the configured repository."""
    global _data_loader
    if _data_loader is None:
        settings = get_settings()
        _data_loader = MonthDataLoader(
            get_repository(),
            employee_ttl_seconds=settings.employee_cache_ttl_seconds,
            leave_ttl_seconds=settings.leave_cache_ttl_seconds,
        )
    return _data_loader


def set_data_loader(loader: MonthDataLoader | None) -> None:
    """Override the shared loader; None rebuilds it lazily from the current repository."""
    global _data_loader
    _data_loader = loader
