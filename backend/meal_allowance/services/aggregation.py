"""Monthly aggregation: run the calculator over a roster and roll results up by team."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from meal_allowance.exceptions import InvalidEmployeeDataError
from meal_allowance.models.enums import Team
from meal_allowance.services.calculation import DAILY_ALLOWANCE, MonthlyCalculationResult, calculate_month

if TYPE_CHECKING:
    import uuid
    from collections.abc import Iterable, Sequence

    from meal_allowance.models.employee import Employee
    from meal_allowance.models.leave import LeaveRecord

logger = logging.getLogger(__name__)


@dataclass
class TeamSummary:
    """Totals for one team."""

    team: str
    employee_count: int = 0
    total_work_days: float = 0
    total_allowance: int = 0
    employees: list[MonthlyCalculationResult] = field(default_factory=list)


@dataclass
class SkippedEmployee:
    """An employee left out of the aggregation because its record is unusable."""

    employee_id: uuid.UUID
    name: str
    team: str
    reason: str


@dataclass
class RosterCalculation:
    """Per-employee results, team summaries and grand totals for one month."""

    year: int
    month: int
    per_employee: list[MonthlyCalculationResult] = field(default_factory=list)
    by_team: list[TeamSummary] = field(default_factory=list)
    skipped: list[SkippedEmployee] = field(default_factory=list)
    degraded: bool = False
    degraded_reason: str | None = None

    @property
    def employee_count(self) -> int:
        return len(self.per_employee)

    @property
    def total_work_days(self) -> float:
        return sum(r.work_days for r in self.per_employee)

    @property
    def total_allowance(self) -> int:
        return sum(r.total_allowance for r in self.per_employee)


def partition_leave_records(leave_records: Iterable[LeaveRecord]) -> dict[uuid.UUID, list[LeaveRecord]]:
    """Group leave records by employee in a single pass, keeping input order."""
    by_employee: dict[uuid.UUID, list[LeaveRecord]] = defaultdict(list)
    for record in leave_records:
        by_employee[record.employee_id].append(record)
    return by_employee


def summarize_teams(results: Iterable[MonthlyCalculationResult]) -> list[TeamSummary]:
    """Fold employee results into team summaries.

    Known teams come first in their fixed order, then any other team in
    first-seen order. Teams without employees are omitted.
    """
    summaries: dict[str, TeamSummary] = {}
    for result in results:
        summary = summaries.get(result.team)
        if summary is None:
            summary = summaries[result.team] = TeamSummary(team=result.team)
        summary.employee_count += 1
        summary.total_work_days += result.work_days
        summary.total_allowance += result.total_allowance
        summary.employees.append(result)

    known = [summaries.pop(team) for team in Team if team in summaries]
    return known + list(summaries.values())


def calculate_for_roster(
    employees: Sequence[Employee],
    leave_records: Iterable[LeaveRecord],
    year: int,
    month: int,
    *,
    daily_rate: int = DAILY_ALLOWANCE,
    degraded: bool = False,
) -> RosterCalculation:
    """Calculate every roster employee for a month, in roster order.

    An employee with unusable data is skipped and reported instead of
    aborting the whole roster. ``degraded`` marks results computed from
    incomplete leave data.
    """
    leave_by_employee = partition_leave_records(leave_records)
    roster = RosterCalculation(year=year, month=month, degraded=degraded)

    for employee in employees:
        try:
            result = calculate_month(
                employee,
                leave_by_employee.get(employee.id, ()),
                year,
                month,
                daily_rate=daily_rate,
            )
        except InvalidEmployeeDataError as exc:
            logger.warning("Skipping employee %s in %d-%02d: %s", employee.id, year, month, exc.message)
            roster.skipped.append(
                SkippedEmployee(employee_id=employee.id, name=employee.name, team=employee.team, reason=exc.message)
            )
            continue
        result.degraded = degraded
        roster.per_employee.append(result)

    roster.by_team = summarize_teams(roster.per_employee)
    return roster
