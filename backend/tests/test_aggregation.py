"""Tests for roster aggregation and team summaries."""

from __future__ import annotations

from datetime import date

from meal_allowance.models.employee import Employee
from meal_allowance.models.enums import LeaveType, Team
from meal_allowance.models.leave import LeaveRecord
from meal_allowance.services.aggregation import calculate_for_roster, partition_leave_records, summarize_teams
from meal_allowance.services.calculation import calculate_month

YEAR = 2024
MONTH = 1
FULL_MONTH = 27 * 8000


def _employee(name: str, team: str, join_date: object = date(2023, 1, 1)) -> Employee:
    return Employee(name=name, team=team, join_date=join_date)


# ---------------------------------------------------------------------------
# Partitioning
# ---------------------------------------------------------------------------


def test_partition_keeps_input_order_per_employee() -> None:
    a = _employee("A", Team.NURSING)
    b = _employee("B", Team.NURSING)
    r1 = LeaveRecord(employee_id=a.id, date=date(2024, 1, 3), leave_type=LeaveType.DAY_OFF)
    r2 = LeaveRecord(employee_id=b.id, date=date(2024, 1, 4), leave_type=LeaveType.DAY_OFF)
    r3 = LeaveRecord(employee_id=a.id, date=date(2024, 1, 2), leave_type=LeaveType.SICK_LEAVE)

    partitioned = partition_leave_records([r1, r2, r3])
    assert partitioned[a.id] == [r1, r3]
    assert partitioned[b.id] == [r2]


# ---------------------------------------------------------------------------
# Team summaries
# ---------------------------------------------------------------------------


def test_known_teams_follow_fixed_order() -> None:
    employees = [
        _employee("E", Team.MANAGEMENT_SUPPORT),
        _employee("A", Team.NURSING),
        _employee("B", Team.MEDICAL_OFFICE),
    ]
    summaries = summarize_teams(calculate_month(e, [], YEAR, MONTH) for e in employees)
    assert [s.team for s in summaries] == ["Medical Office", "Nursing", "Management Support"]


def test_unknown_teams_follow_known_teams_in_first_seen_order() -> None:
    employees = [
        _employee("X", "Pharmacy"),
        _employee("A", Team.COUNSELING),
        _employee("Y", "Front Desk"),
        _employee("Z", "Pharmacy"),
    ]
    summaries = summarize_teams(calculate_month(e, [], YEAR, MONTH) for e in employees)
    assert [s.team for s in summaries] == ["Counseling", "Pharmacy", "Front Desk"]
    assert summaries[1].employee_count == 2


def test_empty_teams_are_omitted() -> None:
    summaries = summarize_teams([calculate_month(_employee("A", Team.SKIN_CARE), [], YEAR, MONTH)])
    assert [s.team for s in summaries] == ["Skin Care"]


# ---------------------------------------------------------------------------
# Roster calculation
# ---------------------------------------------------------------------------


def test_roster_totals_match_per_employee_results() -> None:
    nurse = _employee("Choi Yuna", Team.NURSING)
    nurse2 = _employee("Han Sora", Team.NURSING)
    office = _employee("Kim Minji", Team.MEDICAL_OFFICE, join_date=date(2024, 1, 15))
    records = [LeaveRecord(employee_id=nurse.id, date=date(2024, 1, 15), leave_type=LeaveType.MORNING_HALF_DAY)]

    roster = calculate_for_roster([nurse, nurse2, office], records, YEAR, MONTH)

    assert roster.employee_count == 3
    assert [r.name for r in roster.per_employee] == ["Choi Yuna", "Han Sora", "Kim Minji"]
    assert roster.total_work_days == 26 + 27 + 15
    assert roster.total_allowance == sum(r.total_allowance for r in roster.per_employee)

    nursing = next(s for s in roster.by_team if s.team == "Nursing")
    assert nursing.employee_count == 2
    assert nursing.total_work_days == 53
    assert nursing.total_allowance == 26 * 8000 + FULL_MONTH
    assert [s.team for s in roster.by_team] == ["Medical Office", "Nursing"]


def test_invalid_employee_is_skipped_not_fatal() -> None:
    good = _employee("Kim Minji", Team.COORDINATION)
    broken = _employee("Broken", Team.COORDINATION, join_date=None)

    roster = calculate_for_roster([broken, good], [], YEAR, MONTH)

    assert roster.employee_count == 1
    assert roster.total_allowance == FULL_MONTH
    assert len(roster.skipped) == 1
    assert roster.skipped[0].employee_id == broken.id
    assert "no join date" in roster.skipped[0].reason


def test_empty_roster() -> None:
    roster = calculate_for_roster([], [], YEAR, MONTH)
    assert roster.employee_count == 0
    assert roster.total_allowance == 0
    assert roster.total_work_days == 0
    assert roster.by_team == []


def test_degraded_flag_propagates_to_results() -> None:
    roster = calculate_for_roster([_employee("A", Team.NURSING)], [], YEAR, MONTH, degraded=True)
    assert roster.degraded
    assert all(r.degraded for r in roster.per_employee)


def test_custom_daily_rate() -> None:
    roster = calculate_for_roster([_employee("A", Team.NURSING)], [], YEAR, MONTH, daily_rate=10000)
    assert roster.total_allowance == 270000
