from __future__ import annotations

import enum


class Team(enum.StrEnum):
    """Organization teams, in the order they are reported."""

    MEDICAL_OFFICE = "Medical Office"
    COUNSELING = "Counseling"
    COORDINATION = "Coordination"
    NURSING = "Nursing"
    SKIN_CARE = "Skin Care"
    MANAGEMENT_SUPPORT = "Management Support"


class LeaveType(enum.StrEnum):
    """Registered leave categories for a single day."""

    DAY_OFF = "day off"
    ANNUAL_LEAVE = "annual leave"
    MORNING_HALF_DAY = "morning half-day"
    AFTERNOON_HALF_DAY = "afternoon half-day"
    MORNING_AFTERNOON_HALF_DAY = "morning+afternoon half-day"
    MORNING_ANNUAL_HALF_DAY = "morning annual half-day"
    AFTERNOON_ANNUAL_HALF_DAY = "afternoon annual half-day"
    SICK_LEAVE = "sick leave"
    ABSENCE = "absence"


class DayStatus(enum.StrEnum):
    """Classification of one calendar day in an allowance ledger."""

    NOT_YET_EMPLOYED = "not_yet_employed"
    DEPARTED = "departed"
    SUNDAY_REST = "sunday_rest"
    SATURDAY_LEAVE = "saturday_leave"
    LEAVE = "leave"
    WORKED = "worked"
