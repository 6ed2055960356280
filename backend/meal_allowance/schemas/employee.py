# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from typing import Self

from pydantic import BaseModel, Field, model_validator

from meal_allowance.models.enums import Team


class EmployeeFields(BaseModel):
    """Fields shared by employee create and update bodies."""

    name: str = Field(min_length=1, max_length=100)
    team: Team
    join_date: date
    leave_date: date | None = None

    @model_validator(mode="after")
    def _validate_period(self) -> Self:
        if self.leave_date is not None and self.leave_date < self.join_date:
            msg = "leave_date must not be before join_date"
            raise ValueError(msg)
        return self


class CreateEmployeeRequest(EmployeeFields):
    """Request body for adding an employee to the roster."""


class UpdateEmployeeRequest(EmployeeFields):
    """Request body for replacing an employee's fields; a null leave_date clears it."""


class EmployeeResponse(BaseModel):
    """Response schema for an employee."""

    id: uuid.UUID
    name: str
    team: str
    join_date: date
    leave_date: date | None


class EmployeeListResponse(BaseModel):
    """List of employees."""

    items: list[EmployeeResponse]
    total: int


class ImportEmployeesRequest(BaseModel):
    """CSV roster (name,team,join_date,leave_date) to bulk insert."""

    csv: str = Field(min_length=1)


class ImportRejectedRow(BaseModel):
    """A CSV line that could not be imported."""

    line: int
    content: str
    reason: str


class ImportEmployeesResponse(BaseModel):
    """Outcome of a roster CSV import."""

    imported: list[EmployeeResponse]
    rejected: list[ImportRejectedRow]
