from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(UTC)


def _timestamp(*, onupdate: bool = False) -> Any:
    kwargs: dict[str, Any] = {"server_default": sa.func.now()}
    if onupdate:
        kwargs["onupdate"] = utcnow
    return Field(
        default_factory=utcnow,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs=kwargs,
    )


class RecordBase(SQLModel):
    """Columns shared by every stored record: a UUID key and audit timestamps.

    ``created_at`` also breaks ties between rows that sort equal on their
    business key, so the oldest row comes first.
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, sa_type=sa.Uuid)
    created_at: datetime = _timestamp()
    updated_at: datetime = _timestamp(onupdate=True)
