# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field

from approval_engine.models.base import TimestampMixin, UUIDBase


class Holiday(UUIDBase, TimestampMixin, table=True):
    """A non-working holiday; it does not count as a working day."""

    __tablename__ = "holiday"
    __table_args__ = (sa.UniqueConstraint("date", name="uq_holiday_date"),)

    date: datetime.date
    description: str = Field(max_length=255)
    created_by: uuid.UUID | None = None
