from __future__ import annotations

from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from approval_engine.models.base import MAGNITUDE_TYPE, TimestampMixin, UUIDBase


class Grade(UUIDBase, TimestampMixin, table=True):
    """Employee tier whose limits seed wallets and cap rule thresholds."""

    __tablename__ = "grade"
    __table_args__ = (sa.UniqueConstraint("name", name="uq_grade_name"),)

    name: str = Field(max_length=100)
    annual_leave_limit: int
    annual_expense_limit: Decimal = Field(sa_type=MAGNITUDE_TYPE)
    discount_limit_percent: Decimal = Field(sa_type=MAGNITUDE_TYPE)
