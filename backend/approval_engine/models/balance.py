# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from approval_engine.models.base import MAGNITUDE_TYPE, now_utc


class BalanceWallet(SQLModel, table=True):
    """Per-employee quota for one request type, mutated only by the ledger."""

    __tablename__ = "balance_wallet"
    __table_args__ = (
        sa.PrimaryKeyConstraint("employee_id", "kind"),
        sa.CheckConstraint("remaining >= 0", name="ck_wallet_remaining_non_negative"),
        sa.CheckConstraint("remaining <= total_allocated", name="ck_wallet_remaining_within_total"),
    )

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False),
    )
    kind: str = Field(max_length=50)
    total_allocated: Decimal = Field(default=Decimal(0), sa_type=MAGNITUDE_TYPE)
    remaining: Decimal = Field(default=Decimal(0), sa_type=MAGNITUDE_TYPE)
    updated_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now(), "onupdate": sa.func.now()},
    )
    version: int = Field(default=1, sa_column_kwargs={"server_default": "1"})
