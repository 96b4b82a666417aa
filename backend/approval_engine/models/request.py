# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from approval_engine.models.base import MAGNITUDE_TYPE, TimestampMixin, UUIDBase
from approval_engine.models.enums import RequestStatus


class ApprovalRequest(UUIDBase, TimestampMixin, table=True):
    """A leave, expense or discount request moving through the approval lifecycle.

    ``magnitude`` is the amount drawn from the wallet of the same ``kind``:
    calendar days for leave, currency amount for expense, percent for discount.
    """

    __tablename__ = "approval_request"
    __table_args__ = (
        sa.Index("ix_request_kind_status", "kind", "status"),
        sa.Index("ix_request_employee_kind", "employee_id", "kind"),
    )

    kind: str = Field(max_length=50)
    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id"), nullable=False),
    )
    magnitude: Decimal = Field(sa_type=MAGNITUDE_TYPE)
    start_date: date | None = None
    end_date: date | None = None
    leave_type: str | None = Field(default=None, max_length=100)
    category: str | None = Field(default=None, max_length=100)
    reason: str | None = None
    status: str = Field(
        default=RequestStatus.PENDING, max_length=50, index=True, sa_column_kwargs={"server_default": "PENDING"}
    )
    rule_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("approval_rule.id"), nullable=True),
    )
    approver_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id"), nullable=True),
    )
    approval_comment: str | None = None
    decided_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
