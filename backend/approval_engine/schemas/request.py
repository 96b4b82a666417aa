# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from approval_engine.models.enums import RequestStatus, RequestType

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class LeaveSubmitPayload(BaseModel):
    """Request body for submitting a leave request. Both dates are inclusive."""

    from_date: date
    to_date: date
    leave_type: str = Field(default="ANNUAL", max_length=100)
    reason: str | None = None


class ExpenseSubmitPayload(BaseModel):
    """Request body for submitting an expense reimbursement."""

    amount: Decimal = Field(max_digits=12, decimal_places=2)
    category: str = Field(default="", max_length=100)
    reason: str | None = None


class DiscountSubmitPayload(BaseModel):
    """Request body for submitting a discount grant."""

    percent: Decimal = Field(max_digits=12, decimal_places=2)
    reason: str | None = None


SubmitPayload = LeaveSubmitPayload | ExpenseSubmitPayload | DiscountSubmitPayload


class DecisionPayload(BaseModel):
    """Request body for approve/reject actions."""

    comment: str | None = Field(default=None, max_length=1000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class RequestResponse(BaseModel):
    """Response schema for a single request of any kind."""

    id: uuid.UUID
    kind: RequestType
    employee_id: uuid.UUID
    magnitude: Decimal
    start_date: date | None
    end_date: date | None
    leave_type: str | None
    category: str | None
    reason: str | None
    status: RequestStatus
    rule_id: uuid.UUID | None
    approver_id: uuid.UUID | None
    approval_comment: str | None
    decided_at: datetime | None
    created_at: datetime


class SubmitResponse(BaseModel):
    """Outcome of a submission: the decision message, status and stored request."""

    message: str
    status: RequestStatus
    request: RequestResponse
