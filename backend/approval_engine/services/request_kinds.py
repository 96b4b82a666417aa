"""Per-kind behaviour plugged into the shared request lifecycle."""

from __future__ import annotations

import abc
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar

from sqlalchemy import select
from sqlmodel import col

from approval_engine.exceptions import AppError, ErrorKind
from approval_engine.models.enums import RequestStatus, RequestType
from approval_engine.models.request import ApprovalRequest
from approval_engine.schemas.request import DiscountSubmitPayload, ExpenseSubmitPayload, LeaveSubmitPayload
from approval_engine.services.working_days import calendar_days_inclusive

if TYPE_CHECKING:
    import uuid
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

    from approval_engine.schemas.request import SubmitPayload

P = TypeVar("P", LeaveSubmitPayload, ExpenseSubmitPayload, DiscountSubmitPayload)

# Leave in these states still occupies its dates.
ACTIVE_LEAVE_STATUSES = [
    RequestStatus.PENDING.value,
    RequestStatus.APPROVED.value,
    RequestStatus.AUTO_APPROVED.value,
]


class RequestKind(abc.ABC, Generic[P]):
    """Strategy describing how one request type is sized, validated and stored."""

    request_type: ClassVar[RequestType]
    payload_type: ClassVar[type]

    @abc.abstractmethod
    def magnitude(self, payload: P) -> Decimal:
        """Amount drawn from the wallet of this kind."""

    def validate(self, payload: P, today: date) -> None:  # noqa: B027
        """Kind-specific checks that need no storage access."""

    async def check_preconditions(  # noqa: B027
        self,
        session: AsyncSession,
        employee_id: uuid.UUID,
        payload: P,
    ) -> None:
        """Kind-specific checks against stored requests, run inside the submit transaction."""

    @abc.abstractmethod
    def build(self, employee_id: uuid.UUID, payload: P, magnitude: Decimal) -> ApprovalRequest:
        """Create the (unsaved) request row."""


class LeaveKind(RequestKind[LeaveSubmitPayload]):
    request_type = RequestType.LEAVE
    payload_type = LeaveSubmitPayload

    def magnitude(self, payload: LeaveSubmitPayload) -> Decimal:
        return Decimal(calendar_days_inclusive(payload.from_date, payload.to_date))

    def validate(self, payload: LeaveSubmitPayload, today: date) -> None:
        if payload.to_date < payload.from_date:
            raise AppError(ErrorKind.INVALID_DATE_RANGE)
        if payload.from_date < today:
            raise AppError(ErrorKind.PAST_DATE)

    async def check_preconditions(
        self,
        session: AsyncSession,
        employee_id: uuid.UUID,
        payload: LeaveSubmitPayload,
    ) -> None:
        """Raise LEAVE_OVERLAP if an active leave shares any day with the new range.

        Both ranges are inclusive, so they overlap when
        existing.start_date <= new.end AND existing.end_date >= new.start.
        """
        result = await session.execute(
            select(ApprovalRequest.id)
            .where(
                col(ApprovalRequest.kind) == RequestType.LEAVE.value,
                col(ApprovalRequest.employee_id) == employee_id,
                col(ApprovalRequest.status).in_(ACTIVE_LEAVE_STATUSES),
                col(ApprovalRequest.start_date) <= payload.to_date,
                col(ApprovalRequest.end_date) >= payload.from_date,
            )
            .limit(1)
        )
        if result.scalar_one_or_none() is not None:
            raise AppError(ErrorKind.LEAVE_OVERLAP)

    def build(self, employee_id: uuid.UUID, payload: LeaveSubmitPayload, magnitude: Decimal) -> ApprovalRequest:
        return ApprovalRequest(
            kind=self.request_type.value,
            employee_id=employee_id,
            magnitude=magnitude,
            start_date=payload.from_date,
            end_date=payload.to_date,
            leave_type=payload.leave_type,
            reason=payload.reason,
        )


class ExpenseKind(RequestKind[ExpenseSubmitPayload]):
    request_type = RequestType.EXPENSE
    payload_type = ExpenseSubmitPayload

    def magnitude(self, payload: ExpenseSubmitPayload) -> Decimal:
        return payload.amount

    def validate(self, payload: ExpenseSubmitPayload, today: date) -> None:
        if payload.amount <= 0:
            raise AppError(ErrorKind.INVALID_AMOUNT)
        if not payload.category.strip():
            raise AppError(ErrorKind.INVALID_CATEGORY)

    def build(self, employee_id: uuid.UUID, payload: ExpenseSubmitPayload, magnitude: Decimal) -> ApprovalRequest:
        return ApprovalRequest(
            kind=self.request_type.value,
            employee_id=employee_id,
            magnitude=magnitude,
            category=payload.category.strip(),
            reason=payload.reason,
        )


class DiscountKind(RequestKind[DiscountSubmitPayload]):
    request_type = RequestType.DISCOUNT
    payload_type = DiscountSubmitPayload

    def magnitude(self, payload: DiscountSubmitPayload) -> Decimal:
        return payload.percent

    def build(self, employee_id: uuid.UUID, payload: DiscountSubmitPayload, magnitude: Decimal) -> ApprovalRequest:
        return ApprovalRequest(
            kind=self.request_type.value,
            employee_id=employee_id,
            magnitude=magnitude,
            reason=payload.reason,
        )


REQUEST_KINDS: dict[RequestType, RequestKind] = {
    kind.request_type: kind for kind in (LeaveKind(), ExpenseKind(), DiscountKind())
}


def kind_for_payload(payload: SubmitPayload) -> RequestKind:
    """Pick the strategy whose payload type matches ``payload``."""
    for kind in REQUEST_KINDS.values():
        if isinstance(payload, kind.payload_type):
            return kind
    msg = f"No request kind handles {type(payload).__name__}"
    raise TypeError(msg)
