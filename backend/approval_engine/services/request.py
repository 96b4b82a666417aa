# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from approval_engine.db import transaction
from approval_engine.exceptions import AppError, ErrorKind
from approval_engine.models.base import now_utc
from approval_engine.models.enums import AuditAction, AuditEntityType, RequestStatus, RequestType
from approval_engine.models.request import ApprovalRequest
from approval_engine.schemas.request import RequestResponse, SubmitResponse
from approval_engine.services import balance as balance_service
from approval_engine.services.audit import model_to_audit_dict, write_audit_log
from approval_engine.services.authorization import validate_approver_role
from approval_engine.services.decision import decide
from approval_engine.services.employee import get_employee_or_404
from approval_engine.services.request_kinds import kind_for_payload
from approval_engine.services.rule import get_active_rule

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from approval_engine.schemas.auth import AuthContext
    from approval_engine.schemas.request import SubmitPayload

logger = logging.getLogger(__name__)

# Statuses from which the requester may still withdraw.
_CANCELLABLE = {RequestStatus.PENDING.value, RequestStatus.AUTO_APPROVED.value}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_request_response(request: ApprovalRequest) -> RequestResponse:
    """Map a request model to its response schema."""
    return RequestResponse(
        id=request.id,
        kind=RequestType(request.kind),
        employee_id=request.employee_id,
        magnitude=request.magnitude,
        start_date=request.start_date,
        end_date=request.end_date,
        leave_type=request.leave_type,
        category=request.category,
        reason=request.reason,
        status=RequestStatus(request.status),
        rule_id=request.rule_id,
        approver_id=request.approver_id,
        approval_comment=request.approval_comment,
        decided_at=request.decided_at,
        created_at=request.created_at,
    )


async def get_request_for_update(session: AsyncSession, request_id: uuid.UUID) -> ApprovalRequest | None:
    """Fetch a request with a FOR UPDATE lock, re-reading it if already loaded."""
    result = await session.execute(
        select(ApprovalRequest)
        .where(col(ApprovalRequest.id) == request_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _get_request_or_404(session: AsyncSession, request_id: uuid.UUID) -> ApprovalRequest:
    request = await get_request_for_update(session, request_id)
    if request is None:
        raise AppError(ErrorKind.REQUEST_NOT_FOUND)
    return request


async def _decide(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    comment: str | None,
    *,
    approve: bool,
) -> RequestResponse:
    """Shared logic for approve and reject.

    1. Require a comment.
    2. Lock the request.
    3. Refuse self-approval and anything not PENDING.
    4. Check the approver's role against the requester's; the approver must
       be a registered employee.
    5. On approval, lock the wallet, re-check and deduct.
    6. Record status, approver and comment, audit and commit.
    """
    if comment is None or not comment.strip():
        raise AppError(ErrorKind.COMMENT_REQUIRED)

    async with transaction(session):
        request = await _get_request_or_404(session, request_id)

        if request.employee_id == auth.user_id:
            raise AppError(ErrorKind.SELF_APPROVAL_NOT_ALLOWED)
        if request.status != RequestStatus.PENDING.value:
            raise AppError(ErrorKind.NOT_PENDING)

        requester = await get_employee_or_404(session, request.employee_id)
        validate_approver_role(auth.role, requester.role)
        await get_employee_or_404(session, auth.user_id)

        before_dict = model_to_audit_dict(request)
        kind = RequestType(request.kind)

        if approve:
            wallet = await balance_service.get_wallet_for_update(session, kind, request.employee_id)
            if request.magnitude > wallet.remaining:
                raise AppError(ErrorKind.LIMIT_EXCEEDED)
            await balance_service.deduct(session, kind, request.employee_id, request.magnitude)

        request.status = RequestStatus.APPROVED.value if approve else RequestStatus.REJECTED.value
        request.approver_id = auth.user_id
        request.approval_comment = comment.strip()
        request.decided_at = now_utc()
        await session.flush()

        await write_audit_log(
            session,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.REQUEST,
            entity_id=request.id,
            action=AuditAction.APPROVE if approve else AuditAction.REJECT,
            before_json=before_dict,
            after_json=model_to_audit_dict(request),
        )

    logger.info("%s request %s %s by %s", request.kind, request.id, request.status, auth.user_id)
    return _build_request_response(request)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def submit_request(
    session: AsyncSession,
    auth: AuthContext,
    payload: SubmitPayload,
    today: date | None = None,
) -> SubmitResponse:
    """Submit a request of any kind on behalf of the caller.

    Flow:
    1. Kind-specific validation and sizing (no storage access)
    2. Lock the wallet, which serializes submissions per employee and kind
    3. Kind-specific preconditions (leave overlap), then check the balance
       covers the magnitude
    4. Resolve the active rule for the employee's grade
    5. Decide: AUTO_APPROVED or PENDING
    6. Insert the request; deduct the wallet if auto-approved
    7. Write audit log
    8. Commit
    """
    kind = kind_for_payload(payload)
    request_type = kind.request_type
    employee_id = auth.user_id

    # 1. Validate.
    kind.validate(payload, today or date.today())
    magnitude = kind.magnitude(payload)
    if magnitude <= 0:
        raise AppError(ErrorKind.INVALID_AMOUNT)

    async with transaction(session):
        # 2. Lock wallet.
        wallet = await balance_service.get_wallet_for_update(session, request_type, employee_id)

        # 3. Kind preconditions, then balance.
        await kind.check_preconditions(session, employee_id, payload)
        if magnitude > wallet.remaining:
            raise AppError(ErrorKind.LIMIT_EXCEEDED)

        # 4. Resolve rule.
        employee = await get_employee_or_404(session, employee_id)
        rule = await get_active_rule(session, request_type, employee.grade_id)
        if rule is None:
            raise AppError(ErrorKind.RULE_NOT_CONFIGURED)

        # 5. Decide.
        decision = decide(request_type, rule.condition, magnitude)

        # 6. Insert, deduct when auto-approved.
        request = kind.build(employee_id, payload, magnitude)
        request.status = decision.status.value
        request.rule_id = rule.id
        session.add(request)
        await session.flush()

        if decision.status == RequestStatus.AUTO_APPROVED:
            await balance_service.deduct(session, request_type, employee_id, magnitude)

        # 7. Audit log.
        await write_audit_log(
            session,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.REQUEST,
            entity_id=request.id,
            action=AuditAction.SUBMIT,
            after_json=model_to_audit_dict(request),
        )

    logger.info("%s request %s by %s: %s", request_type, request.id, employee_id, decision.status)
    return SubmitResponse(
        message=decision.message,
        status=decision.status,
        request=_build_request_response(request),
    )


async def cancel_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> RequestResponse:
    """Withdraw one's own PENDING or AUTO_APPROVED request.

    An auto-approved request gives its magnitude back to the wallet.
    """
    async with transaction(session):
        request = await _get_request_or_404(session, request_id)
        if request.employee_id != auth.user_id:
            raise AppError(ErrorKind.REQUEST_NOT_FOUND)
        if request.status not in _CANCELLABLE:
            raise AppError(ErrorKind.CANNOT_CANCEL)

        before_dict = model_to_audit_dict(request)
        prior_status = request.status

        request.status = RequestStatus.CANCELLED.value
        await session.flush()

        if prior_status == RequestStatus.AUTO_APPROVED.value:
            await balance_service.restore(session, RequestType(request.kind), request.employee_id, request.magnitude)

        await write_audit_log(
            session,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.REQUEST,
            entity_id=request.id,
            action=AuditAction.CANCEL,
            before_json=before_dict,
            after_json=model_to_audit_dict(request),
        )

    return _build_request_response(request)


async def approve_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    comment: str | None,
) -> RequestResponse:
    """Approve a PENDING request and deduct its magnitude."""
    return await _decide(session, auth, request_id, comment, approve=True)


async def reject_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    comment: str | None,
) -> RequestResponse:
    """Reject a PENDING request. No balance effect."""
    return await _decide(session, auth, request_id, comment, approve=False)


async def get_request(session: AsyncSession, request_id: uuid.UUID) -> RequestResponse:
    """Get a single request."""
    request = await session.get(ApprovalRequest, request_id)
    if request is None:
        raise AppError(ErrorKind.REQUEST_NOT_FOUND)
    return _build_request_response(request)
