from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from approval_engine.db import transaction
from approval_engine.exceptions import AppError, ErrorKind
from approval_engine.models.base import now_utc
from approval_engine.models.enums import AuditAction, AuditEntityType, RequestType, RuleAction
from approval_engine.models.rule import ApprovalRule
from approval_engine.schemas.rule import RuleListResponse, RuleResponse
from approval_engine.services.audit import model_to_audit_dict, write_audit_log
from approval_engine.services.decision import THRESHOLD_KEYS, as_threshold
from approval_engine.services.grade import get_grade

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from approval_engine.models.grade import Grade
    from approval_engine.schemas.auth import AuthContext
    from approval_engine.schemas.rule import CreateRuleRequest, UpdateRuleRequest

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_rule_response(rule: ApprovalRule) -> RuleResponse:
    return RuleResponse(
        id=rule.id,
        request_type=RequestType(rule.request_type),
        grade_id=rule.grade_id,
        condition=rule.condition,
        action=rule.action,
        active=rule.active,
        created_at=rule.created_at,
        updated_at=rule.updated_at,
    )


def _grade_ceiling(grade: Grade, request_type: RequestType) -> Decimal:
    """The grade's own limit for a request type; no rule may auto-approve beyond it."""
    if request_type == RequestType.LEAVE:
        return Decimal(grade.annual_leave_limit)
    if request_type == RequestType.EXPENSE:
        return Decimal(grade.annual_expense_limit)
    return Decimal(grade.discount_limit_percent)


def _validate_shape(condition: dict[str, Any], action: str) -> None:
    """Checks that need no storage access."""
    if action != RuleAction.AUTO_APPROVE:
        raise AppError(ErrorKind.ACTION_REQUIRED)
    if not condition:
        raise AppError(ErrorKind.CONDITION_REQUIRED)
    for key, value in condition.items():
        number = as_threshold(value)
        if number is not None and number < 0:
            raise AppError(ErrorKind.NEGATIVE_THRESHOLD, f"Rule threshold {key} cannot be negative")


def _validate_against_grade(request_type: RequestType, condition: dict[str, Any], grade: Grade) -> None:
    key = THRESHOLD_KEYS[request_type]
    threshold = as_threshold(condition.get(key))
    ceiling = _grade_ceiling(grade, request_type)
    if threshold is not None and threshold > ceiling:
        raise AppError(
            ErrorKind.RULE_EXCEEDS_GRADE_LIMIT,
            f"{key} of {threshold} exceeds the {grade.name} grade limit of {ceiling}",
        )


async def _get_rule(session: AsyncSession, rule_id: uuid.UUID) -> ApprovalRule:
    rule = await session.get(ApprovalRule, rule_id)
    if rule is None:
        raise AppError(ErrorKind.RULE_NOT_FOUND)
    return rule


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def get_active_rule(
    session: AsyncSession,
    request_type: RequestType,
    grade_id: uuid.UUID,
) -> ApprovalRule | None:
    """Return the active rule for a request type and grade, if one is configured."""
    result = await session.execute(
        select(ApprovalRule).where(
            col(ApprovalRule.request_type) == request_type.value,
            col(ApprovalRule.grade_id) == grade_id,
            col(ApprovalRule.active).is_(True),
        )
    )
    return result.scalar_one_or_none()


async def create_rule(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateRuleRequest,
) -> RuleResponse:
    """Create an auto-approval rule for a request type and grade.

    At most one rule per (request type, grade) is active at a time.
    """
    _validate_shape(payload.condition, payload.action)

    async with transaction(session):
        grade = await get_grade(session, payload.grade_id)
        _validate_against_grade(payload.request_type, payload.condition, grade)

        if await get_active_rule(session, payload.request_type, payload.grade_id) is not None:
            raise AppError(ErrorKind.RULE_CONFLICT)

        rule = ApprovalRule(
            request_type=payload.request_type.value,
            grade_id=payload.grade_id,
            condition=dict(payload.condition),
            action=payload.action,
        )
        session.add(rule)
        try:
            await session.flush()
        except IntegrityError:
            raise AppError(ErrorKind.RULE_CONFLICT) from None

        await write_audit_log(
            session,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.RULE,
            entity_id=rule.id,
            action=AuditAction.CREATE,
            after_json=model_to_audit_dict(rule),
        )

    logger.info("Created %s rule %s for grade %s", rule.request_type, rule.id, rule.grade_id)
    return _build_rule_response(rule)


async def update_rule(
    session: AsyncSession,
    auth: AuthContext,
    rule_id: uuid.UUID,
    payload: UpdateRuleRequest,
) -> RuleResponse:
    """Replace a rule's condition and/or action, re-validated against its grade."""
    async with transaction(session):
        rule = await _get_rule(session, rule_id)

        condition = payload.condition if payload.condition is not None else rule.condition
        action = payload.action if payload.action is not None else rule.action
        _validate_shape(condition, action)

        request_type = RequestType(rule.request_type)
        grade = await get_grade(session, rule.grade_id)
        _validate_against_grade(request_type, condition, grade)

        before_dict = model_to_audit_dict(rule)
        rule.condition = dict(condition)
        rule.action = action
        rule.updated_at = now_utc()
        await session.flush()

        await write_audit_log(
            session,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.RULE,
            entity_id=rule.id,
            action=AuditAction.UPDATE,
            before_json=before_dict,
            after_json=model_to_audit_dict(rule),
        )

    return _build_rule_response(rule)


async def delete_rule(session: AsyncSession, auth: AuthContext, rule_id: uuid.UUID) -> None:
    """Deactivate a rule. Requests decided under it keep their rule reference."""
    async with transaction(session):
        rule = await _get_rule(session, rule_id)
        if not rule.active:
            return

        before_dict = model_to_audit_dict(rule)
        rule.active = False
        rule.updated_at = now_utc()
        await session.flush()

        await write_audit_log(
            session,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.RULE,
            entity_id=rule.id,
            action=AuditAction.DELETE,
            before_json=before_dict,
            after_json=model_to_audit_dict(rule),
        )

    logger.info("Deactivated rule %s", rule_id)


async def list_rules(
    session: AsyncSession,
    request_type: RequestType | None = None,
    grade_id: uuid.UUID | None = None,
    *,
    include_inactive: bool = False,
) -> RuleListResponse:
    """List rules, active only unless ``include_inactive`` is set."""
    base_filter = []
    if request_type is not None:
        base_filter.append(col(ApprovalRule.request_type) == request_type.value)
    if grade_id is not None:
        base_filter.append(col(ApprovalRule.grade_id) == grade_id)
    if not include_inactive:
        base_filter.append(col(ApprovalRule.active).is_(True))

    count_result = await session.execute(select(func.count()).select_from(ApprovalRule).where(*base_filter))
    result = await session.execute(
        select(ApprovalRule).where(*base_filter).order_by(col(ApprovalRule.created_at))
    )
    return RuleListResponse(
        items=[_build_rule_response(r) for r in result.scalars().all()],
        total=count_result.scalar_one(),
    )
