# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from approval_engine.api.deps import AdminDep
from approval_engine.db import SessionDep
from approval_engine.models.enums import RequestType
from approval_engine.schemas.rule import CreateRuleRequest, RuleListResponse, RuleResponse, UpdateRuleRequest
from approval_engine.services import rule as rule_service

rules_router = APIRouter(prefix="/rules", tags=["rules"])


@rules_router.post("", response_model=RuleResponse, status_code=status.HTTP_201_CREATED)
async def create_rule(
    payload: CreateRuleRequest,
    session: SessionDep,
    auth: AdminDep,
) -> RuleResponse:
    """Create an auto-approval rule (admin only)."""
    return await rule_service.create_rule(session, auth, payload)


@rules_router.get("", response_model=RuleListResponse)
async def list_rules(
    session: SessionDep,
    auth: AdminDep,
    request_type: RequestType | None = Query(default=None),
    grade_id: uuid.UUID | None = Query(default=None),
    include_inactive: bool = Query(default=False),
) -> RuleListResponse:
    """List rules with optional filters (admin only)."""
    return await rule_service.list_rules(session, request_type, grade_id, include_inactive=include_inactive)


@rules_router.put("/{rule_id}", response_model=RuleResponse)
async def update_rule(
    rule_id: uuid.UUID,
    payload: UpdateRuleRequest,
    session: SessionDep,
    auth: AdminDep,
) -> RuleResponse:
    """Update a rule's condition or action (admin only)."""
    return await rule_service.update_rule(session, auth, rule_id, payload)


@rules_router.delete("/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rule(
    rule_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Deactivate a rule (admin only)."""
    await rule_service.delete_rule(session, auth, rule_id)
