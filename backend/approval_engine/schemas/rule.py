# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from approval_engine.models.enums import RequestType, RuleAction


class CreateRuleRequest(BaseModel):
    """Request body for creating an approval rule.

    ``condition`` maps the threshold name for the request type
    (``max_days``, ``max_amount`` or ``max_percent``) to its limit.
    """

    request_type: RequestType
    grade_id: uuid.UUID
    condition: dict[str, Any]
    action: str = RuleAction.AUTO_APPROVE


class UpdateRuleRequest(BaseModel):
    """Request body for updating an approval rule. Omitted fields are unchanged."""

    condition: dict[str, Any] | None = None
    action: str | None = None


class RuleResponse(BaseModel):
    """Response schema for an approval rule."""

    id: uuid.UUID
    request_type: RequestType
    grade_id: uuid.UUID
    condition: dict[str, Any]
    action: str
    active: bool
    created_at: datetime
    updated_at: datetime


class RuleListResponse(BaseModel):
    items: list[RuleResponse]
    total: int
