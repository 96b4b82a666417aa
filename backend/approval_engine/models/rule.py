# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from approval_engine.models.base import TimestampMixin, UUIDBase, now_utc
from approval_engine.models.enums import RuleAction


class ApprovalRule(UUIDBase, TimestampMixin, table=True):
    """Single-threshold auto-approval policy for one request type and grade."""

    __tablename__ = "approval_rule"
    __table_args__ = (
        sa.Index(
            "uq_rule_active_type_grade",
            "request_type",
            "grade_id",
            unique=True,
            postgresql_where=sa.text("active"),
            sqlite_where=sa.text("active"),
        ),
    )

    request_type: str = Field(max_length=50, index=True)
    grade_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("grade.id"), nullable=False, index=True),
    )
    condition: dict[str, Any] = Field(default_factory=dict, sa_type=sa.JSON)
    action: str = Field(default=RuleAction.AUTO_APPROVE, max_length=50)
    active: bool = Field(default=True, index=True)
    updated_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now(), "onupdate": sa.func.now()},
    )
