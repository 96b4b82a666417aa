# ruff: noqa: TC003
from __future__ import annotations

import uuid
from decimal import Decimal

from pydantic import BaseModel, Field


class CreateGradeRequest(BaseModel):
    """Request body for creating a grade."""

    name: str = Field(min_length=1, max_length=100)
    annual_leave_limit: int = Field(ge=0)
    annual_expense_limit: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    discount_limit_percent: Decimal = Field(ge=0, le=100, max_digits=12, decimal_places=2)


class GradeResponse(BaseModel):
    """Response schema for a grade."""

    id: uuid.UUID
    name: str
    annual_leave_limit: int
    annual_expense_limit: Decimal
    discount_limit_percent: Decimal


class GradeListResponse(BaseModel):
    items: list[GradeResponse]
    total: int
