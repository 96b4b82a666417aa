# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel, Field


class CreateHolidayRequest(BaseModel):
    """Request body for creating a holiday."""

    date: date
    description: str = Field(min_length=1, max_length=255)


class HolidayResponse(BaseModel):
    """Response schema for a holiday."""

    id: uuid.UUID
    date: date
    description: str
    created_by: uuid.UUID | None


class HolidayListResponse(BaseModel):
    """List of holidays ordered by date."""

    items: list[HolidayResponse]
    total: int
