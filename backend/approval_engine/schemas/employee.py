# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from approval_engine.models.enums import Role


class RegisterEmployeeRequest(BaseModel):
    """Request body for registering an employee.

    ``manager_id`` is optional; when omitted the default manager for the
    role is used.
    """

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=255)
    role: Role = Role.EMPLOYEE
    grade_id: uuid.UUID
    manager_id: uuid.UUID | None = None


class EmployeeResponse(BaseModel):
    """Response schema for an employee."""

    id: uuid.UUID
    name: str
    email: str
    role: Role
    grade_id: uuid.UUID
    manager_id: uuid.UUID | None
    created_at: datetime
