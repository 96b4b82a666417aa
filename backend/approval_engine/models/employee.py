# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from approval_engine.models.base import TimestampMixin, UUIDBase
from approval_engine.models.enums import Role


class Employee(UUIDBase, TimestampMixin, table=True):
    """A person who submits requests and, for managers and admins, decides them."""

    __tablename__ = "employee"
    __table_args__ = (sa.UniqueConstraint("email", name="uq_employee_email"),)

    name: str = Field(max_length=255)
    email: str = Field(max_length=255)
    role: str = Field(default=Role.EMPLOYEE, max_length=50, sa_column_kwargs={"server_default": "EMPLOYEE"})
    grade_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("grade.id"), nullable=False, index=True),
    )
    manager_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id"), nullable=True, index=True),
    )
