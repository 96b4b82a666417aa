# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from approval_engine.config import get_settings
from approval_engine.db import transaction
from approval_engine.exceptions import AppError, ErrorKind
from approval_engine.models.employee import Employee
from approval_engine.models.enums import AuditAction, AuditEntityType, Role
from approval_engine.schemas.employee import EmployeeResponse
from approval_engine.services.audit import model_to_audit_dict, write_audit_log
from approval_engine.services.balance import initialize_wallets
from approval_engine.services.grade import get_grade

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from approval_engine.config import Settings
    from approval_engine.schemas.auth import AuthContext
    from approval_engine.schemas.employee import RegisterEmployeeRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrationBootstrap:
    """Default manager for each role, used when a registration names none."""

    default_managers: dict[Role, uuid.UUID | None] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: Settings) -> RegistrationBootstrap:
        return cls(
            default_managers={
                Role.EMPLOYEE: settings.default_employee_manager_id,
                Role.MANAGER: settings.default_manager_manager_id,
                Role.ADMIN: None,
            }
        )

    def manager_for(self, role: Role) -> uuid.UUID | None:
        return self.default_managers.get(role)


def get_registration_bootstrap() -> RegistrationBootstrap:
    """FastAPI dependency for the registration defaults."""
    return RegistrationBootstrap.from_settings(get_settings())


def _build_employee_response(employee: Employee) -> EmployeeResponse:
    return EmployeeResponse(
        id=employee.id,
        name=employee.name,
        email=employee.email,
        role=Role(employee.role),
        grade_id=employee.grade_id,
        manager_id=employee.manager_id,
        created_at=employee.created_at,
    )


async def get_employee_or_404(session: AsyncSession, employee_id: uuid.UUID) -> Employee:
    employee = await session.get(Employee, employee_id)
    if employee is None:
        raise AppError(ErrorKind.EMPLOYEE_NOT_FOUND)
    return employee


async def get_employee(session: AsyncSession, employee_id: uuid.UUID) -> EmployeeResponse:
    """Get a single employee."""
    return _build_employee_response(await get_employee_or_404(session, employee_id))


async def register_employee(
    session: AsyncSession,
    auth: AuthContext,
    payload: RegisterEmployeeRequest,
    bootstrap: RegistrationBootstrap,
) -> EmployeeResponse:
    """Register an employee and provision their wallets.

    Flow:
    1. Normalize and require the email
    2. Reject a duplicate email
    3. Resolve the grade and the manager (explicit or role default)
    4. Insert the employee
    5. Initialize the three wallets from the grade (admins hold none)
    6. Audit log and commit
    """
    email = payload.email.strip().lower()
    if not email:
        raise AppError(ErrorKind.EMAIL_REQUIRED)

    async with transaction(session):
        existing = await session.execute(select(Employee).where(col(Employee.email) == email))
        if existing.scalar_one_or_none() is not None:
            raise AppError(ErrorKind.EMAIL_ALREADY_REGISTERED)

        await get_grade(session, payload.grade_id)

        manager_id = payload.manager_id or bootstrap.manager_for(payload.role)
        if manager_id is not None and await session.get(Employee, manager_id) is None:
            raise AppError(ErrorKind.EMPLOYEE_NOT_FOUND, "Manager not found")

        employee = Employee(
            name=payload.name,
            email=email,
            role=payload.role.value,
            grade_id=payload.grade_id,
            manager_id=manager_id,
        )
        session.add(employee)
        try:
            await session.flush()
        except IntegrityError:
            raise AppError(ErrorKind.EMAIL_ALREADY_REGISTERED) from None

        if payload.role != Role.ADMIN:
            await initialize_wallets(session, employee.id, employee.grade_id)

        await write_audit_log(
            session,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.EMPLOYEE,
            entity_id=employee.id,
            action=AuditAction.CREATE,
            after_json=model_to_audit_dict(employee),
        )

    logger.info("Registered %s %s", employee.role, employee.id)
    return _build_employee_response(employee)
