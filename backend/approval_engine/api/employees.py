# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status

from approval_engine.api.deps import AdminDep, AuthDep
from approval_engine.db import SessionDep
from approval_engine.schemas.balance import EmployeeBalancesResponse
from approval_engine.schemas.employee import EmployeeResponse, RegisterEmployeeRequest
from approval_engine.services import balance as balance_service
from approval_engine.services import employee as employee_service
from approval_engine.services.employee import RegistrationBootstrap, get_registration_bootstrap

employees_router = APIRouter(prefix="/employees", tags=["employees"])


@employees_router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def register_employee(
    payload: RegisterEmployeeRequest,
    session: SessionDep,
    auth: AdminDep,
    bootstrap: RegistrationBootstrap = Depends(get_registration_bootstrap),
) -> EmployeeResponse:
    """Register an employee and provision their wallets (admin only)."""
    return await employee_service.register_employee(session, auth, payload, bootstrap)


@employees_router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> EmployeeResponse:
    """Get a single employee."""
    return await employee_service.get_employee(session, employee_id)


@employees_router.get("/{employee_id}/balances", response_model=EmployeeBalancesResponse)
async def get_employee_balances(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> EmployeeBalancesResponse:
    """Get the total and remaining balance of each of an employee's wallets."""
    return await balance_service.get_employee_balances(session, employee_id)
