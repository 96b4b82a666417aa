# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, status

from approval_engine.api.deps import AuthDep
from approval_engine.db import SessionDep
from approval_engine.schemas.request import (
    DecisionPayload,
    DiscountSubmitPayload,
    ExpenseSubmitPayload,
    LeaveSubmitPayload,
    RequestResponse,
    SubmitResponse,
)
from approval_engine.services import request as request_service

requests_router = APIRouter(prefix="/requests", tags=["requests"])


@requests_router.post("/leave", response_model=SubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_leave(
    payload: LeaveSubmitPayload,
    session: SessionDep,
    auth: AuthDep,
) -> SubmitResponse:
    """Submit a leave request for the caller."""
    return await request_service.submit_request(session, auth, payload)


@requests_router.post("/expense", response_model=SubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_expense(
    payload: ExpenseSubmitPayload,
    session: SessionDep,
    auth: AuthDep,
) -> SubmitResponse:
    """Submit an expense reimbursement for the caller."""
    return await request_service.submit_request(session, auth, payload)


@requests_router.post("/discount", response_model=SubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_discount(
    payload: DiscountSubmitPayload,
    session: SessionDep,
    auth: AuthDep,
) -> SubmitResponse:
    """Submit a discount request for the caller."""
    return await request_service.submit_request(session, auth, payload)


@requests_router.get("/{request_id}", response_model=RequestResponse)
async def get_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> RequestResponse:
    """Get a single request."""
    return await request_service.get_request(session, request_id)


@requests_router.post("/{request_id}/cancel", response_model=RequestResponse)
async def cancel_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> RequestResponse:
    """Cancel one's own pending or auto-approved request."""
    return await request_service.cancel_request(session, auth, request_id)


@requests_router.post("/{request_id}/approve", response_model=RequestResponse)
async def approve_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    payload: DecisionPayload | None = None,
) -> RequestResponse:
    """Approve a pending request (managers and admins)."""
    return await request_service.approve_request(session, auth, request_id, payload.comment if payload else None)


@requests_router.post("/{request_id}/reject", response_model=RequestResponse)
async def reject_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    payload: DecisionPayload | None = None,
) -> RequestResponse:
    """Reject a pending request (managers and admins)."""
    return await request_service.reject_request(session, auth, request_id, payload.comment if payload else None)
