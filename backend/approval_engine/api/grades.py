# ruff: noqa: TC001, TC003
from __future__ import annotations

from fastapi import APIRouter, status

from approval_engine.api.deps import AdminDep
from approval_engine.db import SessionDep
from approval_engine.schemas.grade import CreateGradeRequest, GradeListResponse, GradeResponse
from approval_engine.services import grade as grade_service

grades_router = APIRouter(prefix="/grades", tags=["grades"])


@grades_router.post("", response_model=GradeResponse, status_code=status.HTTP_201_CREATED)
async def create_grade(
    payload: CreateGradeRequest,
    session: SessionDep,
    auth: AdminDep,
) -> GradeResponse:
    """Create a grade (admin only)."""
    return await grade_service.create_grade(session, auth, payload)


@grades_router.get("", response_model=GradeListResponse)
async def list_grades(
    session: SessionDep,
    auth: AdminDep,
) -> GradeListResponse:
    """List grades (admin only)."""
    return await grade_service.list_grades(session)
