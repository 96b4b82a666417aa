from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from approval_engine.db import transaction
from approval_engine.exceptions import AppError, ErrorKind
from approval_engine.models.enums import AuditAction, AuditEntityType
from approval_engine.models.grade import Grade
from approval_engine.schemas.grade import GradeListResponse, GradeResponse
from approval_engine.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from approval_engine.schemas.auth import AuthContext
    from approval_engine.schemas.grade import CreateGradeRequest


def _build_grade_response(grade: Grade) -> GradeResponse:
    return GradeResponse(
        id=grade.id,
        name=grade.name,
        annual_leave_limit=grade.annual_leave_limit,
        annual_expense_limit=grade.annual_expense_limit,
        discount_limit_percent=grade.discount_limit_percent,
    )


async def create_grade(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateGradeRequest,
) -> GradeResponse:
    """Create a grade. Grade names are unique."""
    async with transaction(session):
        existing = await session.execute(select(Grade).where(col(Grade.name) == payload.name))
        if existing.scalar_one_or_none() is not None:
            raise AppError(ErrorKind.GRADE_EXISTS)

        grade = Grade(
            name=payload.name,
            annual_leave_limit=payload.annual_leave_limit,
            annual_expense_limit=payload.annual_expense_limit,
            discount_limit_percent=payload.discount_limit_percent,
        )
        session.add(grade)
        try:
            await session.flush()
        except IntegrityError:
            raise AppError(ErrorKind.GRADE_EXISTS) from None

        await write_audit_log(
            session,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.GRADE,
            entity_id=grade.id,
            action=AuditAction.CREATE,
            after_json=model_to_audit_dict(grade),
        )

    return _build_grade_response(grade)


async def list_grades(session: AsyncSession) -> GradeListResponse:
    count_result = await session.execute(select(func.count()).select_from(Grade))
    result = await session.execute(select(Grade).order_by(col(Grade.name)))
    return GradeListResponse(
        items=[_build_grade_response(g) for g in result.scalars().all()],
        total=count_result.scalar_one(),
    )


async def get_grade(session: AsyncSession, grade_id: uuid.UUID) -> Grade:
    """Get a grade or raise GRADE_NOT_FOUND."""
    grade = await session.get(Grade, grade_id)
    if grade is None:
        raise AppError(ErrorKind.GRADE_NOT_FOUND)
    return grade
