from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import extract, func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from approval_engine.db import transaction
from approval_engine.exceptions import AppError, ErrorKind
from approval_engine.models.enums import AuditAction, AuditEntityType
from approval_engine.models.holiday import Holiday
from approval_engine.schemas.holiday import HolidayListResponse, HolidayResponse
from approval_engine.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    import uuid
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

    from approval_engine.schemas.auth import AuthContext
    from approval_engine.schemas.holiday import CreateHolidayRequest


def _build_holiday_response(holiday: Holiday) -> HolidayResponse:
    return HolidayResponse(
        id=holiday.id,
        date=holiday.date,
        description=holiday.description,
        created_by=holiday.created_by,
    )


async def create_holiday(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateHolidayRequest,
) -> HolidayResponse:
    """Create a holiday. One holiday per date."""
    async with transaction(session):
        existing = await session.execute(select(Holiday).where(col(Holiday.date) == payload.date))
        if existing.scalar_one_or_none() is not None:
            raise AppError(ErrorKind.HOLIDAY_EXISTS)

        holiday = Holiday(date=payload.date, description=payload.description, created_by=auth.user_id)
        session.add(holiday)
        try:
            await session.flush()
        except IntegrityError:
            raise AppError(ErrorKind.HOLIDAY_EXISTS) from None

        await write_audit_log(
            session,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.HOLIDAY,
            entity_id=holiday.id,
            action=AuditAction.CREATE,
            after_json=model_to_audit_dict(holiday),
        )

    return _build_holiday_response(holiday)


async def list_holidays(session: AsyncSession, year: int | None = None) -> HolidayListResponse:
    """List holidays ordered by date, optionally for one year."""
    base_filter = []
    if year is not None:
        base_filter.append(extract("year", col(Holiday.date)) == year)

    count_result = await session.execute(select(func.count()).select_from(Holiday).where(*base_filter))
    total = count_result.scalar_one()

    result = await session.execute(select(Holiday).where(*base_filter).order_by(col(Holiday.date)))
    holidays = list(result.scalars().all())

    return HolidayListResponse(items=[_build_holiday_response(h) for h in holidays], total=total)


async def delete_holiday(session: AsyncSession, auth: AuthContext, holiday_id: uuid.UUID) -> None:
    """Delete a holiday."""
    async with transaction(session):
        holiday = await session.get(Holiday, holiday_id)
        if holiday is None:
            raise AppError(ErrorKind.HOLIDAY_NOT_FOUND)

        await write_audit_log(
            session,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.HOLIDAY,
            entity_id=holiday.id,
            action=AuditAction.DELETE,
            before_json=model_to_audit_dict(holiday),
        )
        await session.delete(holiday)


async def fetch_holiday_dates(session: AsyncSession, start: date, end: date) -> set[date]:
    """Return every holiday date in ``[start, end]``."""
    result = await session.execute(
        select(col(Holiday.date)).where(col(Holiday.date) >= start, col(Holiday.date) <= end)
    )
    return set(result.scalars().all())
