"""Tests for the transaction helper and the error envelope."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import func, select

from approval_engine.db import transaction
from approval_engine.exceptions import AppError, ErrorCategory, ErrorKind, status_code_for
from approval_engine.models.grade import Grade

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


def _grade(name: str) -> Grade:
    return Grade(
        name=name,
        annual_leave_limit=1,
        annual_expense_limit=Decimal(1),
        discount_limit_percent=Decimal(1),
    )


async def _grade_count(session_factory: async_sessionmaker[AsyncSession]) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(Grade))).scalar_one()


async def test_commits_on_clean_exit(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory() as session, transaction(session):
        session.add(_grade("kept"))
    assert await _grade_count(session_factory) == 1


async def test_rolls_back_on_app_error(session_factory: async_sessionmaker[AsyncSession]) -> None:
    with pytest.raises(AppError) as exc_info:
        async with session_factory() as session, transaction(session):
            session.add(_grade("dropped"))
            await session.flush()
            raise AppError(ErrorKind.LIMIT_EXCEEDED)
    assert exc_info.value.kind == ErrorKind.LIMIT_EXCEEDED
    assert await _grade_count(session_factory) == 0


async def test_database_failure_becomes_retryable_error(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory() as session, transaction(session):
        session.add(_grade("taken"))

    with pytest.raises(AppError) as exc_info:
        async with session_factory() as session, transaction(session):
            session.add(_grade("taken"))
    assert exc_info.value.kind == ErrorKind.DATABASE
    assert exc_info.value.category == ErrorCategory.INFRASTRUCTURE
    assert status_code_for(exc_info.value) == 503
    assert await _grade_count(session_factory) == 1


async def test_rolls_back_on_other_exceptions(session_factory: async_sessionmaker[AsyncSession]) -> None:
    with pytest.raises(RuntimeError):
        async with session_factory() as session, transaction(session):
            session.add(_grade(f"g-{uuid.uuid4().hex}"))
            await session.flush()
            raise RuntimeError("boom")
    assert await _grade_count(session_factory) == 0


@pytest.mark.parametrize(
    ("kind", "status_code"),
    [
        (ErrorKind.INVALID_AMOUNT, 400),
        (ErrorKind.LIMIT_EXCEEDED, 400),
        (ErrorKind.NOT_PENDING, 409),
        (ErrorKind.SELF_APPROVAL_NOT_ALLOWED, 403),
        (ErrorKind.REQUEST_NOT_FOUND, 404),
        (ErrorKind.DATABASE, 503),
    ],
)
def test_status_mapping(kind: ErrorKind, status_code: int) -> None:
    assert status_code_for(AppError(kind)) == status_code


def test_every_kind_has_a_default_message() -> None:
    for kind in ErrorKind:
        assert AppError(kind).message


def test_custom_message_overrides_default() -> None:
    assert AppError(ErrorKind.BALANCE_MISSING, "LEAVE balance not found").message == "LEAVE balance not found"
