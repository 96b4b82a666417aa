from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from approval_engine.exceptions import AppError, ErrorKind
from approval_engine.models.balance import BalanceWallet
from approval_engine.models.base import now_utc
from approval_engine.models.employee import Employee
from approval_engine.models.enums import RequestType
from approval_engine.models.grade import Grade
from approval_engine.schemas.balance import EmployeeBalancesResponse, WalletBalance

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

# Display order of wallets in balance snapshots.
_KIND_ORDER = [RequestType.LEAVE, RequestType.EXPENSE, RequestType.DISCOUNT]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _grade_limits(grade: Grade) -> dict[RequestType, Decimal]:
    """Wallet allocation per kind for a grade."""
    return {
        RequestType.LEAVE: Decimal(grade.annual_leave_limit),
        RequestType.EXPENSE: Decimal(grade.annual_expense_limit),
        RequestType.DISCOUNT: Decimal(grade.discount_limit_percent),
    }


async def _get_wallet(
    session: AsyncSession,
    kind: RequestType,
    employee_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> BalanceWallet:
    query = select(BalanceWallet).where(
        col(BalanceWallet.employee_id) == employee_id,
        col(BalanceWallet.kind) == kind.value,
    )
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)

    result = await session.execute(query)
    wallet = result.scalar_one_or_none()
    if wallet is None:
        raise AppError(ErrorKind.BALANCE_MISSING, f"{kind.value} balance not found")
    return wallet


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def get_remaining(session: AsyncSession, kind: RequestType, employee_id: uuid.UUID) -> Decimal:
    """Return the remaining balance of one wallet."""
    wallet = await _get_wallet(session, kind, employee_id)
    return wallet.remaining


async def get_full(
    session: AsyncSession,
    kind: RequestType,
    employee_id: uuid.UUID,
) -> tuple[Decimal, Decimal]:
    """Return ``(total_allocated, remaining)`` of one wallet."""
    wallet = await _get_wallet(session, kind, employee_id)
    return wallet.total_allocated, wallet.remaining


async def get_wallet_for_update(
    session: AsyncSession,
    kind: RequestType,
    employee_id: uuid.UUID,
) -> BalanceWallet:
    """Get a wallet with a FOR UPDATE lock held until the caller's transaction ends."""
    return await _get_wallet(session, kind, employee_id, for_update=True)


async def get_employee_balances(session: AsyncSession, employee_id: uuid.UUID) -> EmployeeBalancesResponse:
    """Balance snapshot of every wallet an employee holds."""
    if await session.get(Employee, employee_id) is None:
        raise AppError(ErrorKind.EMPLOYEE_NOT_FOUND)

    result = await session.execute(select(BalanceWallet).where(col(BalanceWallet.employee_id) == employee_id))
    wallets = {RequestType(w.kind): w for w in result.scalars().all()}

    items = [
        WalletBalance(
            kind=kind,
            total_allocated=wallets[kind].total_allocated,
            remaining=wallets[kind].remaining,
            used=wallets[kind].total_allocated - wallets[kind].remaining,
        )
        for kind in _KIND_ORDER
        if kind in wallets
    ]
    return EmployeeBalancesResponse(employee_id=employee_id, items=items)


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------


async def deduct(
    session: AsyncSession,
    kind: RequestType,
    employee_id: uuid.UUID,
    amount: Decimal,
) -> BalanceWallet:
    """Subtract ``amount`` from a wallet. The caller has already checked sufficiency."""
    wallet = await get_wallet_for_update(session, kind, employee_id)
    wallet.remaining -= amount
    wallet.version += 1
    wallet.updated_at = now_utc()
    await session.flush()
    logger.info("Deducted %s from %s wallet of %s, remaining %s", amount, kind.value, employee_id, wallet.remaining)
    return wallet


async def restore(
    session: AsyncSession,
    kind: RequestType,
    employee_id: uuid.UUID,
    amount: Decimal,
) -> BalanceWallet:
    """Give ``amount`` back to a wallet after a previously deducted request is withdrawn."""
    wallet = await get_wallet_for_update(session, kind, employee_id)
    wallet.remaining += amount
    wallet.version += 1
    wallet.updated_at = now_utc()
    await session.flush()
    logger.info("Restored %s to %s wallet of %s, remaining %s", amount, kind.value, employee_id, wallet.remaining)
    return wallet


async def initialize_wallets(
    session: AsyncSession,
    employee_id: uuid.UUID,
    grade_id: uuid.UUID,
) -> list[BalanceWallet]:
    """Create the three wallets of an employee from their grade's limits.

    Wallets that already exist are left untouched.
    """
    grade = await session.get(Grade, grade_id)
    if grade is None:
        raise AppError(ErrorKind.GRADE_NOT_FOUND)

    result = await session.execute(select(BalanceWallet).where(col(BalanceWallet.employee_id) == employee_id))
    existing = {w.kind: w for w in result.scalars().all()}

    wallets: list[BalanceWallet] = []
    for kind, limit in _grade_limits(grade).items():
        wallet = existing.get(kind.value)
        if wallet is None:
            wallet = BalanceWallet(
                employee_id=employee_id,
                kind=kind.value,
                total_allocated=limit,
                remaining=limit,
            )
            session.add(wallet)
        wallets.append(wallet)

    await session.flush()
    return wallets
