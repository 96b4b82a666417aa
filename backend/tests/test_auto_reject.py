"""Tests for the auto-reject sweep."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select, update
from sqlmodel import col

from approval_engine.exceptions import AppError, ErrorKind
from approval_engine.models.audit import AuditLog
from approval_engine.models.holiday import Holiday
from approval_engine.models.request import ApprovalRequest
from approval_engine.services import auto_reject
from approval_engine.services.auto_reject import run_auto_reject

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from tests.conftest import World


ADMIN_HEADERS = {"X-User-Id": "00000000-0000-0000-0000-000000000001", "X-Role": "ADMIN"}

# Monday 2 January 2023 to Tuesday 10 January 2023 spans exactly 7 working days.
CREATED = datetime(2023, 1, 2, 9, 0, tzinfo=UTC)
SWEEP_AT = datetime(2023, 1, 10, 18, 0, tzinfo=UTC)


async def _pending_discount(client: AsyncClient, world: World, percent: str = "10") -> str:
    resp = await client.post("/requests/discount", json={"percent": percent}, headers=world.employee_headers)
    assert resp.json()["status"] == "PENDING"
    return resp.json()["request"]["id"]


async def _backdate(session_factory: async_sessionmaker[AsyncSession], request_id: str, created_at: datetime) -> None:
    async with session_factory() as session:
        await session.execute(
            update(ApprovalRequest)
            .where(col(ApprovalRequest.id) == uuid.UUID(request_id))
            .values(created_at=created_at)
        )
        await session.commit()


async def _status(client: AsyncClient, request_id: str) -> dict:
    resp = await client.get(f"/requests/{request_id}", headers=ADMIN_HEADERS)
    return resp.json()


async def test_stale_request_is_auto_rejected(
    async_client: AsyncClient,
    world: World,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    stale = await _pending_discount(async_client, world)
    fresh = await _pending_discount(async_client, world, "11")
    await _backdate(session_factory, stale, datetime.now(UTC) - timedelta(days=10))

    result = await run_auto_reject(session_factory)

    assert result.scanned == 2
    assert result.rejected == 1
    assert result.errors == 0

    rejected = await _status(async_client, stale)
    assert rejected["status"] == "AUTO_REJECTED"
    assert rejected["approval_comment"] == "Auto rejected after 7 working days"
    assert rejected["approver_id"] is None
    assert (await _status(async_client, fresh))["status"] == "PENDING"


async def test_threshold_is_inclusive(
    async_client: AsyncClient,
    world: World,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    request_id = await _pending_discount(async_client, world)
    await _backdate(session_factory, request_id, CREATED)

    early = await run_auto_reject(session_factory, now=SWEEP_AT - timedelta(days=1))
    assert early.rejected == 0

    on_time = await run_auto_reject(session_factory, now=SWEEP_AT)
    assert on_time.rejected == 1


async def test_holidays_do_not_count(
    async_client: AsyncClient,
    world: World,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    request_id = await _pending_discount(async_client, world)
    await _backdate(session_factory, request_id, CREATED)
    async with session_factory() as session:
        session.add(Holiday(date=date(2023, 1, 4), description="Office closure"))
        await session.commit()

    result = await run_auto_reject(session_factory, now=SWEEP_AT)
    assert result.rejected == 0
    assert (await _status(async_client, request_id))["status"] == "PENDING"


async def test_only_pending_requests_are_touched(
    async_client: AsyncClient,
    world: World,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    approved = (
        await async_client.post("/requests/discount", json={"percent": "2"}, headers=world.employee_headers)
    ).json()["request"]["id"]
    cancelled = await _pending_discount(async_client, world)
    await async_client.post(f"/requests/{cancelled}/cancel", headers=world.employee_headers)
    for request_id in (approved, cancelled):
        await _backdate(session_factory, request_id, CREATED)

    result = await run_auto_reject(session_factory, now=SWEEP_AT)
    assert result.scanned == 0
    assert (await _status(async_client, approved))["status"] == "AUTO_APPROVED"
    assert (await _status(async_client, cancelled))["status"] == "CANCELLED"


async def test_request_decided_since_scan_is_skipped(
    async_client: AsyncClient,
    world: World,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    request_id = await _pending_discount(async_client, world)
    await async_client.post(f"/requests/{request_id}/cancel", headers=world.employee_headers)

    changed = await auto_reject._reject_one(
        session_factory, uuid.UUID(request_id), auto_reject.auto_reject_comment(7), SWEEP_AT
    )
    assert changed is False
    assert (await _status(async_client, request_id))["status"] == "CANCELLED"


@pytest.mark.parametrize(
    "failure",
    [AppError(ErrorKind.DATABASE), ConnectionResetError("connection lost"), TypeError("not serializable")],
)
async def test_one_failure_does_not_stop_the_sweep(
    async_client: AsyncClient,
    world: World,
    session_factory: async_sessionmaker[AsyncSession],
    monkeypatch: pytest.MonkeyPatch,
    failure: Exception,
) -> None:
    broken = await _pending_discount(async_client, world)
    healthy = await _pending_discount(async_client, world, "12")
    for request_id in (broken, healthy):
        await _backdate(session_factory, request_id, CREATED)

    real_reject_one = auto_reject._reject_one

    async def _flaky(factory, request_id, comment, now):  # type: ignore[no-untyped-def]
        if str(request_id) == broken:
            raise failure
        return await real_reject_one(factory, request_id, comment, now)

    monkeypatch.setattr(auto_reject, "_reject_one", _flaky)

    result = await run_auto_reject(session_factory, now=SWEEP_AT)
    assert result.errors == 1
    assert result.rejected == 1
    assert (await _status(async_client, healthy))["status"] == "AUTO_REJECTED"
    assert (await _status(async_client, broken))["status"] == "PENDING"


async def test_driver_error_mid_transaction_rolls_back_only_that_request(
    async_client: AsyncClient,
    world: World,
    session_factory: async_sessionmaker[AsyncSession],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    broken = await _pending_discount(async_client, world)
    healthy = await _pending_discount(async_client, world, "12")
    for request_id in (broken, healthy):
        await _backdate(session_factory, request_id, CREATED)

    real_write_audit_log = auto_reject.write_audit_log

    async def _dropping_audit(session, **kwargs):  # type: ignore[no-untyped-def]
        if str(kwargs["entity_id"]) == broken:
            raise ConnectionResetError("connection lost")
        return await real_write_audit_log(session, **kwargs)

    monkeypatch.setattr(auto_reject, "write_audit_log", _dropping_audit)

    result = await run_auto_reject(session_factory, now=SWEEP_AT)
    assert result.scanned == 2
    assert result.errors == 1
    assert result.rejected == 1
    assert (await _status(async_client, healthy))["status"] == "AUTO_REJECTED"
    assert (await _status(async_client, broken))["status"] == "PENDING"


async def test_auto_reject_is_audited_as_system(
    async_client: AsyncClient,
    world: World,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    request_id = await _pending_discount(async_client, world)
    await _backdate(session_factory, request_id, CREATED)
    await run_auto_reject(session_factory, now=SWEEP_AT)

    async with session_factory() as session:
        result = await session.execute(
            select(AuditLog).where(
                col(AuditLog.entity_id) == uuid.UUID(request_id),
                col(AuditLog.action) == "AUTO_REJECT",
            )
        )
        entry = result.scalar_one()
    assert entry.actor_id is None
    assert entry.after_json["status"] == "AUTO_REJECTED"


async def test_custom_threshold(
    async_client: AsyncClient,
    world: World,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    request_id = await _pending_discount(async_client, world)
    await _backdate(session_factory, request_id, CREATED)

    result = await run_auto_reject(session_factory, now=SWEEP_AT, working_days=3)
    assert result.rejected == 1
    assert (await _status(async_client, request_id))["approval_comment"] == "Auto rejected after 3 working days"


# ---------------------------------------------------------------------------
# API trigger
# ---------------------------------------------------------------------------


async def test_trigger_endpoint(
    async_client: AsyncClient,
    world: World,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    request_id = await _pending_discount(async_client, world)
    await _backdate(session_factory, request_id, datetime.now(UTC) - timedelta(days=14))

    resp = await async_client.post("/system/auto-reject", headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    assert resp.json() == {"scanned": 1, "rejected": 1, "skipped": 0, "errors": 0}


async def test_trigger_endpoint_requires_admin(async_client: AsyncClient, world: World) -> None:
    resp = await async_client.post("/system/auto-reject", headers=world.manager_headers)
    assert resp.status_code == 403
    assert resp.json()["error"] == "ADMIN_ONLY"
