from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from approval_engine.db import get_session, get_session_factory
from approval_engine.main import app
from approval_engine.models import Employee, Role, SQLModel

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine

ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
ADMIN_HEADERS = {"X-User-Id": str(ADMIN_ID), "X-Role": "ADMIN"}


def headers_for(user_id: uuid.UUID | str, role: str = "EMPLOYEE") -> dict[str, str]:
    return {"X-User-Id": str(user_id), "X-Role": role}


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """Create a fresh SQLite database file per test.

    Every transaction starts with BEGIN IMMEDIATE, so concurrent writers
    serialize the way row locks make them serialize on PostgreSQL.
    """
    _engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    @event.listens_for(_engine.sync_engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection: Any, _record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(_engine.sync_engine, "begin")
    def _begin_immediate(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def async_client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncClient]:
    """Async HTTP client whose sessions come from the per-test database."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _override_get_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


class World:
    """A grade with rules for every request type, a registered admin, and one manager with two employees."""

    def __init__(self, grade: dict, manager: dict, employee: dict, peer: dict) -> None:
        self.grade_id = grade["id"]
        self.manager_id = manager["id"]
        self.employee_id = employee["id"]
        self.peer_id = peer["id"]

    @property
    def employee_headers(self) -> dict[str, str]:
        return headers_for(self.employee_id)

    @property
    def manager_headers(self) -> dict[str, str]:
        return headers_for(self.manager_id, "MANAGER")


GRADE_PAYLOAD = {
    "name": "G1",
    "annual_leave_limit": 10,
    "annual_expense_limit": "1000.00",
    "discount_limit_percent": "20.00",
}

RULE_CONDITIONS = {
    "LEAVE": {"max_days": 5},
    "EXPENSE": {"max_amount": 100},
    "DISCOUNT": {"max_percent": 5},
}


async def _post(client: AsyncClient, url: str, json: dict) -> dict:
    resp = await client.post(url, json=json, headers=ADMIN_HEADERS)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
async def world(async_client: AsyncClient, session_factory: async_sessionmaker[AsyncSession]) -> World:
    grade = await _post(async_client, "/grades", GRADE_PAYLOAD)
    async with session_factory() as session:
        session.add(
            Employee(
                id=ADMIN_ID,
                name="Root",
                email="admin@example.com",
                role=Role.ADMIN,
                grade_id=uuid.UUID(grade["id"]),
            )
        )
        await session.commit()
    for request_type, condition in RULE_CONDITIONS.items():
        await _post(
            async_client,
            "/rules",
            {"request_type": request_type, "grade_id": grade["id"], "condition": condition},
        )
    manager = await _post(
        async_client,
        "/employees",
        {"name": "Maya", "email": "maya@example.com", "role": "MANAGER", "grade_id": grade["id"]},
    )
    employee = await _post(
        async_client,
        "/employees",
        {"name": "Eli", "email": "eli@example.com", "grade_id": grade["id"], "manager_id": manager["id"]},
    )
    peer = await _post(
        async_client,
        "/employees",
        {"name": "Ava", "email": "ava@example.com", "grade_id": grade["id"], "manager_id": manager["id"]},
    )
    return World(grade, manager, employee, peer)
