# ruff: noqa: TC001
from __future__ import annotations

from fastapi import APIRouter

from approval_engine.api.deps import AdminDep
from approval_engine.db import SessionFactoryDep
from approval_engine.schemas.system import SweepResponse
from approval_engine.services.auto_reject import run_auto_reject

system_router = APIRouter(prefix="/system", tags=["system"])


@system_router.post("/auto-reject", response_model=SweepResponse)
async def trigger_auto_reject(
    session_factory: SessionFactoryDep,
    auth: AdminDep,
) -> SweepResponse:
    """Run one auto-reject sweep now (admin only)."""
    result = await run_auto_reject(session_factory)
    return SweepResponse(
        scanned=result.scanned,
        rejected=result.rejected,
        skipped=result.skipped,
        errors=result.errors,
    )
