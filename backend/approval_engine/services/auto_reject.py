"""Auto-reject sweep: times out requests left PENDING for too many working days."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from approval_engine.config import get_settings
from approval_engine.db import transaction
from approval_engine.models.base import ensure_utc, now_utc
from approval_engine.models.enums import AuditAction, AuditEntityType, RequestStatus, RequestType
from approval_engine.models.request import ApprovalRequest
from approval_engine.services.audit import model_to_audit_dict, write_audit_log
from approval_engine.services.holiday import fetch_holiday_dates
from approval_engine.services.request import get_request_for_update
from approval_engine.services.working_days import count_working_days

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    """Summary of one auto-reject sweep."""

    scanned: int = 0
    rejected: int = 0
    skipped: int = 0
    errors: int = 0


def auto_reject_comment(working_days: int) -> str:
    return f"Auto rejected after {working_days} working days"


async def _load_pending(session: AsyncSession, kind: RequestType) -> list[ApprovalRequest]:
    result = await session.execute(
        select(ApprovalRequest)
        .where(
            col(ApprovalRequest.kind) == kind.value,
            col(ApprovalRequest.status) == RequestStatus.PENDING.value,
        )
        .order_by(col(ApprovalRequest.created_at))
    )
    return list(result.scalars().all())


async def _reject_one(
    session_factory: async_sessionmaker[AsyncSession],
    request_id: uuid.UUID,
    comment: str,
    now: datetime,
) -> bool:
    """Auto-reject one request in its own transaction.

    Returns False when the request stopped being PENDING since it was scanned.
    """
    async with session_factory() as session, transaction(session):
        request = await get_request_for_update(session, request_id)
        if request is None or request.status != RequestStatus.PENDING.value:
            return False

        before_dict = model_to_audit_dict(request)
        request.status = RequestStatus.AUTO_REJECTED.value
        request.approval_comment = comment
        request.decided_at = now
        await session.flush()

        await write_audit_log(
            session,
            actor_id=None,
            entity_type=AuditEntityType.REQUEST,
            entity_id=request.id,
            action=AuditAction.AUTO_REJECT,
            before_json=before_dict,
            after_json=model_to_audit_dict(request),
        )
    return True


async def run_auto_reject(
    session_factory: async_sessionmaker[AsyncSession],
    now: datetime | None = None,
    working_days: int | None = None,
) -> SweepResult:
    """Auto-reject every request that has been PENDING for ``working_days`` working days.

    Age is counted from the creation date to ``now`` inclusive, skipping
    weekends and holidays. Each stale request is re-checked and rejected in
    its own transaction, so one failure does not stop the sweep.
    """
    now = ensure_utc(now) if now is not None else now_utc()
    threshold = working_days if working_days is not None else get_settings().auto_reject_working_days
    comment = auto_reject_comment(threshold)
    result = SweepResult()

    for kind in RequestType:
        async with session_factory() as session:
            pending = await _load_pending(session, kind)
            if not pending:
                continue
            oldest = min(ensure_utc(r.created_at).date() for r in pending)
            holidays = await fetch_holiday_dates(session, oldest, now.date())

        for request in pending:
            result.scanned += 1
            elapsed = count_working_days(ensure_utc(request.created_at), now, holidays.__contains__)
            if elapsed < threshold:
                continue

            try:
                rejected = await _reject_one(session_factory, request.id, comment, now)
            except Exception:
                logger.exception("Auto-reject failed for %s request %s", kind, request.id)
                result.errors += 1
                continue

            if rejected:
                result.rejected += 1
                logger.info("Auto-rejected %s request %s after %d working days", kind, request.id, elapsed)
            else:
                result.skipped += 1

    logger.info(
        "Auto-reject sweep complete: scanned=%d rejected=%d skipped=%d errors=%d",
        result.scanned,
        result.rejected,
        result.skipped,
        result.errors,
    )
    return result
