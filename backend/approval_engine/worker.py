"""Worker process for the scheduled auto-reject sweep.

Runs an asyncio loop that rejects stale PENDING requests once per
``auto_reject_interval_seconds`` (daily by default).

Run with:  python -m approval_engine.worker
"""

from __future__ import annotations

import asyncio
import logging

from approval_engine.config import get_settings
from approval_engine.db import dispose_engine, get_session_factory
from approval_engine.services.auto_reject import run_auto_reject

logger = logging.getLogger(__name__)


async def run_auto_reject_loop() -> None:
    """Main worker loop that runs the auto-reject sweep on a fixed interval."""
    settings = get_settings()
    logger.info(
        "Auto-reject worker started: threshold=%d working days, interval=%ds",
        settings.auto_reject_working_days,
        settings.auto_reject_interval_seconds,
    )
    session_factory = get_session_factory()

    try:
        while True:
            try:
                await run_auto_reject(session_factory)
            except Exception:
                logger.exception("Auto-reject sweep failed")

            await asyncio.sleep(settings.auto_reject_interval_seconds)
    finally:
        await dispose_engine()


def main() -> None:
    """Entry point for the worker process."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    asyncio.run(run_auto_reject_loop())


if __name__ == "__main__":
    main()
