from __future__ import annotations

from pydantic import BaseModel


class SweepResponse(BaseModel):
    """Counts reported by one auto-reject sweep."""

    scanned: int
    rejected: int
    skipped: int
    errors: int
