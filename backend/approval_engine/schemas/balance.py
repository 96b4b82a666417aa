# ruff: noqa: TC003
from __future__ import annotations

import uuid
from decimal import Decimal

from pydantic import BaseModel

from approval_engine.models.enums import RequestType


class WalletBalance(BaseModel):
    """Balance of one wallet: days for leave, amount for expense, percent for discount."""

    kind: RequestType
    total_allocated: Decimal
    remaining: Decimal
    used: Decimal


class EmployeeBalancesResponse(BaseModel):
    """All wallets of one employee."""

    employee_id: uuid.UUID
    items: list[WalletBalance]
