from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from approval_engine.models.enums import RequestStatus, RequestType

logger = logging.getLogger(__name__)

# Condition key holding the auto-approval threshold for each request type.
THRESHOLD_KEYS: dict[RequestType, str] = {
    RequestType.LEAVE: "max_days",
    RequestType.EXPENSE: "max_amount",
    RequestType.DISCOUNT: "max_percent",
}


@dataclass(frozen=True)
class Decision:
    """Verdict of the decision engine for one submission."""

    status: RequestStatus
    message: str


def as_threshold(value: Any) -> Decimal | None:
    """Return ``value`` as a finite Decimal, or None when it is not a number.

    Strings and booleans are not numbers here, even when they look like one.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    return number


def threshold_key(request_type: str) -> str | None:
    try:
        return THRESHOLD_KEYS[RequestType(request_type)]
    except ValueError:
        return None


def decide(request_type: str, condition: Mapping[str, Any] | None, magnitude: Decimal) -> Decision:
    """Decide whether a request is auto-approved under a rule condition.

    The request is auto-approved when the condition carries a numeric
    threshold for its type and the magnitude does not exceed it. A missing or
    malformed threshold, or an unknown request type, routes the request to a
    human approver, as does a magnitude that is not a finite number. Never
    raises.
    """
    pending = Decision(RequestStatus.PENDING, f"{request_type} submitted for approval")

    key = threshold_key(request_type)
    if key is None or not isinstance(condition, Mapping) or not condition:
        return pending

    amount = as_threshold(magnitude)
    if amount is None:
        return pending

    threshold = as_threshold(condition.get(key))
    if threshold is None:
        logger.info("Rule condition for %s has no usable %s, routing to approver", request_type, key)
        return pending

    if amount > threshold:
        return pending

    return Decision(RequestStatus.AUTO_APPROVED, f"{request_type} approved by system")
