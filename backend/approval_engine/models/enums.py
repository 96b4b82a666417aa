from __future__ import annotations

import enum


class RequestType(enum.StrEnum):
    """Kind of employee request. Each kind draws on its own wallet."""

    LEAVE = "LEAVE"
    EXPENSE = "EXPENSE"
    DISCOUNT = "DISCOUNT"


class RequestStatus(enum.StrEnum):
    """State machine for approval requests."""

    PENDING = "PENDING"
    AUTO_APPROVED = "AUTO_APPROVED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    AUTO_REJECTED = "AUTO_REJECTED"
    CANCELLED = "CANCELLED"


class Role(enum.StrEnum):
    """Fixed three-step approval ladder."""

    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


class RuleAction(enum.StrEnum):
    """What a rule does when the request is within its threshold."""

    AUTO_APPROVE = "AUTO_APPROVE"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    REQUEST = "REQUEST"
    RULE = "RULE"
    GRADE = "GRADE"
    HOLIDAY = "HOLIDAY"
    EMPLOYEE = "EMPLOYEE"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    CANCEL = "CANCEL"
    AUTO_REJECT = "AUTO_REJECT"
