from sqlmodel import SQLModel

from approval_engine.models.audit import AuditLog
from approval_engine.models.balance import BalanceWallet
from approval_engine.models.base import TimestampMixin, UUIDBase
from approval_engine.models.employee import Employee
from approval_engine.models.enums import (
    AuditAction,
    AuditEntityType,
    RequestStatus,
    RequestType,
    Role,
    RuleAction,
)
from approval_engine.models.grade import Grade
from approval_engine.models.holiday import Holiday
from approval_engine.models.request import ApprovalRequest
from approval_engine.models.rule import ApprovalRule

__all__ = [
    "ApprovalRequest",
    "ApprovalRule",
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "BalanceWallet",
    "Employee",
    "Grade",
    "Holiday",
    "RequestStatus",
    "RequestType",
    "Role",
    "RuleAction",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
]
