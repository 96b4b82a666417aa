from __future__ import annotations

from approval_engine.exceptions import AppError, ErrorKind
from approval_engine.models.enums import Role


def validate_approver_role(approver_role: str, requester_role: str) -> None:
    """Raise unless ``approver_role`` may decide a request raised by ``requester_role``.

    Admins decide for everyone, managers only for employees, employees for
    nobody. Self-approval is checked separately by the caller.
    """
    if approver_role == Role.EMPLOYEE:
        raise AppError(ErrorKind.EMPLOYEE_CANNOT_APPROVE)

    if approver_role == Role.ADMIN:
        return

    if approver_role == Role.MANAGER:
        if requester_role == Role.EMPLOYEE:
            return
        if requester_role == Role.MANAGER:
            raise AppError(ErrorKind.MANAGER_NEEDS_ADMIN)
        if requester_role == Role.ADMIN:
            raise AppError(ErrorKind.ADMIN_REQUEST_NOT_ALLOWED)

    raise AppError(ErrorKind.UNAUTHORIZED_APPROVAL)
