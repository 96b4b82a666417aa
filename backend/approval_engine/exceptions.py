from __future__ import annotations

import enum

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int


class ErrorCategory(enum.StrEnum):
    """Coarse error family used by the HTTP boundary."""

    VALIDATION = "VALIDATION"
    BUSINESS = "BUSINESS"
    NOT_FOUND = "NOT_FOUND"
    INFRASTRUCTURE = "INFRASTRUCTURE"


class ErrorKind(enum.StrEnum):
    """Every failure the core can report."""

    # Validation: caller-fixable, raised before touching storage.
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_CATEGORY = "INVALID_CATEGORY"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    PAST_DATE = "PAST_DATE"
    COMMENT_REQUIRED = "COMMENT_REQUIRED"
    CONDITION_REQUIRED = "CONDITION_REQUIRED"
    ACTION_REQUIRED = "ACTION_REQUIRED"
    NEGATIVE_THRESHOLD = "NEGATIVE_THRESHOLD"
    EMAIL_REQUIRED = "EMAIL_REQUIRED"

    # Business rules: detected after at least one read.
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
    LEAVE_OVERLAP = "LEAVE_OVERLAP"
    RULE_NOT_CONFIGURED = "RULE_NOT_CONFIGURED"
    NOT_PENDING = "NOT_PENDING"
    CANNOT_CANCEL = "CANNOT_CANCEL"
    SELF_APPROVAL_NOT_ALLOWED = "SELF_APPROVAL_NOT_ALLOWED"
    EMPLOYEE_CANNOT_APPROVE = "EMPLOYEE_CANNOT_APPROVE"
    MANAGER_NEEDS_ADMIN = "MANAGER_NEEDS_ADMIN"
    ADMIN_REQUEST_NOT_ALLOWED = "ADMIN_REQUEST_NOT_ALLOWED"
    UNAUTHORIZED_APPROVAL = "UNAUTHORIZED_APPROVAL"
    RULE_EXCEEDS_GRADE_LIMIT = "RULE_EXCEEDS_GRADE_LIMIT"
    RULE_CONFLICT = "RULE_CONFLICT"
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"
    HOLIDAY_EXISTS = "HOLIDAY_EXISTS"
    GRADE_EXISTS = "GRADE_EXISTS"
    ADMIN_ONLY = "ADMIN_ONLY"

    # Integrity: missing rows are reported as not-found, never as crashes.
    BALANCE_MISSING = "BALANCE_MISSING"
    REQUEST_NOT_FOUND = "REQUEST_NOT_FOUND"
    EMPLOYEE_NOT_FOUND = "EMPLOYEE_NOT_FOUND"
    GRADE_NOT_FOUND = "GRADE_NOT_FOUND"
    RULE_NOT_FOUND = "RULE_NOT_FOUND"
    HOLIDAY_NOT_FOUND = "HOLIDAY_NOT_FOUND"

    # Infrastructure
    DATABASE = "DATABASE"


_V, _B, _N, _I = ErrorCategory.VALIDATION, ErrorCategory.BUSINESS, ErrorCategory.NOT_FOUND, ErrorCategory.INFRASTRUCTURE

_KIND_INFO: dict[ErrorKind, tuple[ErrorCategory, str]] = {
    ErrorKind.INVALID_AMOUNT: (_V, "Requested amount must be greater than zero"),
    ErrorKind.INVALID_CATEGORY: (_V, "Expense category is required"),
    ErrorKind.INVALID_DATE_RANGE: (_V, "From date cannot be after to date"),
    ErrorKind.PAST_DATE: (_V, "Leave cannot start in the past"),
    ErrorKind.COMMENT_REQUIRED: (_V, "A comment is required"),
    ErrorKind.CONDITION_REQUIRED: (_V, "Rule condition is required"),
    ErrorKind.ACTION_REQUIRED: (_V, "Rule action must be AUTO_APPROVE"),
    ErrorKind.NEGATIVE_THRESHOLD: (_V, "Rule thresholds cannot be negative"),
    ErrorKind.EMAIL_REQUIRED: (_V, "Email is required"),
    ErrorKind.LIMIT_EXCEEDED: (_B, "Balance exceeded"),
    ErrorKind.LEAVE_OVERLAP: (
        _B,
        "You already have a leave request for this date. Cancel the previous request before applying again",
    ),
    ErrorKind.RULE_NOT_CONFIGURED: (_B, "Approval rule not configured"),
    ErrorKind.NOT_PENDING: (_B, "Request is not pending"),
    ErrorKind.CANNOT_CANCEL: (_B, "Request can no longer be cancelled"),
    ErrorKind.SELF_APPROVAL_NOT_ALLOWED: (_B, "You cannot approve or reject your own request"),
    ErrorKind.EMPLOYEE_CANNOT_APPROVE: (_B, "Employees cannot approve requests"),
    ErrorKind.MANAGER_NEEDS_ADMIN: (_B, "Manager requests must be decided by an admin"),
    ErrorKind.ADMIN_REQUEST_NOT_ALLOWED: (_B, "Managers cannot decide admin requests"),
    ErrorKind.UNAUTHORIZED_APPROVAL: (_B, "Not authorized to decide this request"),
    ErrorKind.RULE_EXCEEDS_GRADE_LIMIT: (_B, "Rule threshold exceeds the grade limit"),
    ErrorKind.RULE_CONFLICT: (_B, "An active rule already exists for this request type and grade"),
    ErrorKind.EMAIL_ALREADY_REGISTERED: (_B, "Email already registered"),
    ErrorKind.HOLIDAY_EXISTS: (_B, "Holiday already exists for this date"),
    ErrorKind.GRADE_EXISTS: (_B, "A grade with this name already exists"),
    ErrorKind.ADMIN_ONLY: (_B, "Admin access required"),
    ErrorKind.BALANCE_MISSING: (_N, "Balance not found"),
    ErrorKind.REQUEST_NOT_FOUND: (_N, "Request not found"),
    ErrorKind.EMPLOYEE_NOT_FOUND: (_N, "Employee not found"),
    ErrorKind.GRADE_NOT_FOUND: (_N, "Grade not found"),
    ErrorKind.RULE_NOT_FOUND: (_N, "Rule not found"),
    ErrorKind.HOLIDAY_NOT_FOUND: (_N, "Holiday not found"),
    ErrorKind.DATABASE: (_I, "A database error occurred, please retry"),
}

_CATEGORY_STATUS: dict[ErrorCategory, int] = {
    ErrorCategory.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.BUSINESS: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCategory.INFRASTRUCTURE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

_KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.NOT_PENDING: status.HTTP_409_CONFLICT,
    ErrorKind.CANNOT_CANCEL: status.HTTP_409_CONFLICT,
    ErrorKind.RULE_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.EMAIL_ALREADY_REGISTERED: status.HTTP_409_CONFLICT,
    ErrorKind.HOLIDAY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.GRADE_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.SELF_APPROVAL_NOT_ALLOWED: status.HTTP_403_FORBIDDEN,
    ErrorKind.EMPLOYEE_CANNOT_APPROVE: status.HTTP_403_FORBIDDEN,
    ErrorKind.MANAGER_NEEDS_ADMIN: status.HTTP_403_FORBIDDEN,
    ErrorKind.ADMIN_REQUEST_NOT_ALLOWED: status.HTTP_403_FORBIDDEN,
    ErrorKind.UNAUTHORIZED_APPROVAL: status.HTTP_403_FORBIDDEN,
    ErrorKind.ADMIN_ONLY: status.HTTP_403_FORBIDDEN,
}


class AppError(Exception):
    """Base application exception tagged with an explicit error kind."""

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        self.kind = kind
        self.message = message or _KIND_INFO[kind][1]
        super().__init__(self.message)

    @property
    def category(self) -> ErrorCategory:
        return _KIND_INFO[self.kind][0]


def status_code_for(exc: AppError) -> int:
    """Map an error kind to the HTTP status returned by the API."""
    return _KIND_STATUS.get(exc.kind, _CATEGORY_STATUS[exc.category])


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    status_code = status_code_for(exc)
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=exc.kind.value,
            detail=exc.message,
            status_code=status_code,
        ).model_dump(),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
