# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, Header

from approval_engine.exceptions import AppError, ErrorKind
from approval_engine.models.enums import Role
from approval_engine.schemas.auth import AuthContext


async def get_auth_context(
    x_user_id: uuid.UUID = Header(),
    x_role: str = Header(default=Role.EMPLOYEE.value),
) -> AuthContext:
    """Extract dev auth context from request headers. Roles are case-insensitive."""
    return AuthContext(user_id=x_user_id, role=x_role.strip().upper() or Role.EMPLOYEE.value)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def require_admin(
    auth: AuthDep,
) -> AuthContext:
    """Require admin role for the request."""
    if not auth.is_admin:
        raise AppError(ErrorKind.ADMIN_ONLY)
    return auth


AdminDep = Annotated[AuthContext, Depends(require_admin)]
