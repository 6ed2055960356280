# ruff: noqa: B008
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, status

from meal_allowance.exceptions import AppError
from meal_allowance.schemas.auth import AuthContext


async def get_auth_context(
    x_user_id: str | None = Header(default=None),
    x_role: str = Header(default="staff"),
) -> AuthContext:
    """Extract caller capabilities from request headers."""
    return AuthContext(user_id=x_user_id, role=x_role)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def require_admin(
    auth: AuthDep,
) -> AuthContext:
    """Require admin role for the request."""
    if not auth.is_admin:
        raise AppError("Admin access required", status_code=status.HTTP_403_FORBIDDEN)
    return auth


AdminDep = Annotated[AuthContext, Depends(require_admin)]
