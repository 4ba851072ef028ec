"""FastAPI dependencies for authentication and authorization."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.errors import ForbiddenError, UnauthorizedError
from .auth import Principal, principal_from_token

security_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security_scheme),
) -> Principal:
    """Resolve the bearer token to a Principal.

    Raises:
        UnauthorizedError: If no valid credentials are provided
    """
    if not credentials or not credentials.credentials:
        raise UnauthorizedError("Missing authorization header")

    principal = principal_from_token(credentials.credentials)
    if principal is None:
        raise UnauthorizedError("Invalid or expired token")
    return principal


async def require_admin(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    """Allow only admins and internal service-role callers.

    Raises:
        ForbiddenError: If the caller is not an admin
    """
    if not principal.is_admin:
        raise ForbiddenError("Admin access required")
    return principal


__all__ = ["get_current_principal", "require_admin", "security_scheme"]
