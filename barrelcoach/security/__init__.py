"""Authentication and authorization."""

from .auth import ADMIN_ROLE, Principal, decode_token, principal_from_token
from .dependencies import get_current_principal, require_admin

__all__ = [
    "ADMIN_ROLE",
    "Principal",
    "decode_token",
    "get_current_principal",
    "principal_from_token",
    "require_admin",
]
