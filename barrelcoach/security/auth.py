"""JWT verification for externally issued access tokens."""

from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Any, Optional

from jose import JWTError, jwt

from ..config import get_settings

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class Principal:
    """The authenticated caller of a request."""

    subject: str
    email: Optional[str] = None
    role: Optional[str] = None
    is_service: bool = False

    @property
    def is_admin(self) -> bool:
        return self.is_service or self.role == ADMIN_ROLE


def decode_token(token: str) -> Optional[dict[str, Any]]:
    """Decode and verify a JWT token.

    Args:
        token: JWT token to decode

    Returns:
        Decoded token data or None if invalid
    """
    settings = get_settings()
    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError:
        return None


def is_service_role_key(token: str) -> bool:
    """Check a bearer value against the configured service-role key."""
    expected = get_settings().service_role_key
    if not expected:
        return False
    return hmac.compare_digest(token.encode(), expected.encode())


def principal_from_token(token: str) -> Optional[Principal]:
    """Resolve a bearer value to a Principal, or None when it is not valid."""
    if is_service_role_key(token):
        return Principal(subject="service", role=ADMIN_ROLE, is_service=True)

    payload = decode_token(token)
    if not payload or not payload.get("sub"):
        return None

    role = payload.get("role")
    app_metadata = payload.get("app_metadata")
    if isinstance(app_metadata, dict) and app_metadata.get("role"):
        role = app_metadata["role"]

    return Principal(subject=str(payload["sub"]), email=payload.get("email"), role=role)


__all__ = [
    "ADMIN_ROLE",
    "Principal",
    "decode_token",
    "is_service_role_key",
    "principal_from_token",
]
