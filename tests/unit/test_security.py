"""Unit tests for bearer-token resolution."""

import pytest
from jose import jwt

from barrelcoach.config import get_settings
from barrelcoach.core.errors import ForbiddenError
from barrelcoach.security import Principal, principal_from_token, require_admin
from tests.conftest import make_token


def test_valid_token_resolves_principal():
    principal = principal_from_token(make_token("user-1", email="jordan@example.com"))

    assert principal == Principal(subject="user-1", email="jordan@example.com", role=None)
    assert principal.is_admin is False


def test_app_metadata_role_wins():
    settings = get_settings()
    token = jwt.encode(
        {"sub": "user-2", "role": "authenticated", "app_metadata": {"role": "admin"}},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )

    assert principal_from_token(token).is_admin is True


def test_invalid_tokens_are_rejected():
    forged = jwt.encode({"sub": "user-1"}, "wrong-secret", algorithm="HS256")
    no_subject = make_token("")

    assert principal_from_token(forged) is None
    assert principal_from_token(no_subject) is None
    assert principal_from_token("not-a-jwt") is None


def test_service_role_key_acts_as_admin(monkeypatch):
    monkeypatch.setattr(get_settings(), "service_role_key", "internal-key")

    principal = principal_from_token("internal-key")

    assert principal.is_service is True
    assert principal.is_admin is True


@pytest.mark.asyncio
async def test_require_admin():
    admin = Principal(subject="a", role="admin")

    assert await require_admin(admin) is admin
    with pytest.raises(ForbiddenError):
        await require_admin(Principal(subject="b", role="authenticated"))
