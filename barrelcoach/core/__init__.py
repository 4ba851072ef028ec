"""Core utilities shared across the application."""

from .context import get_correlation_id, reset_correlation_id, set_correlation_id
from .errors import (
    BarrelCoachError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    ParseError,
    StorageError,
    UnauthorizedError,
    UpstreamError,
)

__all__ = [
    "BarrelCoachError",
    "ForbiddenError",
    "InvalidArgumentError",
    "NotFoundError",
    "ParseError",
    "StorageError",
    "UnauthorizedError",
    "UpstreamError",
    "get_correlation_id",
    "reset_correlation_id",
    "set_correlation_id",
]
