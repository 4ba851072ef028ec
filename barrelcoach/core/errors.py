"""Custom exception hierarchy for the Barrel Coach backend."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import status


class BarrelCoachError(Exception):
    """Base class for application-specific exceptions."""

    default_message = "An unexpected error occurred."
    code = "barrelcoach_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.code = (code or self.code).lower().replace(" ", "_")
        self.status_code = status_code or self.status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the exception to a JSON-ready dictionary."""
        payload: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidArgumentError(BarrelCoachError):
    """Raised when input is missing, malformed or out of range."""

    default_message = "Invalid request."
    code = "invalid_argument"
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(BarrelCoachError):
    """Raised when a request carries no usable credentials."""

    default_message = "Unauthorized"
    code = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(BarrelCoachError):
    """Raised when the caller is authenticated but not allowed."""

    default_message = "Forbidden"
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(BarrelCoachError):
    """Raised when a referenced entity does not exist."""

    default_message = "Requested resource was not found."
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class UpstreamError(BarrelCoachError):
    """Raised when a third-party API (AI, transcription, OAuth, messaging) fails."""

    default_message = "Upstream service call failed."
    code = "upstream_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ParseError(UpstreamError):
    """Raised when an upstream response cannot be parsed."""

    default_message = "Failed to parse upstream response."
    code = "parse_error"


class StorageError(BarrelCoachError):
    """Raised when a binary write to video storage fails."""

    default_message = "Failed to store file."
    code = "storage_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


__all__ = [
    "BarrelCoachError",
    "ForbiddenError",
    "InvalidArgumentError",
    "NotFoundError",
    "ParseError",
    "StorageError",
    "UnauthorizedError",
    "UpstreamError",
]
