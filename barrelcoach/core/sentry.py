"""Optional Sentry integration for centralized error tracking."""

from __future__ import annotations

from typing import Any

import sentry_sdk
import structlog
from sentry_sdk.integrations.fastapi import FastApiIntegration

logger = structlog.get_logger(__name__)
_sentry_initialized = False


def init_sentry(settings: Any) -> None:
    """Initialize Sentry if enabled in configuration."""
    global _sentry_initialized

    if _sentry_initialized:
        return

    enabled = getattr(settings, "error_tracking_enabled", False)
    dsn = getattr(settings, "sentry_dsn", None)

    if not enabled or not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=getattr(settings, "environment", "development"),
        release=getattr(settings, "api_version", "unknown"),
        traces_sample_rate=getattr(settings, "sentry_traces_sample_rate", 0.0),
        profiles_sample_rate=getattr(settings, "sentry_profiles_sample_rate", 0.0),
        integrations=[FastApiIntegration()],
    )

    _sentry_initialized = True
    logger.info("sentry_initialized", environment=getattr(settings, "environment", None))


def capture_exception(exc: BaseException) -> None:
    """Capture an exception with Sentry if enabled."""
    if not _sentry_initialized:
        return
    sentry_sdk.capture_exception(exc)


__all__ = ["capture_exception", "init_sentry"]
