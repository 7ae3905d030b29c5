"""Pxshot Python SDK — typed clients for the Pxshot screenshot API."""

from __future__ import annotations

import logging

from pxshot.client import (
    USER_AGENT,
    VERSION,
    AsyncPxshotClient,
    PxshotClient,
    get_version,
)
from pxshot.config import ClientConfig
from pxshot.exceptions import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    PxshotError,
    RateLimitError,
    TransportError,
    ValidationError,
    build_exception,
)
from pxshot.models import (
    RateLimitInfo,
    ScreenshotOutcome,
    ScreenshotRequest,
    ScreenshotResult,
    UsageResult,
)

__version__ = VERSION

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AsyncPxshotClient",
    "PxshotClient",
    "ClientConfig",
    "PxshotError",
    "ConfigurationError",
    "ValidationError",
    "AuthenticationError",
    "RateLimitError",
    "ApiError",
    "TransportError",
    "build_exception",
    "RateLimitInfo",
    "ScreenshotRequest",
    "ScreenshotResult",
    "ScreenshotOutcome",
    "UsageResult",
    "USER_AGENT",
    "VERSION",
    "get_version",
    "__version__",
]
