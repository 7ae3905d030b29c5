"""Request and response models used by the Pxshot clients."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping, Sequence, Union

from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)

_LIMIT_HEADER = "X-RateLimit-Limit"
_REMAINING_HEADER = "X-RateLimit-Remaining"
_RESET_HEADER = "X-RateLimit-Reset"
_RETRY_AFTER_HEADER = "Retry-After"


def _header_value(headers: Mapping[str, Any], name: str) -> str | None:
    """Case-insensitive lookup; the first value wins when a header repeats."""
    get_list = getattr(headers, "get_list", None)
    if get_list is not None:
        values = get_list(name)
        return values[0] if values else None

    key = name.lower()
    for header_name, value in headers.items():
        if header_name.lower() != key:
            continue
        if isinstance(value, (list, tuple)):
            return value[0] if value else None
        return value
    return None


def _to_int(raw: Any, source: str) -> int | None:
    if raw is None:
        return None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return int(raw)
    try:
        return int(str(raw).strip())
    except ValueError:
        logger.warning("Ignoring non-numeric %s value %r", source, raw)
        return None


# ---------------------------------------------------------------------------
# Rate limits
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RateLimitInfo:
    """Rate-limit metadata parsed from response headers."""

    limit: int | None = None
    remaining: int | None = None
    reset: int | None = None
    retry_after: int | None = None

    @classmethod
    def from_headers(
        cls, headers: Mapping[str, str | Sequence[str]]
    ) -> RateLimitInfo:
        """Parse ``X-RateLimit-*`` and ``Retry-After`` headers.

        Absent or non-numeric values become *None*.
        """
        return cls(
            limit=_to_int(_header_value(headers, _LIMIT_HEADER), _LIMIT_HEADER),
            remaining=_to_int(
                _header_value(headers, _REMAINING_HEADER), _REMAINING_HEADER
            ),
            reset=_to_int(_header_value(headers, _RESET_HEADER), _RESET_HEADER),
            retry_after=_to_int(
                _header_value(headers, _RETRY_AFTER_HEADER), _RETRY_AFTER_HEADER
            ),
        )

    @property
    def is_available(self) -> bool:
        return self.limit is not None or self.remaining is not None


# ---------------------------------------------------------------------------
# POST /v1/screenshot
# ---------------------------------------------------------------------------


class ScreenshotRequest(BaseModel):
    """Options accepted by ``POST /v1/screenshot``.

    Unknown keys are dropped; only fields the caller set are sent.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    url: str | None = None
    format: str | None = None
    quality: int | None = None
    width: int | None = None
    height: int | None = None
    full_page: bool | None = None
    wait_until: str | None = None
    wait_for_selector: str | None = None
    wait_for_timeout: int | None = None
    device_scale_factor: float | None = None
    store: bool | None = None
    block_ads: bool | None = None

    @classmethod
    def wire_body(cls, params: Mapping[str, Any]) -> dict[str, Any]:
        """Wire body: ``url`` first, then every supplied non-null option.

        Values are sent exactly as the caller supplied them.
        """
        body: dict[str, Any] = {"url": params["url"]}
        for name in cls.model_fields:
            if name != "url" and params.get(name) is not None:
                body[name] = params[name]
        return body


class ScreenshotResult(BaseModel):
    """Descriptor of a screenshot hosted by the service (``store=true``)."""

    model_config = ConfigDict(frozen=True)

    url: str = ""
    expires_at: str = ""
    width: int = 0
    height: int = 0
    size_bytes: int = 0
    rate_limit_info: RateLimitInfo = RateLimitInfo()

    @field_validator("width", "height", "size_bytes", mode="before")
    @classmethod
    def _truncate_numbers(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                pass
            try:
                value = float(value.strip())
            except ValueError:
                return value
        if isinstance(value, float) and math.isfinite(value):
            return int(value)
        return value

    @classmethod
    def from_body(
        cls, body: Mapping[str, Any], rate_limit_info: RateLimitInfo
    ) -> ScreenshotResult:
        fields = {
            key: body[key]
            for key in ("url", "expires_at", "width", "height", "size_bytes")
            if body.get(key) is not None
        }
        return cls(**fields, rate_limit_info=rate_limit_info)

    @property
    def expires_at_datetime(self) -> datetime | None:
        """Expiration as an aware datetime; naive stamps are read as UTC."""
        if not self.expires_at:
            return None
        parsed = datetime.fromisoformat(self.expires_at)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    def is_expired(self, now: datetime | None = None) -> bool:
        expires = self.expires_at_datetime
        if expires is None:
            return False
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return expires < now


ScreenshotOutcome = Union[bytes, ScreenshotResult]


# ---------------------------------------------------------------------------
# GET /v1/usage
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UsageResult:
    """Usage counters reported by ``GET /v1/usage``."""

    data: Mapping[str, Any] = field(default_factory=dict)
    rate_limit_info: RateLimitInfo = field(default_factory=RateLimitInfo)

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def get(self, key: str, default: Any = None) -> Any:
        value = self.data.get(key)
        return default if value is None else value

    def _first(self, *keys: str) -> int | None:
        for key in keys:
            value = self.data.get(key)
            if value is not None:
                return _to_int(value, key)
        return None

    @property
    def screenshots_count(self) -> int | None:
        return self._first("screenshots_count", "screenshots")

    @property
    def bytes_used(self) -> int | None:
        return self._first("bytes_used", "storage_bytes")
