"""Tests for pxshot.models — rate-limit parsing, request bodies, result models."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx
import pytest
from pydantic import ValidationError as PydanticValidationError

from pxshot.models import (
    RateLimitInfo,
    ScreenshotRequest,
    ScreenshotResult,
    UsageResult,
)

# ---------------------------------------------------------------------------
# RateLimitInfo
# ---------------------------------------------------------------------------


class TestRateLimitInfo:
    def test_limit_and_remaining(self):
        info = RateLimitInfo.from_headers(
            {"X-RateLimit-Limit": "100", "X-RateLimit-Remaining": "99"}
        )
        assert info.limit == 100
        assert info.remaining == 99
        assert info.reset is None
        assert info.retry_after is None
        assert info.is_available

    def test_all_headers(self):
        info = RateLimitInfo.from_headers(
            {
                "X-RateLimit-Limit": "60",
                "X-RateLimit-Remaining": "0",
                "X-RateLimit-Reset": "1700000000",
                "Retry-After": "30",
            }
        )
        assert info == RateLimitInfo(
            limit=60, remaining=0, reset=1700000000, retry_after=30
        )

    def test_case_insensitive_names(self):
        info = RateLimitInfo.from_headers(
            {"x-ratelimit-limit": "10", "RETRY-AFTER": "5"}
        )
        assert info.limit == 10
        assert info.retry_after == 5

    def test_sequence_value_uses_first_element(self):
        info = RateLimitInfo.from_headers({"X-RateLimit-Limit": ["10", "20"]})
        assert info.limit == 10

    def test_repeated_httpx_header_first_wins(self):
        headers = httpx.Headers(
            [("X-RateLimit-Remaining", "7"), ("x-ratelimit-remaining", "3")]
        )
        info = RateLimitInfo.from_headers(headers)
        assert info.remaining == 7

    def test_absent_headers(self):
        info = RateLimitInfo.from_headers({})
        assert info == RateLimitInfo()
        assert not info.is_available

    def test_reset_alone_is_not_available(self):
        info = RateLimitInfo.from_headers({"X-RateLimit-Reset": "42"})
        assert info.reset == 42
        assert not info.is_available

    def test_remaining_alone_is_available(self):
        assert RateLimitInfo.from_headers({"X-RateLimit-Remaining": "3"}).is_available

    def test_malformed_value_becomes_none(self, caplog):
        with caplog.at_level(logging.WARNING, logger="pxshot.models"):
            info = RateLimitInfo.from_headers(
                {"X-RateLimit-Limit": "lots", "X-RateLimit-Remaining": "4"}
            )
        assert info.limit is None
        assert info.remaining == 4
        assert "X-RateLimit-Limit" in caplog.text

    def test_frozen(self):
        info = RateLimitInfo(limit=60, remaining=59)
        with pytest.raises(AttributeError):
            info.limit = 0  # type: ignore[misc]


# ---------------------------------------------------------------------------
# ScreenshotRequest
# ---------------------------------------------------------------------------


class TestScreenshotRequest:
    def test_body_only_contains_supplied_options(self):
        body = ScreenshotRequest.wire_body({"url": "https://example.com", "width": 1280})
        assert body == {"url": "https://example.com", "width": 1280}

    def test_unknown_keys_dropped(self):
        body = ScreenshotRequest.wire_body(
            {"url": "https://example.com", "colour": "blue", "format": "png"}
        )
        assert body == {"url": "https://example.com", "format": "png"}

    def test_none_values_dropped(self):
        body = ScreenshotRequest.wire_body({"url": "https://example.com", "quality": None})
        assert body == {"url": "https://example.com"}

    def test_explicit_false_is_sent(self):
        body = ScreenshotRequest.wire_body(
            {"url": "https://example.com", "store": False, "full_page": False}
        )
        assert body == {
            "url": "https://example.com",
            "store": False,
            "full_page": False,
        }

    def test_values_sent_as_supplied(self):
        body = ScreenshotRequest.wire_body(
            {
                "url": "https://example.com",
                "device_scale_factor": 2,
                "quality": "80",
                "store": 0,
            }
        )
        assert body == {
            "url": "https://example.com",
            "device_scale_factor": 2,
            "quality": "80",
            "store": 0,
        }
        assert isinstance(body["device_scale_factor"], int)

    def test_all_options(self):
        options = {
            "url": "https://example.com",
            "format": "jpeg",
            "quality": 80,
            "width": 1920,
            "height": 1080,
            "full_page": True,
            "wait_until": "networkidle",
            "wait_for_selector": "#main",
            "wait_for_timeout": 500,
            "device_scale_factor": 2.0,
            "store": True,
            "block_ads": True,
        }
        body = ScreenshotRequest.wire_body(options)
        assert body == options
        assert list(body) == list(ScreenshotRequest.model_fields)


# ---------------------------------------------------------------------------
# ScreenshotResult
# ---------------------------------------------------------------------------


class TestScreenshotResult:
    def test_from_body(self):
        info = RateLimitInfo(limit=100, remaining=98)
        result = ScreenshotResult.from_body(
            {
                "url": "https://cdn.pxshot.com/abc.png",
                "expires_at": "2030-01-01T00:00:00Z",
                "width": 1280,
                "height": 720,
                "size_bytes": 54321,
            },
            info,
        )
        assert result.url == "https://cdn.pxshot.com/abc.png"
        assert result.expires_at == "2030-01-01T00:00:00Z"
        assert (result.width, result.height, result.size_bytes) == (1280, 720, 54321)
        assert result.rate_limit_info == info

    def test_numeric_strings_coerced(self):
        result = ScreenshotResult.from_body(
            {"width": "1280", "height": "720", "size_bytes": "99"}, RateLimitInfo()
        )
        assert result.width == 1280
        assert result.height == 720
        assert result.size_bytes == 99

    def test_fractional_numbers_truncated(self):
        result = ScreenshotResult.from_body(
            {"width": 1280.5, "height": "720.9", "size_bytes": 4096.0}, RateLimitInfo()
        )
        assert (result.width, result.height, result.size_bytes) == (1280, 720, 4096)

    def test_non_numeric_dimension_rejected(self):
        with pytest.raises(PydanticValidationError):
            ScreenshotResult.from_body({"width": "wide"}, RateLimitInfo())

    def test_missing_and_null_fields_default(self):
        result = ScreenshotResult.from_body({"url": None}, RateLimitInfo())
        assert result.url == ""
        assert result.expires_at == ""
        assert result.width == 0
        assert result.expires_at_datetime is None
        assert not result.is_expired()

    def test_expired(self):
        result = ScreenshotResult(expires_at="2020-01-01T00:00:00Z")
        assert result.is_expired()

    def test_not_expired(self):
        result = ScreenshotResult(expires_at="2999-01-01T00:00:00+00:00")
        assert not result.is_expired()

    def test_naive_timestamp_read_as_utc(self):
        result = ScreenshotResult(expires_at="2030-06-01T12:00:00")
        assert result.expires_at_datetime == datetime(
            2030, 6, 1, 12, tzinfo=timezone.utc
        )
        before = datetime(2030, 6, 1, 11, 59, tzinfo=timezone.utc)
        after = datetime(2030, 6, 1, 12, 1, tzinfo=timezone.utc)
        assert not result.is_expired(now=before)
        assert result.is_expired(now=after)

    def test_naive_now_read_as_utc(self):
        result = ScreenshotResult(expires_at="2030-06-01T12:00:00Z")
        assert not result.is_expired(now=datetime(2030, 6, 1, 11, 59))
        assert result.is_expired(now=datetime(2030, 6, 1, 12, 1))

    def test_frozen(self):
        result = ScreenshotResult(url="https://cdn.pxshot.com/a.png")
        with pytest.raises(PydanticValidationError):
            result.url = "other"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# UsageResult
# ---------------------------------------------------------------------------


class TestUsageResult:
    def test_primary_keys(self):
        usage = UsageResult({"screenshots_count": 150, "bytes_used": 5000000})
        assert usage.screenshots_count == 150
        assert usage.bytes_used == 5000000

    def test_alias_keys(self):
        usage = UsageResult({"screenshots": 150, "storage_bytes": 5000000})
        assert usage.screenshots_count == 150
        assert usage.bytes_used == 5000000

    def test_primary_key_wins(self):
        usage = UsageResult({"screenshots_count": 1, "screenshots": 2})
        assert usage.screenshots_count == 1

    def test_null_primary_falls_back_to_alias(self):
        usage = UsageResult({"bytes_used": None, "storage_bytes": 10})
        assert usage.bytes_used == 10

    def test_missing_counters(self):
        usage = UsageResult({"plan": "free"})
        assert usage.screenshots_count is None
        assert usage.bytes_used is None

    def test_get_and_data(self):
        usage = UsageResult({"plan": "pro", "limit": 5000})
        assert usage.get("plan") == "pro"
        assert usage.get("missing", "n/a") == "n/a"
        assert dict(usage.data) == {"plan": "pro", "limit": 5000}

    def test_data_is_read_only(self):
        source = {"screenshots": 1}
        usage = UsageResult(source)
        source["screenshots"] = 99
        assert usage.screenshots_count == 1
        with pytest.raises(TypeError):
            usage.data["screenshots"] = 2  # type: ignore[index]

    def test_rate_limit_info_default(self):
        assert UsageResult({}).rate_limit_info == RateLimitInfo()
