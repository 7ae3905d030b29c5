"""Async and sync HTTP clients for the Pxshot screenshot API."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx
from pydantic import ValidationError as PydanticValidationError

from pxshot.config import ClientConfig
from pxshot.exceptions import (
    ConfigurationError,
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

logger = logging.getLogger(__name__)

VERSION = "1.0.0"
USER_AGENT = f"pxshot-python/{VERSION}"

SCREENSHOT_PATH = "/v1/screenshot"
USAGE_PATH = "/v1/usage"


def get_version() -> str:
    """Return the SDK version."""
    return VERSION


# ---------------------------------------------------------------------------
# Request construction
# ---------------------------------------------------------------------------


def _resolve_config(
    api_key: str,
    config: ClientConfig | None,
    overrides: dict[str, Any],
) -> ClientConfig:
    if not isinstance(api_key, str) or not api_key.strip():
        raise ConfigurationError("API key is required")
    if config is not None and not overrides:
        return config
    values = config.model_dump() if config is not None else {}
    values.update(overrides)
    try:
        return ClientConfig(**values)
    except PydanticValidationError as exc:
        raise ConfigurationError(f"Invalid client configuration: {exc}") from exc


def _client_kwargs(api_key: str, config: ClientConfig) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "base_url": config.base_url,
        "headers": {
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        },
        "timeout": config.timeout,
        "follow_redirects": True,
    }
    if config.transport is not None:
        kwargs["transport"] = config.transport
    return kwargs


def _field_errors(exc: PydanticValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "request"
        errors.setdefault(field, []).append(error["msg"])
    return errors


def _prepare_screenshot(
    request: ScreenshotRequest | Mapping[str, Any] | None,
    options: dict[str, Any],
) -> tuple[dict[str, Any], bool]:
    """Validate caller input and return ``(wire_body, store)``.

    Raises :class:`ValidationError` before any network I/O.
    """
    if isinstance(request, ScreenshotRequest):
        params = request.model_dump(exclude_unset=True)
    else:
        params = dict(request or {})
    params.update(options)

    if not params.get("url"):
        raise ValidationError(
            "URL is required", {"url": ["The url field is required"]}
        )

    try:
        parsed = ScreenshotRequest.model_validate(params)
    except PydanticValidationError as exc:
        raise ValidationError(
            "Invalid screenshot parameters", _field_errors(exc)
        ) from exc
    return ScreenshotRequest.wire_body(params), bool(parsed.store)


# ---------------------------------------------------------------------------
# Response handling
# ---------------------------------------------------------------------------


def _decode_error_body(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON error body, tolerating anything undecodable."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _decode_json(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError as exc:
        raise TransportError(f"Malformed response: {exc}", exc) from exc
    if not isinstance(body, dict):
        raise TransportError(
            f"Malformed response: expected a JSON object, got {type(body).__name__}"
        )
    return body


def _raise_for_status(response: httpx.Response) -> None:
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        error = build_exception(
            response.status_code,
            _decode_error_body(response),
            response.headers,
            str(exc),
        )
        logger.warning(
            "Pxshot API returned %d for %s %s: %s",
            response.status_code,
            response.request.method,
            response.request.url.path,
            error.message,
        )
        raise error from exc


def _transport_error(exc: httpx.RequestError) -> TransportError:
    logger.warning("Pxshot request failed: %s", exc, exc_info=True)
    return TransportError(f"Request failed: {exc}", exc)


def _screenshot_outcome(
    response: httpx.Response, store: bool, rate_limit_info: RateLimitInfo
) -> ScreenshotOutcome:
    if not store:
        return response.content
    body = _decode_json(response)
    try:
        return ScreenshotResult.from_body(body, rate_limit_info)
    except PydanticValidationError as exc:
        raise TransportError(f"Malformed response: {exc}", exc) from exc


# ---------------------------------------------------------------------------
# Async client
# ---------------------------------------------------------------------------


class AsyncPxshotClient:
    """Async client for the Pxshot API (backed by ``httpx.AsyncClient``)."""

    def __init__(
        self,
        api_key: str,
        config: ClientConfig | None = None,
        **overrides: Any,
    ) -> None:
        self.config = _resolve_config(api_key, config, overrides)
        self._client = httpx.AsyncClient(**_client_kwargs(api_key, self.config))

    # -- context manager -----------------------------------------------------

    async def __aenter__(self) -> AsyncPxshotClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    # -- internal ------------------------------------------------------------

    async def _send(
        self, method: str, path: str, **kwargs: Any
    ) -> tuple[httpx.Response, RateLimitInfo]:
        logger.debug("%s %s", method, path)
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            raise _transport_error(exc) from exc
        rate_limit_info = RateLimitInfo.from_headers(response.headers)
        _raise_for_status(response)
        return response, rate_limit_info

    # -- public methods ------------------------------------------------------

    @staticmethod
    def get_version() -> str:
        return VERSION

    async def screenshot(
        self,
        request: ScreenshotRequest | Mapping[str, Any] | None = None,
        **options: Any,
    ) -> ScreenshotOutcome:
        """Capture a screenshot.

        Returns the image bytes, or a :class:`ScreenshotResult` when the
        request sets ``store=True``.
        """
        body, store = _prepare_screenshot(request, options)
        logger.debug("Capturing %s (store=%s)", body["url"], store)
        resp, rate_limit_info = await self._send("POST", SCREENSHOT_PATH, json=body)
        return _screenshot_outcome(resp, store, rate_limit_info)

    async def usage(self) -> UsageResult:
        resp, rate_limit_info = await self._send("GET", USAGE_PATH)
        return UsageResult(_decode_json(resp), rate_limit_info)


# ---------------------------------------------------------------------------
# Sync client
# ---------------------------------------------------------------------------


class PxshotClient:
    """Synchronous client for the Pxshot API (backed by ``httpx.Client``).

    Example::

        with PxshotClient("px_your_api_key") as client:
            image = client.screenshot(url="https://example.com")
            hosted = client.screenshot(url="https://example.com", store=True)
            print(hosted.url)
    """

    def __init__(
        self,
        api_key: str,
        config: ClientConfig | None = None,
        **overrides: Any,
    ) -> None:
        self.config = _resolve_config(api_key, config, overrides)
        self._client = httpx.Client(**_client_kwargs(api_key, self.config))

    # -- context manager -----------------------------------------------------

    def __enter__(self) -> PxshotClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # -- internal ------------------------------------------------------------

    def _send(
        self, method: str, path: str, **kwargs: Any
    ) -> tuple[httpx.Response, RateLimitInfo]:
        logger.debug("%s %s", method, path)
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            raise _transport_error(exc) from exc
        rate_limit_info = RateLimitInfo.from_headers(response.headers)
        _raise_for_status(response)
        return response, rate_limit_info

    # -- public methods ------------------------------------------------------

    @staticmethod
    def get_version() -> str:
        return VERSION

    def screenshot(
        self,
        request: ScreenshotRequest | Mapping[str, Any] | None = None,
        **options: Any,
    ) -> ScreenshotOutcome:
        """Capture a screenshot.

        Returns the image bytes, or a :class:`ScreenshotResult` when the
        request sets ``store=True``.
        """
        body, store = _prepare_screenshot(request, options)
        logger.debug("Capturing %s (store=%s)", body["url"], store)
        resp, rate_limit_info = self._send("POST", SCREENSHOT_PATH, json=body)
        return _screenshot_outcome(resp, store, rate_limit_info)

    def usage(self) -> UsageResult:
        resp, rate_limit_info = self._send("GET", USAGE_PATH)
        return UsageResult(_decode_json(resp), rate_limit_info)
