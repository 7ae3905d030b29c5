from __future__ import annotations

import httpx
from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_BASE_URL = "https://api.pxshot.com"
DEFAULT_TIMEOUT = 60.0


class ClientConfig(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    transport: httpx.BaseTransport | httpx.AsyncBaseTransport | None = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("base_url must not be empty")
        return value

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be greater than zero")
        return value
