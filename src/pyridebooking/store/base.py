"""Reservation store base class and shared HTTP behavior."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import aiohttp

from ..exceptions import NetworkError, StoreError, ValidationError
from ..models import BookingLeg, Reservation

_DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=30)


class BaseReservationStore(ABC):
    """Base class for remote reservation stores."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        read_url: str,
        write_url: str,
        timeout: aiohttp.ClientTimeout | None = None,
        retry_count: int = 0,
    ) -> None:
        if session is None:
            raise ValidationError("Session is required.")
        self._session = session
        self._read_url = self._normalize_url(read_url, "read_url")
        self._write_url = self._normalize_url(write_url, "write_url")
        self._timeout = timeout or _DEFAULT_TIMEOUT
        self._retry_count = max(0, retry_count)

    @property
    def read_url(self) -> str:
        return self._read_url

    @property
    def write_url(self) -> str:
        return self._write_url

    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        return await self._request(method, url, expect_json=True, **kwargs)

    async def _request_text(self, method: str, url: str, **kwargs: Any) -> str:
        return await self._request(method, url, expect_json=False, **kwargs)

    async def _request(self, method: str, url: str, *, expect_json: bool, **kwargs: Any) -> Any:
        # Only reads are retried.
        retries = self._retry_count if method.upper() == "GET" else 0
        attempts = retries + 1
        timeout = kwargs.pop("timeout", None) or self._timeout
        last_error: Exception | None = None
        for attempt in range(attempts):
            try:
                async with self._session.request(
                    method,
                    url,
                    timeout=timeout,
                    ssl=True,
                    **kwargs,
                ) as response:
                    self._raise_for_status(response)
                    if expect_json:
                        try:
                            return await response.json(content_type=None)
                        except (aiohttp.ContentTypeError, ValueError) as exc:
                            raise StoreError("Response did not contain valid JSON.") from exc
                    return await response.text()
            except (aiohttp.ClientError, TimeoutError) as exc:
                last_error = exc
                if attempt >= attempts - 1:
                    raise NetworkError("Network request failed.") from exc
        if last_error is not None:
            raise NetworkError("Network request failed.") from last_error
        raise StoreError("Request failed.")

    def _raise_for_status(self, response: aiohttp.ClientResponse) -> None:
        if 200 <= response.status < 300:
            return
        raise StoreError(
            f"Reservation store request failed with status {response.status}.",
            error_code="store_status",
        )

    def _normalize_url(self, url: str | None, field: str) -> str:
        if not isinstance(url, str) or not url.strip():
            raise ValidationError(f"{field} must be a non-empty string.")
        normalized = url.strip()
        if not normalized.startswith(("https://", "http://")):
            raise ValidationError(f"{field} must be an absolute http(s) URL.")
        return normalized

    @abstractmethod
    async def list_reservations(self) -> list[Reservation]:
        """Return every reservation known to the store."""

    @abstractmethod
    async def append_booking(self, leg: BookingLeg) -> None:
        """Append one ride leg to the store."""
