"""HTTP transport bound to the current device address."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx

from loadlink.config import DEFAULT_REQUEST_TIMEOUT
from loadlink.core.errors import TransportError

logger = logging.getLogger(__name__)

AddressProvider = Callable[[], str]


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: bytes

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


def base_url(address: str) -> str:
    return f"http://{address.strip().rstrip('/')}"


class HttpTransport:
    """Single long-lived HTTP client for one device.

    The address is read from ``address_provider`` on every request, so an
    address change applies to the very next call. Each call is one attempt.
    """

    def __init__(
        self,
        address_provider: AddressProvider,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._address_provider = address_provider
        self._timeout = timeout
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def timeout(self) -> float:
        return self._timeout

    def url_for(self, path: str) -> str:
        return f"{base_url(self._address_provider())}{path}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        files: Any = None,
    ) -> TransportResponse:
        url = self.url_for(path)
        logger.debug("%s %s", method, url)
        try:
            response = await self._client.request(method, url, json=json, files=files)
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"{method} {url} timed out after {self._timeout}s"
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        logger.debug("%s %s -> HTTP %d", method, url, response.status_code)
        return TransportResponse(
            status_code=response.status_code, body=response.content
        )

    async def get(self, path: str) -> TransportResponse:
        return await self.request("GET", path)

    async def post(
        self, path: str, *, json: Any = None, files: Any = None
    ) -> TransportResponse:
        return await self.request("POST", path, json=json, files=files)

    async def aclose(self) -> None:
        await self._client.aclose()
