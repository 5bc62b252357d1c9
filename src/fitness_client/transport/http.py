"""
REST HTTP client for the activity backend.

One request attempt per call. Transport failures, timeouts and HTTP status
codes are mapped onto the fitness_client error kinds.
"""

import logging
from typing import Any, Callable, Optional

import httpx

from fitness_client.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S
from fitness_client.errors import (
    FitnessClientError,
    NetworkError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

TokenSource = Callable[[], Optional[str]]


def _no_token() -> Optional[str]:
    return None


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token_source: TokenSource = _no_token,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._token_source = token_source
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}/api",
            headers={"User-Agent": "fitness-client/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def _auth_headers(self) -> dict[str, str]:
        token = self._token_source()
        if not token:
            raise UnauthorizedError("No session token; log in first")
        return {"Authorization": f"Bearer {token}"}

    @staticmethod
    def _error_for(resp: httpx.Response) -> FitnessClientError:
        details = {"status_code": resp.status_code, "body": resp.text[:200]}
        status = resp.status_code
        if status in (401, 403):
            return UnauthorizedError(f"HTTP {status}: credential rejected", details)
        if status == 404:
            return NotFoundError(f"HTTP 404: {resp.request.url.path} not found", details)
        if status < 500:
            return ValidationError(f"HTTP {status}: {resp.text[:200]}", details)
        return NetworkError(f"HTTP {status}: server error", details)

    async def _request(self, method: str, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        headers = self._auth_headers()
        try:
            resp = await self._client.request(method, path, json=body, headers=headers)
        except httpx.TimeoutException as e:
            raise NetworkError(f"{method} {path} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e
        logger.debug(f"{method} {path} -> {resp.status_code}")
        if resp.status_code >= 400:
            raise self._error_for(resp)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise NetworkError(f"{method} {path} returned a non-JSON body") from e

    async def get(self, path: str) -> Any:
        return await self._request("GET", path)

    async def post(self, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        return await self._request("POST", path, body)

    async def close(self) -> None:
        await self._client.aclose()
