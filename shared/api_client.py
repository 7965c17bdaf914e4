"""
HTTP client for the remote devlog service.

Each entry is one JSON POST to ``{base_url}/api/logs/append`` authenticated
with the ``x-api-key`` header. Non-2xx responses and transport failures are
raised as :class:`APIError`. Retries are disabled unless ``retry_attempts``
is set, in which case transient failures are retried with exponential
backoff.
"""

import asyncio
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from shared.errors import APIError
from shared.models import AppendResponse, LogEntry

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class DevLogAPIClient:
    """Async client for appending entries to the remote log."""

    APPEND_PATH = "/api/logs/append"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 5.0,
        retry_attempts: int = 0,
        retry_backoff: float = 0.5,
        append_path: str = APPEND_PATH,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.append_url = f"{self.base_url}{append_path}"
        self.api_key = api_key
        self.retry_attempts = retry_attempts
        self.retry_backoff = retry_backoff
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.aclose()

    async def append_entry(self, entry: LogEntry) -> AppendResponse:
        """Post one entry and return the parsed response."""
        attempt = 0
        while True:
            try:
                response = await self.client.post(
                    self.append_url,
                    json=entry.to_payload(),
                    headers={"x-api-key": self.api_key},
                )
            except httpx.TransportError as e:
                if attempt < self.retry_attempts:
                    await self._backoff(attempt, f"transport error: {e}")
                    attempt += 1
                    continue
                logger.error(f"Request to {self.append_url} failed: {e}")
                raise APIError(
                    f"Error posting to API: {e}",
                    hint=f"Check that the logging service at {self.base_url} is reachable",
                )

            if response.is_success:
                logger.debug(f"POST {self.append_url} -> {response.status_code}")
                return self._parse_response(response)

            if response.status_code in RETRY_STATUS_CODES and attempt < self.retry_attempts:
                await self._backoff(attempt, f"HTTP {response.status_code}")
                attempt += 1
                continue

            logger.error(f"HTTP error: {response.status_code} - {response.text}")
            raise APIError(
                f"API request failed: {response.status_code} {response.reason_phrase}\n{response.text}",
                status_code=response.status_code,
                body=response.text,
                hint=self._hint_for_status(response.status_code),
            )

    async def _backoff(self, attempt: int, reason: str) -> None:
        delay = self.retry_backoff * (2 ** attempt)
        logger.warning(f"Retrying {self.append_url} in {delay:.2f}s after {reason}")
        await asyncio.sleep(delay)

    @staticmethod
    def _parse_response(response: httpx.Response) -> AppendResponse:
        try:
            data = response.json()
        except ValueError:
            return AppendResponse()
        if not isinstance(data, dict):
            return AppendResponse()
        try:
            return AppendResponse.model_validate(data)
        except ValidationError:
            logger.debug(f"Unexpected response body: {data}")
            return AppendResponse()

    @staticmethod
    def _hint_for_status(status_code: int) -> str:
        if status_code in (401, 403):
            return "Check your API key with 'devlog config'"
        if status_code == 404:
            return "Check the API base URL with 'devlog config'"
        return "Service may be experiencing issues"
