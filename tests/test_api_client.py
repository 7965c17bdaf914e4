"""
Unit tests for the devlog API client.

Requests go through ``httpx.MockTransport`` so the exact wire format is
asserted without a running service.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from conftest import RecordingHandler
from shared.api_client import DevLogAPIClient
from shared.errors import APIError
from shared.models import LogEntry


def make_client(handler, base_url="http://x", **kwargs) -> DevLogAPIClient:
    return DevLogAPIClient(base_url, "k", transport=httpx.MockTransport(handler), **kwargs)


class TestAppendEntry:
    """Test cases for successful appends."""

    @pytest.mark.asyncio
    async def test_posts_entry_with_api_key(self):
        handler = RecordingHandler(body={"message": "Log appended"})

        async with make_client(handler) as client:
            response = await client.append_entry(LogEntry(text="[abcdef12] Fix bug", date="2025-01-01"))

        request = handler.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "http://x/api/logs/append"
        assert request.headers["x-api-key"] == "k"
        assert request.headers["content-type"] == "application/json"
        assert handler.last_payload == {"text": "[abcdef12] Fix bug", "date": "2025-01-01"}
        assert response.message == "Log appended"

    @pytest.mark.asyncio
    async def test_date_omitted_when_absent(self):
        handler = RecordingHandler()

        async with make_client(handler) as client:
            await client.append_entry(LogEntry(text="Manual note"))

        assert handler.last_payload == {"text": "Manual note"}

    @pytest.mark.asyncio
    async def test_trailing_slash_in_base_url(self):
        handler = RecordingHandler()

        async with make_client(handler, base_url="http://x/") as client:
            await client.append_entry(LogEntry(text="note"))

        assert str(handler.requests[0].url) == "http://x/api/logs/append"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("handler", [
        RecordingHandler(status_code=204, text=""),
        RecordingHandler(status_code=200, text="appended"),
        RecordingHandler(status_code=201, body=["not", "an", "object"]),
        RecordingHandler(status_code=200, body={"message": {"nested": True}}),
    ])
    async def test_success_without_message(self, handler):
        async with make_client(handler) as client:
            response = await client.append_entry(LogEntry(text="note"))

        assert response.message is None


class TestAppendErrors:
    """Test cases for failures."""

    @pytest.mark.asyncio
    async def test_non_2xx_raises_with_status_and_body(self):
        handler = RecordingHandler(status_code=401, text="invalid api key")

        async with make_client(handler) as client:
            with pytest.raises(APIError) as exc_info:
                await client.append_entry(LogEntry(text="note"))

        error = exc_info.value
        assert error.status_code == 401
        assert error.body == "invalid api key"
        assert "API request failed: 401 Unauthorized" in error.message
        assert "invalid api key" in error.message
        assert "devlog config" in error.hint

    @pytest.mark.asyncio
    async def test_server_error_not_retried_by_default(self):
        handler = RecordingHandler(status_code=503, text="down")

        async with make_client(handler) as client:
            with pytest.raises(APIError):
                await client.append_entry(LogEntry(text="note"))

        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_connection_error_raises(self):
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        async with make_client(refuse) as client:
            with pytest.raises(APIError, match="Error posting to API"):
                await client.append_entry(LogEntry(text="note"))


class TestRetry:
    """Test cases for the optional bounded retry."""

    @pytest.mark.asyncio
    async def test_retries_transient_status_then_succeeds(self):
        responses = [httpx.Response(503, text="busy"), httpx.Response(200, json={"message": "ok"})]
        calls = []

        def flaky(request):
            calls.append(request)
            return responses[len(calls) - 1]

        with patch("shared.api_client.asyncio.sleep", new=AsyncMock()) as sleep:
            async with make_client(flaky, retry_attempts=2, retry_backoff=0.5) as client:
                response = await client.append_entry(LogEntry(text="note"))

        assert response.message == "ok"
        assert len(calls) == 2
        sleep.assert_awaited_once_with(0.5)

    @pytest.mark.asyncio
    async def test_retries_transport_errors_with_backoff(self):
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        with patch("shared.api_client.asyncio.sleep", new=AsyncMock()) as sleep:
            async with make_client(refuse, retry_attempts=2, retry_backoff=0.5) as client:
                with pytest.raises(APIError):
                    await client.append_entry(LogEntry(text="note"))

        assert [call.args[0] for call in sleep.await_args_list] == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_client_errors_are_not_retried(self):
        handler = RecordingHandler(status_code=400, text="bad request")

        with patch("shared.api_client.asyncio.sleep", new=AsyncMock()) as sleep:
            async with make_client(handler, retry_attempts=3) as client:
                with pytest.raises(APIError) as exc_info:
                    await client.append_entry(LogEntry(text="note"))

        assert exc_info.value.status_code == 400
        assert len(handler.requests) == 1
        sleep.assert_not_awaited()
