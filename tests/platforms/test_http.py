"""Tests for the shared poll loop, count checks and HTTP wrapper."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock

import httpx
import pytest

from kodapost.platforms import (
    PlatformAPIError,
    PlatformHTTP,
    PollTimeoutError,
    PublishValidationError,
    poll_until_ready,
    require_image_count,
)

from conftest import RecordingTransport

_logger = logging.getLogger("test_http")


class TestPollUntilReady:

    @pytest.mark.asyncio
    async def test_returns_first_value(self, mock_sleep):
        check = AsyncMock(side_effect=[None, None, "done"])

        result = await poll_until_ready(
            check, interval=2.0, max_attempts=5, timeout_message="late", sleep=mock_sleep
        )

        assert result == "done"
        assert check.await_count == 3
        assert mock_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_timeout_after_full_ceiling(self, mock_sleep):
        check = AsyncMock(return_value=None)

        with pytest.raises(PollTimeoutError) as exc_info:
            await poll_until_ready(
                check,
                interval=3.0,
                max_attempts=4,
                timeout_message="Timed out",
                sleep=mock_sleep,
                publish_id="p_1",
            )

        assert check.await_count == 4
        assert [call.args[0] for call in mock_sleep.await_args_list] == [3.0] * 4
        assert exc_info.value.waited_seconds == 12.0
        assert exc_info.value.publish_id == "p_1"
        assert str(exc_info.value) == "Timed out"

    @pytest.mark.asyncio
    async def test_check_error_aborts(self, mock_sleep):
        check = AsyncMock(side_effect=[None, PlatformAPIError("ERROR status")])

        with pytest.raises(PlatformAPIError):
            await poll_until_ready(
                check, interval=1.0, max_attempts=10, timeout_message="late", sleep=mock_sleep
            )
        assert check.await_count == 2

    @pytest.mark.asyncio
    async def test_attempt_numbers(self, mock_sleep):
        check = AsyncMock(side_effect=[None, True])
        await poll_until_ready(check, interval=1.0, max_attempts=3, timeout_message="", sleep=mock_sleep)
        assert [call.args[0] for call in check.await_args_list] == [1, 2]


class TestRequireImageCount:

    def test_in_range(self):
        require_image_count([b"a", b"b"], 2, 10, "bad {count}")

    def test_below_minimum(self):
        with pytest.raises(PublishValidationError, match="need 2-10, got 1"):
            require_image_count([b"a"], 2, 10, "need {minimum}-{maximum}, got {count}")

    def test_above_maximum(self):
        with pytest.raises(PublishValidationError):
            require_image_count([b"a"] * 11, 2, 10, "too many")

    def test_no_maximum(self):
        require_image_count([b"a"] * 50, 1, None, "none")


class TestPlatformHTTP:

    @pytest.mark.asyncio
    async def test_send_json_success(self):
        transport = RecordingTransport(lambda request: httpx.Response(200, json={"id": "42"}))
        async with httpx.AsyncClient(transport=transport) as client:
            http = PlatformHTTP(client, _logger)
            data = await http.send_json("post", "https://api.example.com/x", error_prefix="Nope")

        assert data == {"id": "42"}
        assert transport.requests[0].method == "POST"
        assert http.call_count == 1

    @pytest.mark.asyncio
    async def test_non_2xx_raises_with_status(self):
        transport = RecordingTransport(lambda request: httpx.Response(400, text="bad token"))
        async with httpx.AsyncClient(transport=transport) as client:
            http = PlatformHTTP(client, _logger)
            with pytest.raises(PlatformAPIError) as exc_info:
                await http.send("GET", "https://api.example.com/x", error_prefix="Lookup failed")

        assert exc_info.value.status_code == 400
        assert str(exc_info.value) == "Lookup failed: bad token"

    @pytest.mark.asyncio
    async def test_malformed_json(self):
        transport = RecordingTransport(lambda request: httpx.Response(200, text="<html>"))
        async with httpx.AsyncClient(transport=transport) as client:
            http = PlatformHTTP(client, _logger)
            with pytest.raises(PlatformAPIError, match="malformed reply"):
                await http.send_json("GET", "https://api.example.com/x", error_prefix="Lookup")

    @pytest.mark.asyncio
    async def test_transport_error_has_no_status(self):
        def fail(request):
            raise httpx.ConnectError("refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(fail)) as client:
            http = PlatformHTTP(client, _logger)
            with pytest.raises(PlatformAPIError) as exc_info:
                await http.send("GET", "https://api.example.com/x", error_prefix="Lookup")

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_query_string_not_logged(self, caplog):
        transport = RecordingTransport(lambda request: httpx.Response(200, json={}))
        caplog.set_level(logging.INFO, logger="test_http")
        async with httpx.AsyncClient(transport=transport) as client:
            http = PlatformHTTP(client, _logger)
            await http.send(
                "GET",
                "https://api.example.com/x?access_token=tok_secret",
                error_prefix="Lookup",
                params={"access_token": "tok_secret"},
            )

        assert "tok_secret" not in caplog.text
