"""Tests for the URL health checker.

``respx`` patches ``httpx`` at the transport layer so no real network calls
are made. Slow and crashing servers are simulated with ``httpx.MockTransport``.
"""

import asyncio
from datetime import UTC, datetime
from unittest.mock import patch

import httpx
import pytest
import respx

from app.services.health_checker import (
    HEALTH_CHECK_TIMEOUT_SECONDS,
    HealthChecker,
    ProbeOutcome,
)

from conftest import ticking_clock

URL = "https://example.com/"

_PAGE_HTML = """\
<!DOCTYPE html>
<html>
<head>
  <title>  Example Domain </title>
  <meta name="description" content=" An example page ">
</head>
<body><p>Hello</p></body>
</html>
"""


@pytest.fixture()
async def checker():
    async with HealthChecker(clock=ticking_clock()) as checker:
        yield checker


class TestHealthyResponse:
    @respx.mock
    async def test_extracts_metadata(self, checker) -> None:
        respx.get(URL).mock(return_value=httpx.Response(200, html=_PAGE_HTML))

        result = await checker.check_health(URL)

        assert result.outcome is ProbeOutcome.RESPONSE
        assert result.is_healthy is True
        assert result.status_code == 200
        assert result.title == "Example Domain"
        assert result.description == "An example page"
        assert result.error_message is None
        assert result.response_time_ms >= 0

    @respx.mock
    async def test_any_2xx_is_healthy(self, checker) -> None:
        respx.get(URL).mock(return_value=httpx.Response(204))

        result = await checker.check_health(URL)

        assert result.is_healthy is True
        assert result.status_code == 204
        assert result.title is None

    @respx.mock
    async def test_follows_redirects(self, checker) -> None:
        respx.get("https://old.example.com/").mock(
            return_value=httpx.Response(301, headers={"Location": URL})
        )
        respx.get(URL).mock(return_value=httpx.Response(200, html=_PAGE_HTML))

        result = await checker.check_health("https://old.example.com/")

        assert result.status_code == 200
        assert result.title == "Example Domain"

    @respx.mock
    async def test_extraction_failure_keeps_result_healthy(self, checker) -> None:
        respx.get(URL).mock(return_value=httpx.Response(200, html=_PAGE_HTML))

        with patch(
            "app.services.health_checker.extract_metadata",
            side_effect=ValueError("broken parser"),
        ):
            result = await checker.check_health(URL)

        assert result.is_healthy is True
        assert result.status_code == 200
        assert result.title is None
        assert result.description is None
        assert result.error_message is None

    @respx.mock
    async def test_checked_at_comes_from_clock(self) -> None:
        respx.get(URL).mock(return_value=httpx.Response(200))
        moment = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)

        async with HealthChecker(clock=lambda: moment) as checker:
            result = await checker.check_health(URL)

        assert result.checked_at == moment


class TestHttpFailure:
    @pytest.mark.parametrize(
        ("code", "message"),
        [
            (404, "HTTP 404: Not Found"),
            (500, "HTTP 500: Internal Server Error"),
            (503, "HTTP 503: Service Unavailable"),
        ],
    )
    @respx.mock
    async def test_error_status(self, checker, code: int, message: str) -> None:
        respx.get(URL).mock(return_value=httpx.Response(code, html=_PAGE_HTML))

        result = await checker.check_health(URL)

        assert result.outcome is ProbeOutcome.RESPONSE
        assert result.is_healthy is False
        assert result.status_code == code
        assert result.error_message == message
        # No extraction on failed responses
        assert result.title is None


class TestTransportFailure:
    @pytest.mark.parametrize(
        "error", [httpx.ConnectTimeout, httpx.ReadTimeout, httpx.PoolTimeout]
    )
    @respx.mock
    async def test_httpx_timeout(self, checker, error) -> None:
        respx.get(URL).mock(side_effect=error)

        result = await checker.check_health(URL)

        assert result.outcome is ProbeOutcome.TIMEOUT
        assert result.is_healthy is False
        assert result.status_code is None
        assert "Timeout" in result.error_message
        assert result.response_time_ms >= 0

    async def test_whole_request_budget(self) -> None:
        async def slow_server(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200)

        async with HealthChecker(transport=httpx.MockTransport(slow_server)) as checker:
            result = await checker.check_health(URL, timeout=0.05)

        assert result.outcome is ProbeOutcome.TIMEOUT
        assert result.error_message.startswith("Timeout: ")
        assert 40 <= result.response_time_ms < 5000

    @pytest.mark.parametrize(
        "error", [httpx.ConnectError, httpx.RemoteProtocolError, httpx.ReadError]
    )
    @respx.mock
    async def test_network_error(self, checker, error) -> None:
        respx.get(URL).mock(side_effect=error)

        result = await checker.check_health(URL)

        assert result.outcome is ProbeOutcome.NETWORK_ERROR
        assert result.is_healthy is False
        assert result.error_message.startswith("Network error: ")
        assert "Timeout" not in result.error_message

    async def test_unexpected_error(self) -> None:
        def crashing_server(request: httpx.Request) -> httpx.Response:
            raise RuntimeError("boom")

        async with HealthChecker(transport=httpx.MockTransport(crashing_server)) as checker:
            result = await checker.check_health(URL)

        assert result.outcome is ProbeOutcome.UNEXPECTED_ERROR
        assert result.is_healthy is False
        assert result.error_message == "Unexpected error: boom"


async def test_default_timeout_is_thirty_seconds() -> None:
    assert HEALTH_CHECK_TIMEOUT_SECONDS == 30.0
    async with HealthChecker() as checker:
        assert checker.timeout_seconds == 30.0
