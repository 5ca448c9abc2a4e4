"""
Tests for retry, backoff, rate-limit and timeout behaviour of the transport.

The remote service is an httpx.MockTransport; sleeping is recorded instead
of performed.
"""

import asyncio
import re

import httpx
import pytest

from converteverything_mcp.sdk.config import ClientConfig
from converteverything_mcp.sdk.exceptions import (
    APIError,
    NetworkError,
    RateLimitError,
    RequestTimeoutError,
)
from converteverything_mcp.sdk.transport import ResilientTransport
from tests.helpers.network import API_KEY, BASE_URL, api_path

USER_AGENT = "converteverything-mcp/test (Python)"
FORMATS = api_path("/convert/formats")


def ok():
    return httpx.Response(200, json={"formats": {}, "total_formats": 0})


@pytest.fixture
def make_transport(config, api, fake_sleep):
    def _make(**overrides):
        cfg = config
        if overrides:
            cfg = ClientConfig(
                api_key=API_KEY,
                base_url=BASE_URL,
                timeout=overrides.get("timeout", config.timeout),
                max_retries=overrides.get("max_retries", config.max_retries),
            )
        return ResilientTransport(
            cfg, USER_AGENT, http_transport=httpx.MockTransport(api), sleep=fake_sleep
        )

    return _make


@pytest.mark.unit
class TestRequestBuilding:
    @pytest.mark.asyncio
    async def test_url_and_headers(self, make_transport, api):
        api.add("GET", FORMATS, ok())
        async with make_transport() as transport:
            await transport.request_json("GET", "/convert/formats")

        request = api.requests[0]
        assert str(request.url) == f"{BASE_URL}/api/convert/formats"
        assert request.headers["Authorization"] == f"Bearer {API_KEY}"
        assert request.headers["User-Agent"] == USER_AGENT
        assert re.fullmatch(r"mcp-\d+-[a-z0-9]{7}", request.headers["X-Correlation-ID"])

    @pytest.mark.asyncio
    async def test_empty_body_returns_none(self, make_transport, api):
        api.add("DELETE", api_path("/convert/abc"), httpx.Response(204))
        transport = make_transport()
        assert await transport.request_json("DELETE", "/convert/abc") is None

    @pytest.mark.asyncio
    async def test_each_call_gets_new_correlation_id(self, make_transport, api):
        api.add("GET", FORMATS, ok())
        transport = make_transport()
        await transport.request_json("GET", "/convert/formats")
        await transport.request_json("GET", "/convert/formats")
        ids = {r.headers["X-Correlation-ID"] for r in api.requests}
        assert len(ids) == 2


@pytest.mark.unit
class TestStatusRetries:
    @pytest.mark.asyncio
    async def test_503_exhausts_retries_with_backoff(self, make_transport, api, fake_sleep):
        api.add("GET", FORMATS, httpx.Response(503))
        transport = make_transport()

        with pytest.raises(APIError) as exc_info:
            await transport.request_json("GET", "/convert/formats")

        assert len(api.requests) == 4
        assert fake_sleep.delays == [1.0, 2.0, 4.0]
        assert exc_info.value.status_code == 503
        assert exc_info.value.message.startswith("API error: 503 Service Unavailable")

    @pytest.mark.asyncio
    async def test_all_attempts_share_correlation_id(self, make_transport, api):
        api.add("GET", FORMATS, httpx.Response(502))
        transport = make_transport()

        with pytest.raises(APIError) as exc_info:
            await transport.request_json("GET", "/convert/formats")

        ids = {r.headers["X-Correlation-ID"] for r in api.requests}
        assert len(ids) == 1
        correlation_id = ids.pop()
        assert exc_info.value.correlation_id == correlation_id
        assert exc_info.value.message.endswith(f"(correlation-id: {correlation_id})")

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failure(self, make_transport, api, fake_sleep):
        api.add("GET", FORMATS, httpx.Response(500), httpx.Response(504), ok())
        transport = make_transport()

        data = await transport.request_json("GET", "/convert/formats")

        assert data == {"formats": {}, "total_formats": 0}
        assert len(api.requests) == 3
        assert fake_sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 403, 404, 422])
    async def test_client_errors_not_retried(self, make_transport, api, fake_sleep, status):
        api.add("GET", FORMATS, httpx.Response(status, json={"detail": "Nope"}))
        transport = make_transport()

        with pytest.raises(APIError) as exc_info:
            await transport.request_json("GET", "/convert/formats")

        assert len(api.requests) == 1
        assert fake_sleep.delays == []
        assert exc_info.value.status_code == status
        assert exc_info.value.detail == "Nope"
        assert exc_info.value.message.startswith("Nope (correlation-id: mcp-")

    @pytest.mark.asyncio
    async def test_zero_retries(self, make_transport, api, fake_sleep):
        api.add("GET", FORMATS, httpx.Response(503))
        transport = make_transport(max_retries=0)

        with pytest.raises(APIError):
            await transport.request_json("GET", "/convert/formats")

        assert len(api.requests) == 1
        assert fake_sleep.delays == []


@pytest.mark.unit
class TestRateLimit:
    @pytest.mark.asyncio
    async def test_retry_after_is_honoured(self, make_transport, api, fake_sleep):
        api.add(
            "GET",
            FORMATS,
            httpx.Response(429, headers={"Retry-After": "7"}),
            ok(),
        )
        transport = make_transport()

        await transport.request_json("GET", "/convert/formats")

        assert fake_sleep.delays == [7.0]

    @pytest.mark.asyncio
    async def test_429_without_hint_uses_backoff(self, make_transport, api, fake_sleep):
        api.add("GET", FORMATS, httpx.Response(429), httpx.Response(429), ok())
        transport = make_transport()

        await transport.request_json("GET", "/convert/formats")

        assert fake_sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_exhausted_rate_limit_reports_wait(self, make_transport, api, fake_sleep):
        api.add("GET", FORMATS, httpx.Response(429, headers={"Retry-After": "30"}))
        transport = make_transport()

        with pytest.raises(RateLimitError) as exc_info:
            await transport.request_json("GET", "/convert/formats")

        assert len(api.requests) == 4
        assert fake_sleep.delays == [30.0, 30.0, 30.0]
        assert exc_info.value.retry_after == 30
        assert exc_info.value.status_code == 429
        assert "Rate limit exceeded. Please wait 30 seconds before retrying." in str(
            exc_info.value
        )

    @pytest.mark.asyncio
    async def test_exhausted_without_hint_reports_default(self, make_transport, api):
        api.add("GET", FORMATS, httpx.Response(429))
        transport = make_transport(max_retries=1)

        with pytest.raises(RateLimitError) as exc_info:
            await transport.request_json("GET", "/convert/formats")

        assert exc_info.value.retry_after == 60
        assert "Please wait 60 seconds" in exc_info.value.message


@pytest.mark.unit
class TestNetworkFailures:
    @pytest.mark.asyncio
    async def test_connection_errors_retried_then_raised(self, make_transport, api, fake_sleep):
        api.add("GET", FORMATS, httpx.ConnectError("connection refused"))
        transport = make_transport()

        with pytest.raises(NetworkError) as exc_info:
            await transport.request_json("GET", "/convert/formats")

        assert not isinstance(exc_info.value, RequestTimeoutError)
        assert len(api.requests) == 4
        assert fake_sleep.delays == [1.0, 2.0, 4.0]
        assert "correlation-id: mcp-" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_recovers_after_connection_error(self, make_transport, api):
        api.add("GET", FORMATS, httpx.ConnectError("reset"), ok())
        transport = make_transport()

        assert await transport.request_json("GET", "/convert/formats") is not None
        assert len(api.requests) == 2

    @pytest.mark.asyncio
    async def test_timeouts_back_off(self, make_transport, api, fake_sleep):
        api.add("GET", FORMATS, httpx.ReadTimeout("slow"))
        transport = make_transport()

        with pytest.raises(RequestTimeoutError, match="timed out"):
            await transport.request_json("GET", "/convert/formats")

        assert len(api.requests) == 4
        assert fake_sleep.delays == [1.0, 2.0, 4.0]

    @pytest.mark.asyncio
    async def test_hard_timeout_aborts_slow_request(self, fake_sleep):
        async def slow_handler(request):
            await asyncio.sleep(10)
            return httpx.Response(200, json={})

        cfg = ClientConfig(api_key=API_KEY, base_url=BASE_URL, timeout=0.05, max_retries=0)
        transport = ResilientTransport(
            cfg,
            USER_AGENT,
            http_transport=httpx.MockTransport(slow_handler),
            sleep=fake_sleep,
        )

        with pytest.raises(RequestTimeoutError):
            await transport.request_json("GET", "/convert/formats")


@pytest.mark.unit
class TestFetch:
    @pytest.mark.asyncio
    async def test_fetch_is_unauthenticated(self, make_transport, api):
        api.add("GET", "/files/out.mp3", httpx.Response(200, content=b"ID3"))
        transport = make_transport()

        response = await transport.fetch("https://cdn.test/files/out.mp3")

        assert response.content == b"ID3"
        request = api.requests[0]
        assert "Authorization" not in request.headers
        assert request.headers["User-Agent"] == USER_AGENT

    @pytest.mark.asyncio
    async def test_fetch_single_attempt(self, make_transport, api):
        api.add("GET", "/files/out.mp3", httpx.ConnectError("down"))
        transport = make_transport()

        with pytest.raises(NetworkError, match="Download failed"):
            await transport.fetch("https://cdn.test/files/out.mp3")

        assert len(api.requests) == 1
