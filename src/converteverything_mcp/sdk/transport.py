"""
HTTP transport with timeout enforcement, retries and rate-limit handling.

One ``request`` call is one logical call: it gets a single correlation ID
shared by every attempt, and at most ``max_retries`` attempts beyond the
first.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from .config import ClientConfig, get_logger
from .core.remote import (
    CORRELATION_HEADER,
    DEFAULT_RATE_LIMIT_WAIT,
    RATE_LIMIT_STATUS,
    build_auth_headers,
    calculate_retry_delay,
    extract_error_message,
    generate_correlation_id,
    is_retryable_status,
    parse_retry_after,
    with_correlation_id,
)
from .exceptions import APIError, NetworkError, RateLimitError, RequestTimeoutError

BASE_RETRY_DELAY = 1.0  # seconds
API_PREFIX = "/api"

Sleep = Callable[[float], Awaitable[Any]]

logger = get_logger("transport")


class ResilientTransport:
    """
    Retrying wrapper around ``httpx.AsyncClient``.

    Args:
        config: Validated client configuration
        user_agent: Value for the User-Agent header
        http_transport: Optional httpx transport, e.g. ``httpx.MockTransport``
        sleep: Coroutine used between attempts
    """

    def __init__(
        self,
        config: ClientConfig,
        user_agent: str,
        *,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.config = config
        self.user_agent = user_agent
        self._sleep = sleep
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout),
            transport=http_transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    def api_url(self, endpoint: str) -> str:
        return f"{self.config.base_url}{API_PREFIX}{endpoint}"

    async def _attempt(self, method: str, url: str, **kwargs) -> httpx.Response:
        return await asyncio.wait_for(
            self._client.request(method, url, **kwargs), timeout=self.config.timeout
        )

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> httpx.Response:
        """
        Perform one logical call with retries.

        Transient statuses (408, 429, 5xx gateway family), network errors and
        timeouts are retried with exponential backoff; a 429 carrying Retry-After
        waits that many seconds instead. When retries run out the last response
        is returned, except for 429 which raises RateLimitError.
        """
        correlation_id = generate_correlation_id()
        headers = {**(headers or {}), CORRELATION_HEADER: correlation_id}
        max_retries = self.config.max_retries

        for attempt in range(max_retries + 1):
            last_attempt = attempt == max_retries

            try:
                response = await self._attempt(method, url, headers=headers, **kwargs)
            except (asyncio.TimeoutError, httpx.TimeoutException) as e:
                if last_attempt:
                    raise RequestTimeoutError(
                        with_correlation_id(
                            f"Request timed out after {self.config.timeout:g}s",
                            correlation_id,
                        ),
                        {"correlation_id": correlation_id, "attempts": attempt + 1},
                    ) from e
                delay = calculate_retry_delay(attempt, BASE_RETRY_DELAY)
                logger.warning(
                    "Timeout on %s %s (attempt %d/%d, id=%s), retrying in %.1fs",
                    method, url, attempt + 1, max_retries + 1, correlation_id, delay,
                )
                await self._sleep(delay)
                continue
            except httpx.TransportError as e:
                if last_attempt:
                    raise NetworkError(
                        with_correlation_id(f"Network error: {e}", correlation_id),
                        {"correlation_id": correlation_id, "attempts": attempt + 1},
                    ) from e
                delay = calculate_retry_delay(attempt, BASE_RETRY_DELAY)
                logger.warning(
                    "Network error on %s %s: %s (id=%s), retrying in %.1fs",
                    method, url, e, correlation_id, delay,
                )
                await self._sleep(delay)
                continue

            status = response.status_code
            if not is_retryable_status(status):
                return response

            retry_after = None
            if status == RATE_LIMIT_STATUS:
                retry_after = parse_retry_after(response.headers.get("Retry-After"))
                if last_attempt:
                    wait = retry_after or DEFAULT_RATE_LIMIT_WAIT
                    raise RateLimitError(
                        with_correlation_id(
                            f"Rate limit exceeded. Please wait {wait} seconds "
                            "before retrying.",
                            correlation_id,
                        ),
                        retry_after=wait,
                        correlation_id=correlation_id,
                    )

            if last_attempt:
                return response

            delay = calculate_retry_delay(attempt, BASE_RETRY_DELAY, retry_after)
            logger.info(
                "HTTP %d on %s %s (id=%s), retry %d/%d in %.1fs",
                status, method, url, correlation_id, attempt + 1, max_retries, delay,
            )
            await self._sleep(delay)

        # Only reachable with max_retries < 0, which ClientConfig rejects
        raise NetworkError(with_correlation_id("Request failed", correlation_id))

    async def request_json(self, method: str, endpoint: str, **kwargs) -> Any:
        """Authenticated API call; returns decoded JSON or None for an empty body."""
        headers = build_auth_headers(self.config.api_key, self.user_agent)
        response = await self.request(
            method, self.api_url(endpoint), headers=headers, **kwargs
        )
        correlation_id = response.request.headers.get(CORRELATION_HEADER, "")

        if not response.is_success:
            message, detail = extract_error_message(response)
            raise APIError(
                with_correlation_id(message, correlation_id),
                status_code=response.status_code,
                detail=detail,
                correlation_id=correlation_id,
            )

        if not response.content:
            return None
        return response.json()

    async def fetch(self, url: str) -> httpx.Response:
        """Single unauthenticated GET of a download locator."""
        try:
            return await self._attempt("GET", url, headers={"User-Agent": self.user_agent})
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise RequestTimeoutError(
                f"Download timed out after {self.config.timeout:g}s"
            ) from e
        except httpx.TransportError as e:
            raise NetworkError(f"Download failed: {e}") from e
