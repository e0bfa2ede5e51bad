"""Health checker - probes a URL and extracts page metadata."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

import httpx

from app.services.metadata import extract_metadata

logger = logging.getLogger(__name__)

HEALTH_CHECK_TIMEOUT_SECONDS = 30.0


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ProbeOutcome(str, Enum):
    """How a probe ended. Any received HTTP response counts as RESPONSE."""

    RESPONSE = "response"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    UNEXPECTED_ERROR = "unexpected_error"


@dataclass
class HealthCheckResult:
    """Result of one probe. Not persisted; the link updater copies it onto a PageLink."""

    outcome: ProbeOutcome
    is_healthy: bool
    response_time_ms: int
    checked_at: datetime
    status_code: int | None = None
    title: str | None = None
    description: str | None = None
    error_message: str | None = None


class HealthChecker:
    """
    Checks whether a URL is reachable and records what it finds.

    One GET per call, bounded by a timeout that covers the whole request.
    Every failure is turned into a HealthCheckResult; check_health never
    raises. The underlying httpx client is shared by all calls, so a single
    instance can serve concurrent checks of different URLs.
    """

    def __init__(
        self,
        timeout_seconds: float = HEALTH_CHECK_TIMEOUT_SECONDS,
        user_agent: str = "LinkManager-HealthCheck/1.0",
        clock: Callable[[], datetime] = _utcnow,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self.http = httpx.AsyncClient(
            timeout=timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": user_agent},
            transport=transport,
        )

    async def __aenter__(self) -> "HealthChecker":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.http.aclose()

    async def check_health(self, url: str, timeout: float | None = None) -> HealthCheckResult:
        """Probe url with a GET and return the classified result.

        Args:
            url: Absolute URL to check.
            timeout: Seconds allowed for the whole request. Defaults to the
                checker's timeout (30s).
        """
        budget = timeout if timeout is not None else self.timeout_seconds
        logger.info("Starting health check for %s", url)
        started = time.perf_counter()

        try:
            async with asyncio.timeout(budget):
                response = await self.http.get(url, timeout=budget)
        except (TimeoutError, httpx.TimeoutException) as e:
            elapsed = _elapsed_ms(started)
            logger.warning("Timeout checking %s after %dms: %r", url, elapsed, e)
            return self._failure(
                ProbeOutcome.TIMEOUT,
                elapsed,
                f"Timeout: request exceeded the {budget:g}s time limit",
            )
        except httpx.RequestError as e:
            elapsed = _elapsed_ms(started)
            logger.error("Network error checking %s", url, exc_info=True)
            return self._failure(
                ProbeOutcome.NETWORK_ERROR, elapsed, f"Network error: {_describe(e)}"
            )
        except Exception as e:
            elapsed = _elapsed_ms(started)
            logger.exception("Unexpected error checking %s", url)
            return self._failure(
                ProbeOutcome.UNEXPECTED_ERROR, elapsed, f"Unexpected error: {_describe(e)}"
            )

        elapsed = _elapsed_ms(started)
        logger.info(
            "Response received from %s: status=%d time=%dms",
            url,
            response.status_code,
            elapsed,
        )

        title = description = error_message = None
        is_healthy = response.is_success

        if is_healthy:
            try:
                metadata = extract_metadata(response.text)
                title, description = metadata.title, metadata.description
            except Exception:
                logger.warning("Could not read body of %s", url, exc_info=True)
        else:
            error_message = f"HTTP {response.status_code}: {response.reason_phrase}"

        return HealthCheckResult(
            outcome=ProbeOutcome.RESPONSE,
            is_healthy=is_healthy,
            status_code=response.status_code,
            response_time_ms=elapsed,
            title=title,
            description=description,
            error_message=error_message,
            checked_at=self._clock(),
        )

    def _failure(self, outcome: ProbeOutcome, elapsed_ms: int, message: str) -> HealthCheckResult:
        return HealthCheckResult(
            outcome=outcome,
            is_healthy=False,
            response_time_ms=elapsed_ms,
            error_message=message,
            checked_at=self._clock(),
        )


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _describe(error: Exception) -> str:
    return str(error) or type(error).__name__
