"""Probe executor: one bounded request per endpoint, classified and counted.

Lifecycle of a single probe:
ensure domain entry → build request → send (500 ms bound, connect through
body read) → count the attempt → classify → count the success.

Classification, first match wins:
- request could not be built → failure, attempt counted, nothing sent
- transport error or timeout → failure
- status outside 200-299 → failure
- duration above the timeout → failure (slow)
- otherwise → success

Probe-level errors never leave ``probe()``; they end up in the registry
counters and one log line tagged with the endpoint name.

All probes share one ``httpx.AsyncClient``. It is built on first use, before
any request is timed, and released by ``aclose()`` or the async context
manager.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import httpx

from uptime_monitor.config.endpoints import Endpoint
from uptime_monitor.errors import RequestBuildError
from uptime_monitor.stats.registry import StatsRegistry

logger = logging.getLogger(__name__)

# RFC 7230 token characters
_METHOD_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


class ProbeOutcome(str, Enum):
    """How a single probe was classified."""

    SUCCESS = "success"
    BUILD_ERROR = "build_error"
    TRANSPORT_ERROR = "transport_error"
    BAD_STATUS = "bad_status"
    SLOW = "slow"


@dataclass
class ProbeResult:
    """Outcome of one probe, returned for callers and tests."""

    endpoint: str
    domain: str
    outcome: ProbeOutcome
    status_code: int | None = None
    duration_ms: float | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is ProbeOutcome.SUCCESS


class ProbeExecutor:
    """Runs single probes and records them in a StatsRegistry.

    Parameters
    ----------
    registry:
        Shared counters updated by every probe.
    timeout_seconds:
        Bound on the whole request and the slow-response threshold.
    transport:
        Optional httpx transport; tests pass ``httpx.MockTransport``.
    clock:
        Monotonic clock used to time the request.
    """

    def __init__(
        self,
        registry: StatsRegistry,
        *,
        timeout_seconds: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._registry = registry
        self._timeout_seconds = timeout_seconds
        self._transport = transport
        self._clock = clock
        self._client: httpx.AsyncClient | None = None

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            # No pool cap: a cycle fans out one request per endpoint at once
            self._client = httpx.AsyncClient(
                transport=self._transport,
                timeout=self._timeout_seconds,
                limits=httpx.Limits(max_connections=None, max_keepalive_connections=None),
            )
        return self._client

    async def aclose(self) -> None:
        """Close the shared client. A later probe builds a fresh one."""
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def __aenter__(self) -> ProbeExecutor:
        self._get_client()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_request(self, endpoint: Endpoint) -> httpx.Request:
        """Build the request for *endpoint*.

        Headers are applied in mapping order; a later key replaces an earlier
        one that differs only in case.

        Raises
        ------
        RequestBuildError
            If the method is not an HTTP token or the URL or headers are invalid.
        """
        method = endpoint.method or "GET"
        if not _METHOD_TOKEN.fullmatch(method):
            raise RequestBuildError(f"invalid method {method!r}", method=method)

        try:
            url = httpx.URL(endpoint.url)
            headers = httpx.Headers()
            for key, value in endpoint.headers.items():
                headers[key] = value
            content = endpoint.body.encode("utf-8") if endpoint.body else None
            return httpx.Request(method, url, headers=headers, content=content)
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise RequestBuildError(str(exc), url=endpoint.url) from exc

    async def probe(self, endpoint: Endpoint) -> ProbeResult:
        """Probe *endpoint* once and update the registry for its domain."""
        domain = endpoint.domain
        self._registry.ensure(domain)

        try:
            request = self.build_request(endpoint)
        except RequestBuildError as exc:
            self._registry.increment_total(domain)
            logger.error(
                "Error creating request for %s: %s",
                endpoint.name,
                exc.message,
                extra={"endpoint": endpoint.name, "domain": domain, "error_reason": exc.message},
            )
            return ProbeResult(endpoint.name, domain, ProbeOutcome.BUILD_ERROR, error=exc.message)

        client = self._get_client()
        start = self._clock()
        try:
            response = await asyncio.wait_for(
                client.send(request), timeout=self._timeout_seconds
            )
        except (httpx.HTTPError, asyncio.TimeoutError, OSError) as exc:
            duration_ms = (self._clock() - start) * 1000
            self._registry.increment_total(domain)
            reason = self._describe_error(exc)
            logger.error(
                "Request error for %s: %s",
                endpoint.name,
                reason,
                extra={
                    "endpoint": endpoint.name,
                    "domain": domain,
                    "duration_ms": round(duration_ms, 1),
                    "error_reason": reason,
                },
            )
            return ProbeResult(
                endpoint.name,
                domain,
                ProbeOutcome.TRANSPORT_ERROR,
                duration_ms=duration_ms,
                error=reason,
            )
        duration_ms = (self._clock() - start) * 1000

        self._registry.increment_total(domain)
        return self._classify(endpoint, domain, response.status_code, duration_ms)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _classify(
        self, endpoint: Endpoint, domain: str, status_code: int, duration_ms: float
    ) -> ProbeResult:
        """Turn a received response into a verdict; count it if successful."""
        fields = {
            "endpoint": endpoint.name,
            "domain": domain,
            "status_code": status_code,
            "duration_ms": round(duration_ms, 1),
        }
        limit_ms = self._timeout_seconds * 1000

        if not 200 <= status_code <= 299:
            logger.warning(
                "Non-2xx response for %s: %d", endpoint.name, status_code, extra=fields
            )
            outcome = ProbeOutcome.BAD_STATUS
        elif duration_ms > limit_ms:
            logger.warning(
                "Slow response for %s: %.0fms > %.0fms",
                endpoint.name,
                duration_ms,
                limit_ms,
                extra=fields,
            )
            outcome = ProbeOutcome.SLOW
        else:
            self._registry.increment_success(domain)
            logger.debug("Probe ok for %s (%.0fms)", endpoint.name, duration_ms, extra=fields)
            outcome = ProbeOutcome.SUCCESS

        return ProbeResult(
            endpoint.name,
            domain,
            outcome,
            status_code=status_code,
            duration_ms=duration_ms,
        )

    def _describe_error(self, exc: BaseException) -> str:
        if isinstance(exc, (asyncio.TimeoutError, httpx.TimeoutException)):
            return f"timed out after {self._timeout_seconds * 1000:.0f}ms"
        return str(exc) or type(exc).__name__
