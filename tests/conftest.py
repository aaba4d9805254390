"""Shared test fixtures for the monitor test suite."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import httpx
import pytest

from uptime_monitor.config.endpoints import Endpoint
from uptime_monitor.config.settings import MonitorSettings
from uptime_monitor.services.probe_executor import ProbeExecutor
from uptime_monitor.stats.registry import StatsRegistry


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def registry() -> StatsRegistry:
    return StatsRegistry()


@pytest.fixture
def fast_settings() -> MonitorSettings:
    """Shrunk timing so loop tests finish in well under a second."""
    return MonitorSettings(
        cycle_period_seconds=5.0,
        grace_period_seconds=0.1,
        probe_timeout_seconds=0.5,
    )


@pytest.fixture
def ok_executor(registry: StatsRegistry) -> ProbeExecutor:
    return ProbeExecutor(
        registry,
        transport=httpx.MockTransport(lambda request: httpx.Response(200)),
    )


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_endpoint() -> Callable[..., Endpoint]:
    def _make(
        name: str = "example",
        url: str = "https://example.com/health",
        **kwargs: object,
    ) -> Endpoint:
        return Endpoint(name=name, url=url, **kwargs)

    return _make


@pytest.fixture
def routing_transport() -> Callable[[dict[str, int]], httpx.MockTransport]:
    """Build a transport answering by URL path; unknown paths get 404."""

    def _make(routes: dict[str, int]) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(routes.get(request.url.path, 404))

        return httpx.MockTransport(handler)

    return _make


@pytest.fixture
def fixed_clock() -> Callable[..., Callable[[], float]]:
    """Build a clock returning the given readings in order, then the last one forever."""

    def _make(*readings: float) -> Callable[[], float]:
        values = list(readings)

        def clock() -> float:
            if len(values) > 1:
                return values.pop(0)
            return values[0]

        return clock

    return _make


# ---------------------------------------------------------------------------
# Local HTTP server
# ---------------------------------------------------------------------------


class _OkHandler(BaseHTTPRequestHandler):
    def do_GET(self) -> None:
        body = b"ok"
        self.send_response(200)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: object) -> None:
        pass


class _OkServer(ThreadingHTTPServer):
    # Room for a whole fan-out of simultaneous connects
    request_queue_size = 128


@pytest.fixture
def local_http_server(monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Serve 200 on 127.0.0.1 from a background thread; yields the base URL.

    Proxy variables are cleared so httpx's default transport connects directly.
    """
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY"):
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(name.lower(), raising=False)

    server = _OkServer(("127.0.0.1", 0), _OkHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
