"""Command-line entry point.

Startup: parse arguments, configure logging, load endpoints (fatal on any
configuration error), wire SIGINT/SIGTERM to the stop event.
Shutdown: the loop exits at its next check point, then probes still in flight
are cancelled and the shared HTTP client is closed.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from collections.abc import Sequence

from uptime_monitor import __version__
from uptime_monitor.config.endpoints import Endpoint, load_endpoints
from uptime_monitor.config.settings import MonitorSettings
from uptime_monitor.errors import ConfigurationError
from uptime_monitor.logging_config import configure_logging
from uptime_monitor.services.monitor_loop import MonitorLoop

logger = logging.getLogger(__name__)

_STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uptime-monitor",
        description="Probe HTTP endpoints every 15s and report availability per domain.",
    )
    parser.add_argument("config", help="Path to the YAML endpoint file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Diagnostic log level (default: INFO)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit diagnostic logs as JSON lines",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def install_signal_handlers(loop: asyncio.AbstractEventLoop, stop: asyncio.Event) -> None:
    """Set *stop* on SIGINT/SIGTERM instead of killing the process."""
    for sig in _STOP_SIGNALS:
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            # No loop signal support (e.g. Windows); fall back to the
            # process handler and hop back onto the loop thread.
            signal.signal(sig, lambda _signum, _frame: loop.call_soon_threadsafe(stop.set))


async def run_monitor(endpoints: list[Endpoint], settings: MonitorSettings | None = None) -> None:
    stop = asyncio.Event()
    install_signal_handlers(asyncio.get_running_loop(), stop)
    monitor = MonitorLoop(endpoints, settings=settings)
    try:
        await monitor.run(stop)
    finally:
        await monitor.aclose()


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, json_output=args.json_logs)

    try:
        endpoints = load_endpoints(args.config)
    except ConfigurationError as exc:
        logger.error("%s", exc.message)
        sys.exit(1)

    asyncio.run(run_monitor(endpoints))


if __name__ == "__main__":
    main()
