"""Monitor loop: fire one probe per endpoint each cycle, then report.

One cycle:
1. dispatch a probe task per endpoint without awaiting any of them
2. wait the grace period
3. print the availability report from a registry snapshot
4. wait out the rest of the cycle period, measured from cycle start

The stop event is checked at the top of every cycle and also ends either
wait early. A stop during the grace wait still prints that cycle's report.
Probes still in flight when a report is printed, or when the loop stops,
are neither awaited nor cancelled by run(); their late updates land in the
cumulative counters. aclose() is the process-exit hook that cancels them.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from enum import Enum
from typing import TextIO

from uptime_monitor.config.endpoints import Endpoint
from uptime_monitor.config.settings import MonitorSettings
from uptime_monitor.services.probe_executor import ProbeExecutor, ProbeResult
from uptime_monitor.stats.registry import StatsRegistry
from uptime_monitor.stats.reporter import print_report, print_shutdown_notice

logger = logging.getLogger(__name__)


class LoopState(str, Enum):
    """Monitor loop states. STOPPED is terminal."""

    RUNNING = "running"
    STOPPED = "stopped"


async def _wait_for_stop(stop: asyncio.Event, timeout: float) -> bool:
    """Sleep up to *timeout* seconds; return True if *stop* was set."""
    if timeout <= 0:
        return stop.is_set()
    try:
        await asyncio.wait_for(stop.wait(), timeout=timeout)
    except asyncio.TimeoutError:
        return False
    return True


class MonitorLoop:
    """Schedules probe cycles and periodic reports until stopped.

    Parameters
    ----------
    endpoints:
        Endpoints to probe every cycle.
    settings:
        Cycle, grace and probe timing.
    registry:
        Shared counters; a fresh one is created when omitted.
    executor:
        Probe executor; built from *registry* and *settings* when omitted.
    report_stream:
        Where reports are written (stdout when None).
    """

    def __init__(
        self,
        endpoints: Iterable[Endpoint],
        *,
        settings: MonitorSettings | None = None,
        registry: StatsRegistry | None = None,
        executor: ProbeExecutor | None = None,
        report_stream: TextIO | None = None,
    ) -> None:
        self._endpoints = list(endpoints)
        self._settings = settings or MonitorSettings()
        self._registry = registry if registry is not None else StatsRegistry()
        self._executor = executor or ProbeExecutor(
            self._registry, timeout_seconds=self._settings.probe_timeout_seconds
        )
        self._report_stream = report_stream

        # Strong references so fire-and-forget probe tasks are not collected
        self._in_flight: set[asyncio.Task[ProbeResult]] = set()

        self._state: LoopState | None = None
        self._cycles = 0

    @property
    def registry(self) -> StatsRegistry:
        return self._registry

    @property
    def state(self) -> LoopState | None:
        """None before run() starts."""
        return self._state

    @property
    def cycles(self) -> int:
        """Number of cycles started."""
        return self._cycles

    @property
    def pending_probes(self) -> int:
        """Probe tasks dispatched but not yet finished."""
        return len(self._in_flight)

    # ------------------------------------------------------------------
    # Cycle steps
    # ------------------------------------------------------------------

    def seed(self) -> None:
        """Create a zeroed entry for every configured domain."""
        for endpoint in self._endpoints:
            self._registry.ensure(endpoint.domain)

    def dispatch(self) -> list[asyncio.Task[ProbeResult]]:
        """Start one probe task per endpoint and return without awaiting them."""
        tasks = []
        for endpoint in self._endpoints:
            task = asyncio.create_task(
                self._executor.probe(endpoint), name=f"probe-{endpoint.name}"
            )
            self._in_flight.add(task)
            task.add_done_callback(self._on_probe_done)
            tasks.append(task)
        logger.debug("Dispatched %d probes (cycle %d)", len(tasks), self._cycles)
        return tasks

    def report(self) -> None:
        print_report(self._registry.snapshot(), self._report_stream)

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    async def run(self, stop: asyncio.Event) -> None:
        """Run cycles until *stop* is set. Returns without joining probes."""
        if self._state is not None:
            raise RuntimeError("MonitorLoop.run() can only be called once")

        loop = asyncio.get_running_loop()
        self.seed()
        self._state = LoopState.RUNNING
        logger.info(
            "Monitoring %d endpoints across %d domains every %.0fs",
            len(self._endpoints),
            len(self._registry),
            self._settings.cycle_period_seconds,
        )

        while not stop.is_set():
            cycle_start = loop.time()
            self._cycles += 1
            self.dispatch()

            stopped = await _wait_for_stop(stop, self._settings.grace_period_seconds)
            self.report()
            if stopped:
                break

            remaining = self._settings.cycle_period_seconds - (loop.time() - cycle_start)
            await _wait_for_stop(stop, remaining)

        self._state = LoopState.STOPPED
        print_shutdown_notice(self._report_stream)
        logger.info(
            "Monitor loop stopped after %d cycles (%d probes still in flight)",
            self._cycles,
            self.pending_probes,
        )

    async def aclose(self) -> None:
        """Cancel probes still in flight and close the executor's client."""
        pending = list(self._in_flight)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        await self._executor.aclose()

    def _on_probe_done(self, task: asyncio.Task[ProbeResult]) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Probe task %s crashed: %s",
                task.get_name(),
                exc,
                exc_info=(type(exc), exc, exc.__traceback__),
            )
