"""Probe execution and the monitor loop."""

from uptime_monitor.services.monitor_loop import LoopState, MonitorLoop
from uptime_monitor.services.probe_executor import (
    ProbeExecutor,
    ProbeOutcome,
    ProbeResult,
)

__all__ = [
    "LoopState",
    "MonitorLoop",
    "ProbeExecutor",
    "ProbeOutcome",
    "ProbeResult",
]
