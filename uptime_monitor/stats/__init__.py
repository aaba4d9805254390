"""Per-domain aggregation: domain labels, shared counters, reporting."""

from uptime_monitor.stats.domain import extract_domain
from uptime_monitor.stats.registry import DomainStats, StatsRegistry
from uptime_monitor.stats.reporter import (
    availability_percent,
    print_report,
    print_shutdown_notice,
    render_report,
)

__all__ = [
    "DomainStats",
    "StatsRegistry",
    "availability_percent",
    "extract_domain",
    "print_report",
    "print_shutdown_notice",
    "render_report",
]
