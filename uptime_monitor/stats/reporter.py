"""Console availability report."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from typing import TextIO

from uptime_monitor.stats.registry import DomainStats

REPORT_HEADER = "----- AVAILABILITY REPORT -----"
REPORT_FOOTER = "-" * 32
SHUTDOWN_NOTICE = "Stopping monitoring service..."


def availability_percent(stats: DomainStats) -> int:
    return stats.availability


def render_report(snapshot: Mapping[str, DomainStats]) -> list[str]:
    """Render one ``<domain> - <pct>% availability`` line per domain, framed
    by the header and footer lines. Domains keep the snapshot's order.
    """
    lines = [REPORT_HEADER]
    for domain, stats in snapshot.items():
        lines.append(f"{domain} - {availability_percent(stats)}% availability")
    lines.append(REPORT_FOOTER)
    return lines


def print_report(snapshot: Mapping[str, DomainStats], stream: TextIO | None = None) -> None:
    """Write the rendered report to *stream* (stdout by default)."""
    out = stream if stream is not None else sys.stdout
    for line in render_report(snapshot):
        print(line, file=out)
    out.flush()


def print_shutdown_notice(stream: TextIO | None = None) -> None:
    out = stream if stream is not None else sys.stdout
    print(SHUTDOWN_NOTICE, file=out)
    out.flush()
