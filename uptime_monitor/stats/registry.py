"""Shared per-domain success/total counters.

Every probe writes here and the reporter reads a snapshot once per cycle.
All access goes through one lock, held only for in-memory updates and the
snapshot copy, never across network I/O. A ``threading.Lock`` is used rather
than ``asyncio.Lock`` so writers on other OS threads are serialized too.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace

from uptime_monitor.errors import StatsInvariantError


@dataclass
class DomainStats:
    """Cumulative counters for one domain. Invariant: 0 <= success <= total."""

    success: int = 0
    total: int = 0

    @property
    def availability(self) -> int:
        """Whole-number availability percentage, 0 when nothing was attempted."""
        if self.total <= 0:
            return 0
        # Round half up; round() would round 12.5 down to 12
        return int(100 * self.success / self.total + 0.5)


class StatsRegistry:
    """Thread-safe mapping from domain label to DomainStats.

    Entries are created on first reference and never removed. Iteration
    order (and therefore report order) is first-reference order.
    """

    def __init__(self) -> None:
        self._stats: dict[str, DomainStats] = {}
        self._lock = threading.Lock()

    def _get_or_create(self, domain: str) -> DomainStats:
        """Caller must hold the lock."""
        stats = self._stats.get(domain)
        if stats is None:
            stats = self._stats[domain] = DomainStats()
        return stats

    def ensure(self, domain: str) -> DomainStats:
        """Create a zeroed entry for *domain* if absent and return it.

        The returned object is the live entry; update it only through the
        registry's increment methods.
        """
        with self._lock:
            return self._get_or_create(domain)

    def increment_total(self, domain: str) -> None:
        """Count one attempted probe for *domain*."""
        with self._lock:
            self._get_or_create(domain).total += 1

    def increment_success(self, domain: str) -> None:
        """Count one successful probe for *domain*.

        Raises
        ------
        StatsInvariantError
            If the attempt was not counted first (success would exceed total).
        """
        with self._lock:
            stats = self._get_or_create(domain)
            if stats.success >= stats.total:
                raise StatsInvariantError(
                    f"success increment for '{domain}' without a matching attempt",
                    domain=domain,
                    success=stats.success,
                    total=stats.total,
                )
            stats.success += 1

    def snapshot(self) -> dict[str, DomainStats]:
        """Return independent copies of all entries, taken under the lock."""
        with self._lock:
            return {domain: replace(stats) for domain, stats in self._stats.items()}

    def domains(self) -> list[str]:
        with self._lock:
            return list(self._stats)

    def __contains__(self, domain: object) -> bool:
        with self._lock:
            return domain in self._stats

    def __len__(self) -> int:
        with self._lock:
            return len(self._stats)
