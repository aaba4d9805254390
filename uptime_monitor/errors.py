"""Error hierarchy for the uptime monitor.

All monitor-specific errors extend MonitorError. Only ConfigurationError is
fatal; RequestBuildError is absorbed by the probe executor and counted as a
failed attempt.
"""

from __future__ import annotations


class MonitorError(Exception):
    """Base error for all monitor-specific errors."""

    message: str = "Monitor error"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(MonitorError):
    """Endpoint file missing, unreadable, or not a valid endpoint list."""

    message = "Invalid endpoint configuration"


class RequestBuildError(MonitorError):
    """Probe request could not be constructed (bad method or URL)."""

    message = "Could not build probe request"


class StatsInvariantError(MonitorError):
    """A counter update would break 0 <= success <= total."""

    message = "Domain stats invariant violated"
