"""Fixed timing constants for the monitor loop and probes.

These are not read from the environment or the command line. The model only
gathers them into one typed object handed to the loop.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MonitorSettings(BaseModel):
    """Cycle timing and probe timeout, in seconds."""

    model_config = ConfigDict(frozen=True)

    cycle_period_seconds: float = Field(default=15.0, gt=0)
    grace_period_seconds: float = Field(default=3.0, ge=0)
    probe_timeout_seconds: float = Field(default=0.5, gt=0)
