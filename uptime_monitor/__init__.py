"""Uptime monitor: periodic endpoint probing with per-domain availability."""

__version__ = "1.0.0"
