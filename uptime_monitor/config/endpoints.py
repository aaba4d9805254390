"""Endpoint model and YAML loader.

The endpoint file is a YAML list of records::

    - name: example index
      url: https://example.com/
      method: GET
      headers:
        user-agent: uptime-monitor
      body: ""

Only ``name`` and ``url`` are required. Any problem reading or validating the
file raises ConfigurationError, which is fatal at startup.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from uptime_monitor.errors import ConfigurationError
from uptime_monitor.stats.domain import extract_domain

logger = logging.getLogger(__name__)


class Endpoint(BaseModel):
    """One configured probe target. Immutable for the process lifetime."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    method: str = "GET"
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""

    @field_validator("headers", mode="before")
    @classmethod
    def _none_headers(cls, value: object) -> object:
        return {} if value is None else value

    @field_validator("body", mode="before")
    @classmethod
    def _none_body(cls, value: object) -> object:
        return "" if value is None else value

    @property
    def domain(self) -> str:
        """Aggregation key for this endpoint's stats."""
        return extract_domain(self.url)


def load_endpoints(config_path: str | Path) -> list[Endpoint]:
    """Parse an endpoint YAML file into Endpoint objects.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        The endpoints in file order.

    Raises:
        ConfigurationError: The file is missing, unreadable, not valid YAML,
            not a list, or contains an invalid record.
    """
    path = Path(config_path)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            f"Error reading file {path}: {exc}", path=str(path)
        ) from exc

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Error parsing YAML {path}: {exc}", path=str(path)
        ) from exc

    if raw is None:
        raw = []
    if not isinstance(raw, list):
        raise ConfigurationError(
            f"Error parsing YAML {path}: top level must be a list of endpoints",
            path=str(path),
        )

    endpoints: list[Endpoint] = []
    for index, item in enumerate(raw):
        try:
            endpoints.append(Endpoint.model_validate(item))
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid endpoint #{index} in {path}: {exc}",
                path=str(path),
                index=index,
            ) from exc

    logger.info("Loaded %d endpoints from %s", len(endpoints), path)
    return endpoints
