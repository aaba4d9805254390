"""Property tests for structured logging.

Every record rendered by JsonFormatter is valid JSON carrying timestamp,
level, logger and message, plus any probe fields attached via ``extra``.
"""

from __future__ import annotations

import json
import logging

from hypothesis import given, settings
from hypothesis import strategies as st

from uptime_monitor.logging_config import JsonFormatter


# --- Strategies ---

messages = st.text(min_size=1, max_size=200)
levels = st.sampled_from(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
endpoint_names = st.text(min_size=1, max_size=40)
domains = st.from_regex(r"[a-z]{3,10}\.[a-z]{2,4}", fullmatch=True)
durations = st.floats(min_value=0.0, max_value=60000.0, allow_nan=False, allow_infinity=False)
status_codes = st.integers(min_value=100, max_value=599)


def _make_record(message: str, level: str = "INFO", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test",
        level=getattr(logging, level),
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@settings(max_examples=100)
@given(message=messages, level=levels)
def test_structured_log_format_basic(message: str, level: str) -> None:
    parsed = json.loads(JsonFormatter().format(_make_record(message, level=level)))

    assert parsed["level"] == level
    assert parsed["message"] == message
    assert parsed["logger"] == "test"
    assert "timestamp" in parsed


@settings(max_examples=100)
@given(
    message=messages,
    endpoint=endpoint_names,
    domain=domains,
    status_code=status_codes,
    duration_ms=durations,
)
def test_structured_log_format_probe_fields(
    message: str,
    endpoint: str,
    domain: str,
    status_code: int,
    duration_ms: float,
) -> None:
    record = _make_record(
        message,
        level="WARNING",
        endpoint=endpoint,
        domain=domain,
        status_code=status_code,
        duration_ms=duration_ms,
    )
    parsed = json.loads(JsonFormatter().format(record))

    assert parsed["endpoint"] == endpoint
    assert parsed["domain"] == domain
    assert parsed["status_code"] == status_code
    assert parsed["duration_ms"] == duration_ms
