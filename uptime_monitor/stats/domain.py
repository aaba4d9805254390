"""Domain label extraction for aggregating probe results."""

from __future__ import annotations

from urllib.parse import urlsplit


def extract_domain(raw_url: str) -> str:
    """Return the host of *raw_url* for use as an aggregation key.

    The structured parse yields the hostname without scheme or port, with
    its letters lowercased (``API.Example.com`` becomes ``api.example.com``),
    so differently-cased spellings of one host share a label. When
    the address does not parse, or parses without a host (``example.com/path``),
    fall back to the text after the first ``//`` up to the next ``/``, kept as
    written.
    Never raises; pathological input may come back unchanged.
    """
    try:
        host = urlsplit(raw_url).hostname
    except ValueError:
        host = None
    if host:
        return host

    tail = raw_url.split("//", 1)[-1]
    return tail.split("/", 1)[0]
