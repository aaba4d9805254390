"""Property tests for the availability report.

Validates that every known domain appears exactly once, in snapshot order,
and that percentages equal 100 * success / total rounded half up.
"""

from __future__ import annotations

import math
from fractions import Fraction

from hypothesis import given, settings
from hypothesis import strategies as st

from uptime_monitor.stats.registry import DomainStats
from uptime_monitor.stats.reporter import REPORT_FOOTER, REPORT_HEADER, render_report


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

domain_names = st.from_regex(r"[a-z]{3,10}\.(com|org|net|io)", fullmatch=True)

counter_pairs = st.integers(min_value=0, max_value=10_000).flatmap(
    lambda total: st.tuples(st.integers(min_value=0, max_value=total), st.just(total))
)

snapshots = st.dictionaries(
    keys=domain_names,
    values=counter_pairs.map(lambda pair: DomainStats(success=pair[0], total=pair[1])),
    max_size=20,
)


def _expected_percent(stats: DomainStats) -> int:
    if stats.total == 0:
        return 0
    return math.floor(Fraction(100 * stats.success, stats.total) + Fraction(1, 2))


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


@settings(max_examples=100)
@given(snapshot=snapshots)
def test_every_domain_listed_once_in_order(snapshot: dict[str, DomainStats]) -> None:
    lines = render_report(snapshot)

    assert lines[0] == REPORT_HEADER
    assert lines[-1] == REPORT_FOOTER
    body = lines[1:-1]
    assert [line.split(" - ", 1)[0] for line in body] == list(snapshot)


@settings(max_examples=200)
@given(snapshot=snapshots)
def test_percentages_round_half_up(snapshot: dict[str, DomainStats]) -> None:
    for line, (domain, stats) in zip(render_report(snapshot)[1:-1], snapshot.items()):
        assert line == f"{domain} - {_expected_percent(stats)}% availability"


@settings(max_examples=100)
@given(pair=counter_pairs)
def test_availability_within_bounds(pair: tuple[int, int]) -> None:
    success, total = pair
    assert 0 <= DomainStats(success=success, total=total).availability <= 100
