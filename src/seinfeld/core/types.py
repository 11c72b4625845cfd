"""Core data contracts: instants, durations, and chain records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, TypeAlias

from dateutil.relativedelta import relativedelta

Instant: TypeAlias = date | datetime
Duration: TypeAlias = timedelta | relativedelta
ExclusionPredicate: TypeAlias = Callable[[Instant], bool]


@dataclass
class ChainSummary:
    """A run of consecutive marked periods.

    Records are mutated in place while their chain grows, so a
    :class:`ChainResult` may hold the same instance as both ``last``
    and ``longest``.

    ``start_event`` and ``end_event`` are the very objects taken from
    the scanned event sequence, not copies.  ``end_period`` is the start
    of the first period after the chain, i.e. where it broke (or will
    break if nothing happens during it).
    """

    start_period: Instant
    end_period: Instant
    start_event: Instant
    end_event: Instant
    length: int = 0
    num_events: int = 0


@dataclass
class ChainResult:
    """Output of a chain scan.

    ``total_periods`` counts non-excluded periods from the start date up
    to ``last.end_period``; ``marked_periods`` counts those containing at
    least one event.  When both are equal the events form one unbroken
    chain.
    """

    total_periods: int = 0
    marked_periods: int = 0
    last: ChainSummary | None = None
    longest: ChainSummary | None = None
