"""Seinfeld chain detection over sorted event timestamps.

The name comes from the productivity habit attributed to Jerry Seinfeld:
mark a big red X on every day you do the work and try not to break the
chain of X's.  Here the "day" is any fixed period (a day, a week, a
month, ...) laid end to end from a start date, and a chain is a run of
consecutive periods that each contain at least one event.

Typical flow::

    seinfeld = Seinfeld(start_date=date(2012, 1, 1), increment={"weeks": 1})
    result = seinfeld.find_chains(events)
    result.longest.length
    seinfeld.can_continue(result, today)
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Sequence

from seinfeld.core.config import ChainConfig, ConfigurationError, coerce_increment
from seinfeld.core.time import advance_period
from seinfeld.core.types import (
    ChainResult,
    ChainSummary,
    Duration,
    ExclusionPredicate,
    Instant,
)

logger = logging.getLogger(__name__)


class PrecedenceError(ValueError):
    """Raised when the first event is earlier than the start date."""


def find_chains(
    start_date: Instant,
    increment: Duration,
    events: Sequence[Instant],
    *,
    exclude: ExclusionPredicate | None = None,
) -> ChainResult:
    """Scan *events* once and report the longest and the last chain.

    *events* must be sorted ascending; only the first element is checked
    against *start_date*.  Several events in one period count once
    towards ``length`` but each towards ``num_events``.  A later chain
    that only ties the longest one does not replace it.

    The scan steps through every period between consecutive events, so
    its cost grows with ``elapsed time / increment``.  A tiny increment
    from an untrusted source can make it arbitrarily slow.

    Args:
        start_date: Start of the first period.
        increment: Period length; must move instants strictly forward.
        events: Event timestamps in ascending order.
        exclude: Optional predicate called with a period start; events in
            excluded periods count towards the next eligible period.

    Returns:
        A :class:`ChainResult`.  ``last`` and ``longest`` are ``None``
        when *events* is empty and may be the same object otherwise.

    Raises:
        PrecedenceError: If ``events[0] < start_date``.
    """
    if events and events[0] < start_date:
        raise PrecedenceError(
            f"start_date ({start_date}) must be before first date ({events[0]})"
        )

    result = ChainResult()
    cursor = start_date

    for event in events:
        cursor, count = advance_period(cursor, event, increment, exclude)

        if count > 1 and result.last is not None:
            logger.debug(
                "Chain of %d period(s) broke before %s", result.last.length, event,
            )
            result.last = None

        if result.last is None:
            result.last = ChainSummary(
                start_period=cursor - increment,
                end_period=cursor,
                start_event=event,
                end_event=event,
            )

        chain = result.last
        chain.num_events += 1
        if count:  # first event in its period
            chain.length += 1
            result.marked_periods += 1
            result.total_periods += count
        chain.end_event = event
        chain.end_period = cursor

        if result.longest is None or result.longest.length < chain.length:
            result.longest = chain

    return result


def period_containing(
    start_date: Instant,
    increment: Duration,
    when: Instant,
    *,
    exclude: ExclusionPredicate | None = None,
) -> Instant:
    """Return the start of the period that *when* counts towards.

    If *when* falls in an excluded period the result is the start of the
    next eligible period, which is later than *when*.  Otherwise the
    result is always ``<= when``.
    """
    cursor, _ = advance_period(start_date, when, increment, exclude)
    return cursor - increment


def chain_can_continue(chain: ChainSummary | None, current_period: Instant) -> bool:
    """Whether *chain* can still be extended during *current_period*.

    *current_period* is the start of the period containing "now" (see
    :func:`period_containing`).  A chain whose ``end_period`` is earlier
    has already broken and the next event starts a new one.
    """
    if chain is None:
        return False
    return chain.end_period >= current_period


class Seinfeld:
    """A validated period grid with chain queries bound to it.

    ``increment`` accepts anything :func:`~seinfeld.core.config.coerce_increment`
    does, e.g. ``{"weeks": 1}`` or ``relativedelta(months=1)``.  ``skip``
    is called with the start of each period; returning ``True`` skips
    the period.  To skip Sundays::

        Seinfeld(start, {"days": 1}, skip=lambda d: d.isoweekday() == 7)
    """

    def __init__(
        self,
        start_date: Instant,
        increment: Any,
        skip: ExclusionPredicate | None = None,
    ) -> None:
        if not isinstance(start_date, date):
            raise ConfigurationError(
                f"start_date must be a date or datetime, got {type(start_date).__name__}"
            )
        if skip is not None and not callable(skip):
            raise ConfigurationError(
                f"skip must be callable or None, got {type(skip).__name__}"
            )
        self._start_date = start_date
        self._increment = coerce_increment(increment, anchor=start_date)
        self._skip = skip

    @classmethod
    def from_config(cls, config: ChainConfig) -> Seinfeld:
        return cls(config.start_date, config.duration(), skip=config.exclusion())

    @property
    def start_date(self) -> Instant:
        return self._start_date

    @property
    def increment(self) -> Duration:
        return self._increment

    @property
    def skip(self) -> ExclusionPredicate | None:
        return self._skip

    def find_chains(self, events: Sequence[Instant]) -> ChainResult:
        return find_chains(self._start_date, self._increment, events, exclude=self._skip)

    def period_containing(self, when: Instant) -> Instant:
        return period_containing(self._start_date, self._increment, when, exclude=self._skip)

    def can_continue(self, result: ChainResult, now: Instant) -> bool:
        """Whether ``result.last`` can still be extended at *now*.

        Raises:
            PrecedenceError: If *now* is before the start date.
        """
        if now < self._start_date:
            raise PrecedenceError(
                f"as_of ({now}) must not be before start_date ({self._start_date})"
            )
        return chain_can_continue(result.last, self.period_containing(now))

    def __repr__(self) -> str:
        return (
            f"Seinfeld(start_date={self._start_date!r}, "
            f"increment={self._increment!r}, skip={self._skip!r})"
        )
