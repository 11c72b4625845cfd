"""Period stepping and exclusion predicates.

A period is the half-open interval ``[start, start + increment)``.
Periods are laid end to end from the configured start date; the
functions here walk that grid forward without ever materialising it.

All arithmetic is delegated to the instant/duration types themselves
(``date``/``datetime`` plus ``timedelta``/``relativedelta``), so calendar
irregularities such as month lengths follow :mod:`dateutil` semantics.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

from dateutil.relativedelta import relativedelta

from seinfeld.core.types import Duration, ExclusionPredicate, Instant

_SECONDS_PER_WEEK = 7 * 24 * 3600
_SECONDS_PER_DAY = 24 * 3600


def advance_period(
    cursor: Instant,
    target: Instant,
    increment: Duration,
    exclude: ExclusionPredicate | None = None,
) -> tuple[Instant, int]:
    """Step *cursor* forward by whole increments until it passes *target*.

    The exclusion predicate is asked about each period *before* the
    cursor steps over it, so it always sees the start of the period
    being closed out.  Stepping over an excluded period does not count,
    and the following period is stepped over as well even if the cursor
    has already passed *target*: an event inside an excluded period
    belongs to the next eligible one.

    Args:
        cursor: Start of the period the scan is currently in.
        target: Instant to advance past.
        increment: Period length; must move instants strictly forward.
        exclude: Optional predicate called with a period start; ``True``
            skips that period.

    Returns:
        ``(cursor, count)`` where *cursor* is the start of the first
        period after the one containing *target* and *count* is the
        number of non-excluded periods stepped over.  If *target* is
        before *cursor* the cursor is returned unchanged with a count
        of 0.
    """
    count = 0
    while cursor <= target:
        while True:
            skipped = exclude is not None and exclude(cursor)
            cursor = cursor + increment
            if not skipped:
                break
        count += 1
    return cursor, count


# ---------------------------------------------------------------------------
# Exclusion predicates
# ---------------------------------------------------------------------------


def _as_date(value: Instant) -> date:
    return value.date() if isinstance(value, datetime) else value


def skip_weekdays(days: Iterable[int]) -> ExclusionPredicate:
    """Exclude periods starting on the given ISO weekdays (1=Mon .. 7=Sun).

    >>> skip_sundays = skip_weekdays([7])
    >>> skip_sundays(date(2012, 1, 1))
    True
    """
    weekdays = frozenset(days)
    bad = sorted(d for d in weekdays if not 1 <= d <= 7)
    if bad:
        raise ValueError(f"ISO weekdays must be in 1..7, got {bad}")

    def _exclude(start: Instant) -> bool:
        return start.isoweekday() in weekdays

    return _exclude


def skip_dates(dates: Iterable[date]) -> ExclusionPredicate:
    """Exclude periods whose start falls on one of *dates*."""
    excluded = frozenset(_as_date(d) for d in dates)

    def _exclude(start: Instant) -> bool:
        return _as_date(start) in excluded

    return _exclude


def combine_exclusions(
    *predicates: ExclusionPredicate | None,
) -> ExclusionPredicate | None:
    """OR together *predicates*, ignoring ``None``.

    Returns ``None`` when nothing is left so callers can keep the
    no-exclusion fast path.
    """
    active = [p for p in predicates if p is not None]
    if not active:
        return None
    if len(active) == 1:
        return active[0]

    def _exclude(start: Instant) -> bool:
        return any(p(start) for p in active)

    return _exclude


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------


def describe_increment(increment: Duration) -> str:
    """Render *increment* in the ``unit=amount`` form the CLI accepts.

    >>> describe_increment(relativedelta(weeks=2))
    'weeks=2'
    >>> describe_increment(relativedelta(months=1, days=3))
    'months=1,days=3'
    """
    if isinstance(increment, relativedelta):
        parts: list[str] = []
        for unit in ("years", "months", "days", "hours", "minutes", "seconds"):
            amount = getattr(increment, unit)
            if not amount:
                continue
            if unit == "days" and amount % 7 == 0:
                parts.append(f"weeks={amount // 7}")
            else:
                parts.append(f"{unit}={amount}")
        return ",".join(parts) or "seconds=0"

    total = increment.total_seconds()
    if total and total % _SECONDS_PER_WEEK == 0:
        return f"weeks={int(total // _SECONDS_PER_WEEK)}"
    if total and total % _SECONDS_PER_DAY == 0:
        return f"days={int(total // _SECONDS_PER_DAY)}"
    if total == int(total):
        return f"seconds={int(total)}"
    return f"seconds={total}"
