"""Tests for chain scanning: find_chains, period_containing, and the Seinfeld facade.

Covers:
- Precedence check against the start date
- Empty input and counter invariants
- Several events in one period
- Break detection and the first-longest tie-break
- Excluded periods rolling events forward
- period_containing and chain continuation
"""

from __future__ import annotations

import datetime as dt

import pytest
from dateutil.relativedelta import relativedelta

from seinfeld.chains import (
    PrecedenceError,
    Seinfeld,
    chain_can_continue,
    find_chains,
    period_containing,
)
from seinfeld.core.config import ChainConfig, ConfigurationError
from seinfeld.core.time import skip_weekdays
from seinfeld.core.types import ChainResult, ChainSummary

DAY = dt.timedelta(days=1)
WEEK = dt.timedelta(weeks=1)
JAN1 = dt.date(2012, 1, 1)


def _days(*days: int) -> list[dt.date]:
    return [dt.date(2012, 1, d) for d in days]


class TestPrecedence:
    def test_first_event_before_start_raises(self) -> None:
        with pytest.raises(PrecedenceError, match="must be before first date"):
            find_chains(JAN1, DAY, [dt.date(2011, 12, 31), JAN1])

    def test_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            find_chains(JAN1, DAY, [dt.date(2011, 12, 31)])

    def test_event_on_start_date_is_fine(self) -> None:
        result = find_chains(JAN1, DAY, [JAN1])
        assert result.marked_periods == 1

    def test_only_first_event_is_checked(self) -> None:
        """A later out-of-order event lands in the current period."""
        result = find_chains(JAN1, DAY, _days(5, 3))
        assert result.last is not None
        assert result.last.length == 1
        assert result.last.num_events == 2

    def test_mixed_instant_types_propagate_type_error(self) -> None:
        with pytest.raises(TypeError):
            find_chains(JAN1, DAY, [dt.datetime(2012, 1, 2, 9, 0)])


class TestEmptyInput:
    def test_no_events(self) -> None:
        result = find_chains(JAN1, WEEK, [])
        assert result == ChainResult(total_periods=0, marked_periods=0)
        assert result.last is None
        assert result.longest is None


class TestSinglePeriod:
    def test_two_events_one_week(self) -> None:
        first, second = dt.date(2012, 1, 2), dt.date(2012, 1, 3)
        result = find_chains(JAN1, WEEK, [first, second])

        assert result.total_periods == 1
        assert result.marked_periods == 1
        assert result.longest is result.last
        chain = result.last
        assert chain == ChainSummary(
            start_period=JAN1,
            end_period=dt.date(2012, 1, 8),
            start_event=first,
            end_event=second,
            length=1,
            num_events=2,
        )

    def test_events_keep_identity(self) -> None:
        events = [dt.datetime(2012, 1, 1, 9, 0), dt.datetime(2012, 1, 1, 17, 0)]
        result = find_chains(dt.datetime(2012, 1, 1), DAY, events)
        assert result.last is not None
        assert result.last.start_event is events[0]
        assert result.last.end_event is events[1]


class TestBreaks:
    def test_skipped_period_starts_new_chain(self) -> None:
        result = find_chains(JAN1, DAY, _days(1, 2, 3, 5))

        assert result.total_periods == 5
        assert result.marked_periods == 4
        assert result.longest is not result.last
        assert result.longest.start_period == JAN1
        assert result.longest.end_period == dt.date(2012, 1, 4)
        assert result.longest.length == 3
        assert result.last.start_period == dt.date(2012, 1, 5)
        assert result.last.end_period == dt.date(2012, 1, 6)
        assert result.last.length == 1

    def test_longer_later_chain_takes_over(self) -> None:
        result = find_chains(JAN1, DAY, _days(1, 3, 4))
        assert result.longest is result.last
        assert result.longest.start_period == dt.date(2012, 1, 3)
        assert result.longest.length == 2

    def test_tie_keeps_first_chain(self) -> None:
        result = find_chains(JAN1, DAY, _days(1, 2, 4, 5))
        assert result.longest is not result.last
        assert result.longest.length == result.last.length == 2
        assert result.longest.start_period == JAN1
        assert result.last.start_period == dt.date(2012, 1, 4)

    def test_first_event_after_gap_from_start(self) -> None:
        """Empty periods before the first event count towards total_periods."""
        result = find_chains(JAN1, DAY, _days(4))
        assert result.total_periods == 4
        assert result.marked_periods == 1
        assert result.last.start_period == dt.date(2012, 1, 4)


class TestWeeklyScenario:
    def test_two_six_week_chains(self, every_eighth_day: list[dt.date]) -> None:
        result = find_chains(JAN1, WEEK, every_eighth_day)

        assert every_eighth_day[-1] == dt.date(2012, 3, 30)
        assert result.total_periods == 13
        assert result.marked_periods == 12
        assert result.longest == ChainSummary(
            start_period=dt.date(2012, 1, 1),
            end_period=dt.date(2012, 2, 12),
            start_event=dt.date(2012, 1, 2),
            end_event=dt.date(2012, 2, 11),
            length=6,
            num_events=6,
        )
        assert result.last == ChainSummary(
            start_period=dt.date(2012, 2, 19),
            end_period=dt.date(2012, 4, 1),
            start_event=dt.date(2012, 2, 19),
            end_event=dt.date(2012, 3, 30),
            length=6,
            num_events=6,
        )
        assert result.longest is not result.last
        assert result.longest.start_event is every_eighth_day[0]

    def test_counter_invariants(self, every_eighth_day: list[dt.date]) -> None:
        for n in range(len(every_eighth_day) + 1):
            result = find_chains(JAN1, WEEK, every_eighth_day[:n])
            assert 0 <= result.marked_periods <= result.total_periods
            for chain in (result.last, result.longest):
                if chain is not None:
                    assert chain.num_events >= chain.length >= 0


class TestExclusion:
    def test_excluded_period_bridges_chain(self) -> None:
        """Saturday and Monday form one chain when Sunday is excluded."""
        result = find_chains(JAN1, DAY, _days(7, 9), exclude=skip_weekdays([7]))

        assert result.longest is result.last
        assert result.last.length == 2
        assert result.last.start_period == dt.date(2012, 1, 7)
        assert result.last.end_period == dt.date(2012, 1, 10)
        assert result.total_periods == 7
        assert result.marked_periods == 2

    def test_without_exclusion_the_chain_breaks(self) -> None:
        result = find_chains(JAN1, DAY, _days(7, 9))
        assert result.last.length == 1
        assert result.longest is not result.last

    def test_event_in_excluded_period_counts_for_next(self) -> None:
        result = find_chains(JAN1, DAY, _days(7, 8), exclude=skip_weekdays([7]))
        assert result.last.length == 2
        assert result.last.end_event == dt.date(2012, 1, 8)
        assert result.last.end_period == dt.date(2012, 1, 10)

    def test_monday_event_after_sunday_event_same_period(self) -> None:
        result = find_chains(JAN1, DAY, _days(8, 9), exclude=skip_weekdays([7]))
        assert result.last.length == 1
        assert result.last.num_events == 2
        assert result.last.start_period == dt.date(2012, 1, 9)


class TestPeriodContaining:
    def test_weekly(self) -> None:
        assert period_containing(JAN1, WEEK, dt.date(2012, 1, 10)) == dt.date(2012, 1, 8)
        assert period_containing(JAN1, WEEK, dt.date(2012, 1, 8)) == dt.date(2012, 1, 8)
        assert period_containing(JAN1, WEEK, JAN1) == JAN1

    def test_monthly(self) -> None:
        found = period_containing(JAN1, relativedelta(months=1), dt.date(2012, 2, 29))
        assert found == dt.date(2012, 2, 1)

    def test_excluded_date_rolls_to_next_period(self) -> None:
        sunday = dt.date(2012, 1, 8)
        found = period_containing(JAN1, DAY, sunday, exclude=skip_weekdays([7]))
        assert found == dt.date(2012, 1, 9)
        assert found > sunday

    def test_non_excluded_date_not_after_date(self) -> None:
        saturday = dt.date(2012, 1, 7)
        found = period_containing(JAN1, DAY, saturday, exclude=skip_weekdays([7]))
        assert found == saturday


class TestChainCanContinue:
    def test_no_chain(self) -> None:
        assert chain_can_continue(None, JAN1) is False

    def test_open_and_broken(self, weekly: Seinfeld, every_eighth_day: list[dt.date]) -> None:
        result = weekly.find_chains(every_eighth_day)
        assert weekly.can_continue(result, dt.date(2012, 3, 31)) is True
        assert weekly.can_continue(result, dt.date(2012, 4, 3)) is True
        assert weekly.can_continue(result, dt.date(2012, 4, 9)) is False

    def test_now_before_start_raises(self, weekly: Seinfeld, every_eighth_day: list[dt.date]) -> None:
        result = weekly.find_chains(every_eighth_day)
        with pytest.raises(PrecedenceError, match="must not be before start_date"):
            weekly.can_continue(result, dt.date(2011, 12, 1))


class TestSeinfeld:
    def test_mapping_increment_is_coerced(self, weekly: Seinfeld) -> None:
        assert weekly.increment == WEEK
        assert weekly.skip is None

    def test_methods_match_functions(self, weekly: Seinfeld, every_eighth_day: list[dt.date]) -> None:
        assert weekly.find_chains(every_eighth_day) == find_chains(JAN1, WEEK, every_eighth_day)
        assert weekly.period_containing(dt.date(2012, 3, 1)) == dt.date(2012, 2, 26)

    def test_skip_is_used(self) -> None:
        seinfeld = Seinfeld(JAN1, {"days": 1}, skip=lambda d: d.isoweekday() == 7)
        assert seinfeld.find_chains(_days(7, 9)).last.length == 2

    def test_monthly_increment(self) -> None:
        seinfeld = Seinfeld(JAN1, {"months": 1})
        assert seinfeld.increment == relativedelta(months=1)
        result = seinfeld.find_chains(_days(3, 30) + [dt.date(2012, 2, 14), dt.date(2012, 4, 1)])
        assert result.longest.length == 2
        assert result.longest.num_events == 3
        assert result.last.start_period == dt.date(2012, 4, 1)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"start_date": "2012-01-01", "increment": {"days": 1}},
            {"start_date": JAN1, "increment": {"days": 0}},
            {"start_date": JAN1, "increment": {"hours": 1}},
            {"start_date": JAN1, "increment": "weekly"},
            {"start_date": JAN1, "increment": {"days": 1}, "skip": 7},
        ],
    )
    def test_invalid_construction(self, kwargs: dict) -> None:
        with pytest.raises(ConfigurationError):
            Seinfeld(**kwargs)

    def test_from_config(self) -> None:
        cfg = ChainConfig(start_date=JAN1, increment={"days": 1}, skip_weekdays=[7])
        seinfeld = Seinfeld.from_config(cfg)
        assert seinfeld.start_date == JAN1
        assert seinfeld.increment == DAY
        assert seinfeld.period_containing(dt.date(2012, 1, 8)) == dt.date(2012, 1, 9)
