"""Serializable chain report built from a :class:`~seinfeld.core.types.ChainResult`.

The runtime records are plain mutable dataclasses that may alias each
other; the report freezes them into Pydantic models and makes the
aliasing explicit through ``longest_is_last``.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator

from seinfeld.chains import Seinfeld
from seinfeld.core.time import describe_increment
from seinfeld.core.types import ChainResult, ChainSummary, Instant


class ChainSummaryModel(BaseModel, frozen=True):
    """Snapshot of one chain."""

    start_period: datetime | date = Field(description="Start of the period holding the first event.")
    end_period: datetime | date = Field(description="Start of the first period after the chain.")
    start_event: datetime | date = Field(description="First event of the chain.")
    end_event: datetime | date = Field(description="Most recent event of the chain.")
    length: int = Field(ge=0, description="Number of periods in the chain.")
    num_events: int = Field(ge=0, description="Number of events in the chain.")

    @model_validator(mode="after")
    def _check_counts(self) -> ChainSummaryModel:
        if self.num_events < self.length:
            raise ValueError(
                f"num_events ({self.num_events}) must be >= length ({self.length})"
            )
        return self

    @classmethod
    def from_summary(cls, chain: ChainSummary) -> ChainSummaryModel:
        return cls(
            start_period=chain.start_period,
            end_period=chain.end_period,
            start_event=chain.start_event,
            end_event=chain.end_event,
            length=chain.length,
            num_events=chain.num_events,
        )


class ChainReport(BaseModel, frozen=True):
    """Chain statistics for one event history.

    ``as_of``, ``current_period`` and ``can_continue`` are only filled in
    when the caller supplies a reference instant; the library never
    reads the clock itself.
    """

    start_date: datetime | date = Field(description="Start of the first period.")
    increment: str = Field(description="Period length, e.g. 'weeks=1'.")
    total_periods: int = Field(ge=0, description="Periods up to the end of the last chain.")
    marked_periods: int = Field(ge=0, description="Periods containing at least one event.")
    last: ChainSummaryModel | None = Field(default=None, description="Most recent chain.")
    longest: ChainSummaryModel | None = Field(default=None, description="First chain of maximal length.")
    longest_is_last: bool = Field(default=False, description="True if the longest chain is the last one.")
    as_of: datetime | date | None = Field(default=None, description="Reference instant for can_continue.")
    current_period: datetime | date | None = Field(default=None, description="Start of the period containing as_of.")
    can_continue: bool | None = Field(default=None, description="Whether the last chain can still be extended.")

    @model_validator(mode="after")
    def _check_invariants(self) -> ChainReport:
        if self.marked_periods > self.total_periods:
            raise ValueError(
                f"marked_periods ({self.marked_periods}) must not exceed "
                f"total_periods ({self.total_periods})"
            )
        return self


def build_chain_report(
    seinfeld: Seinfeld,
    result: ChainResult,
    *,
    as_of: Instant | None = None,
) -> ChainReport:
    """Freeze *result* into a :class:`ChainReport`.

    Args:
        seinfeld: The grid *result* was computed with.
        result: Output of :meth:`Seinfeld.find_chains`.
        as_of: Optional "now"; when given, the report says whether the
            last chain can still be extended.

    Raises:
        PrecedenceError: If *as_of* is before the start date.

    Returns:
        A ``ChainReport``.
    """
    current_period = None
    can_continue = None
    if as_of is not None:
        can_continue = seinfeld.can_continue(result, as_of)
        current_period = seinfeld.period_containing(as_of)

    return ChainReport(
        start_date=seinfeld.start_date,
        increment=describe_increment(seinfeld.increment),
        total_periods=result.total_periods,
        marked_periods=result.marked_periods,
        last=ChainSummaryModel.from_summary(result.last) if result.last else None,
        longest=ChainSummaryModel.from_summary(result.longest) if result.longest else None,
        longest_is_last=result.last is not None and result.longest is result.last,
        as_of=as_of,
        current_period=current_period,
        can_continue=can_continue,
    )
