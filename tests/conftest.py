"""Shared fixtures for the seinfeld test suite."""

from __future__ import annotations

import datetime as dt

import pytest

from seinfeld.chains import Seinfeld


@pytest.fixture()
def start_date() -> dt.date:
    # A Sunday, so weekly periods run Sunday..Saturday.
    return dt.date(2012, 1, 1)


@pytest.fixture()
def weekly(start_date: dt.date) -> Seinfeld:
    return Seinfeld(start_date=start_date, increment={"weeks": 1})


@pytest.fixture()
def every_eighth_day() -> list[dt.date]:
    """Twelve events eight days apart, 2012-01-02 through 2012-03-30.

    With weekly periods from 2012-01-01 the week of 2012-02-12 stays
    empty, splitting them into two six-week chains.
    """
    return [dt.date(2012, 1, 2) + dt.timedelta(days=8 * i) for i in range(12)]
