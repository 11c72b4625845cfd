"""Event timestamp loading from CSV and Parquet files."""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path

import pandas as pd

from seinfeld.core.defaults import DEFAULT_EVENT_COLUMN, EVENT_FILE_SUFFIXES

logger = logging.getLogger(__name__)


def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path)
    if suffix == ".parquet":
        return pd.read_parquet(path, engine="pyarrow")
    raise ValueError(
        f"Unsupported event file {path.name!r}; expected one of {list(EVENT_FILE_SUFFIXES)}"
    )


def read_events(
    path: Path,
    column: str = DEFAULT_EVENT_COLUMN,
    *,
    dates_only: bool = True,
) -> list[date] | list[datetime]:
    """Load event timestamps from *path*, sorted ascending.

    Timestamps are parsed as ISO-8601 via ``pd.to_datetime(utc=True)``, so
    strings with or without offsets are accepted; aware values are
    converted to UTC and returned naive.  Rows that cannot be parsed are
    dropped with a warning.

    Args:
        path: A ``.csv`` or ``.parquet`` file.
        column: Name of the timestamp column.
        dates_only: Truncate timestamps to calendar dates (the usual
            choice for day/week/month periods).

    Returns:
        Sorted list of ``date`` objects, or naive UTC ``datetime`` objects
        when *dates_only* is ``False``.

    Raises:
        ValueError: If the file type is unsupported or *column* is missing.
    """
    df = _read_frame(path)
    if column not in df.columns:
        raise ValueError(
            f"Event file {path} has no column {column!r}; found {sorted(df.columns)}"
        )

    ts = pd.to_datetime(df[column], utc=True, errors="coerce", format="ISO8601")
    dropped = int(ts.isna().sum())
    if dropped:
        logger.warning("Dropped %d unparseable timestamp(s) from %s", dropped, path)
    ts = ts.dropna().dt.tz_localize(None).sort_values(kind="stable")

    logger.info("Loaded %d event(s) from %s", len(ts), path)
    if dates_only:
        return [t.date() for t in ts]
    return [t.to_pydatetime() for t in ts]
