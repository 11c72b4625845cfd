"""Typer CLI entrypoint and command definitions for seinfeld."""

import datetime as dt
import logging
from pathlib import Path
from typing import List, Optional

import typer

from seinfeld.core.defaults import DEFAULT_CONFIG_PATH

app = typer.Typer()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Compute Seinfeld chains from event timestamps."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _resolve_config(
    config: Optional[str],
    start: Optional[str],
    every: Optional[str],
    skip_weekday: Optional[List[int]],
    column: Optional[str] = None,
    skip_date: Optional[List[str]] = None,
):
    """Merge an optional config file with command-line overrides."""
    from pydantic import ValidationError

    from seinfeld.core.config import (
        ChainConfig,
        ConfigurationError,
        load_chain_config,
        parse_increment,
    )

    data: dict = {}
    if config is not None:
        path = Path(config)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
        data = load_chain_config(path).model_dump()
    elif start is None:
        raise ConfigurationError("Either --config or --start is required")

    if start is not None:
        data["start_date"] = start
    if every is not None:
        data["increment"] = parse_increment(every)
    if skip_weekday:
        data["skip_weekdays"] = list(skip_weekday)
    if column is not None:
        data["event_column"] = column
    if skip_date:
        data["skip_dates"] = list(skip_date)

    try:
        return ChainConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid chain settings: {exc}") from exc


def _build_seinfeld(cfg, datetimes: bool):
    """Create a ``Seinfeld`` whose start date matches the event instant type."""
    from seinfeld.chains import Seinfeld
    from seinfeld.core.config import ConfigurationError

    start = cfg.start_date
    if datetimes and not isinstance(start, dt.datetime):
        start = dt.datetime.combine(start, dt.time.min)
    elif not datetimes and isinstance(start, dt.datetime):
        raise ConfigurationError(
            f"start_date {start} has a time component; pass --datetimes"
        )
    return Seinfeld(start, cfg.duration(), skip=cfg.exclusion())


def _parse_instant(value: str, datetimes: bool):
    if datetimes:
        return dt.datetime.fromisoformat(value)
    return dt.date.fromisoformat(value)


def _describe_chain(name: str, chain) -> str:
    if chain is None:
        return f"{name}: none"
    return (
        f"{name}: {chain.length} period(s), {chain.num_events} event(s), "
        f"{chain.start_period.isoformat()} -> {chain.end_period.isoformat()}"
    )


# -- chains -------------------------------------------------------------------


@app.command("chains")
def chains_cmd(
    events: str = typer.Option(..., "--events", help="Path to events CSV or Parquet file"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to a chain config YAML"),
    start: Optional[str] = typer.Option(None, "--start", help="Start of the first period (YYYY-MM-DD, or an ISO datetime for sub-day periods)"),
    every: Optional[str] = typer.Option(None, "--every", help="Period length, e.g. 'weeks=1' or 'months=1'"),
    skip_weekday: Optional[List[int]] = typer.Option(None, "--skip-weekday", help="ISO weekday to skip (1=Mon .. 7=Sun); repeatable"),
    column: Optional[str] = typer.Option(None, "--column", help="Timestamp column in the events file"),
    datetimes: bool = typer.Option(False, "--datetimes", help="Keep event times instead of truncating to dates"),
    as_of: Optional[str] = typer.Option(None, "--as-of", help="Reference 'now' for checking whether the last chain can continue"),
    out: Optional[str] = typer.Option(None, "--out", help="Write the report as JSON to this path"),
    csv_out: Optional[str] = typer.Option(None, "--csv", help="Write the chains as CSV to this path"),
) -> None:
    """Find the longest and the most recent chain in an event history."""
    from seinfeld.events.store import read_events
    from seinfeld.report.export import export_report_csv, export_report_json
    from seinfeld.report.summary import build_chain_report

    events_path = Path(events)
    if not events_path.exists():
        typer.echo(f"Events file not found: {events_path}", err=True)
        raise typer.Exit(code=1)

    try:
        cfg = _resolve_config(config, start, every, skip_weekday, column)
        seinfeld = _build_seinfeld(cfg, datetimes)
        loaded = read_events(events_path, cfg.event_column, dates_only=not datetimes)
        typer.echo(f"Loaded {len(loaded)} events from {events_path}")
        result = seinfeld.find_chains(loaded)
        reference = _parse_instant(as_of, datetimes) if as_of is not None else None
        report = build_chain_report(seinfeld, result, as_of=reference)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Marked periods: {report.marked_periods} / {report.total_periods}")
    typer.echo(_describe_chain("Longest chain", report.longest))
    typer.echo(_describe_chain("Last chain", report.last))
    if report.can_continue is not None:
        verdict = "can still continue" if report.can_continue else "is broken"
        typer.echo(f"As of {report.as_of.isoformat()} the last chain {verdict}")

    if out is not None:
        typer.echo(f"Report written to {export_report_json(report, Path(out))}")
    if csv_out is not None:
        typer.echo(f"Chains written to {export_report_csv(report, Path(csv_out))}")


# -- period -------------------------------------------------------------------


@app.command("period")
def period_cmd(
    date: str = typer.Option(..., "--date", help="Instant to locate (YYYY-MM-DD or ISO datetime with --datetimes)"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to a chain config YAML"),
    start: Optional[str] = typer.Option(None, "--start", help="Start of the first period (YYYY-MM-DD, or an ISO datetime for sub-day periods)"),
    every: Optional[str] = typer.Option(None, "--every", help="Period length, e.g. 'weeks=1' or 'months=1'"),
    skip_weekday: Optional[List[int]] = typer.Option(None, "--skip-weekday", help="ISO weekday to skip (1=Mon .. 7=Sun); repeatable"),
    datetimes: bool = typer.Option(False, "--datetimes", help="Treat --date and the start date as datetimes"),
) -> None:
    """Print the start of the period a date counts towards."""
    try:
        cfg = _resolve_config(config, start, every, skip_weekday)
        seinfeld = _build_seinfeld(cfg, datetimes)
        when = _parse_instant(date, datetimes)
        if when < seinfeld.start_date:
            typer.echo(
                f"{when.isoformat()} is before start_date {seinfeld.start_date.isoformat()}",
                err=True,
            )
            raise typer.Exit(code=1)
        period = seinfeld.period_containing(when)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    typer.echo(period.isoformat())


# -- config -------------------------------------------------------------------
config_app = typer.Typer()
app.add_typer(config_app, name="config")


@config_app.command("init")
def config_init_cmd(
    start: str = typer.Option(..., "--start", help="Start of the first period (YYYY-MM-DD, or an ISO datetime for sub-day periods)"),
    every: str = typer.Option("days=1", "--every", help="Period length, e.g. 'weeks=1' or 'months=1'"),
    skip_weekday: Optional[List[int]] = typer.Option(None, "--skip-weekday", help="ISO weekday to skip (1=Mon .. 7=Sun); repeatable"),
    skip_date: Optional[List[str]] = typer.Option(None, "--skip-date", help="Calendar date to skip (YYYY-MM-DD); repeatable"),
    column: Optional[str] = typer.Option(None, "--column", help="Timestamp column in event files"),
    out: str = typer.Option(DEFAULT_CONFIG_PATH, "--out", help="Destination YAML path"),
) -> None:
    """Write a chain config YAML file."""
    from seinfeld.core.config import save_chain_config

    try:
        cfg = _resolve_config(None, start, every, skip_weekday, column, skip_date)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    path = save_chain_config(cfg, Path(out))
    typer.echo(f"Config written to {path}")


if __name__ == "__main__":
    app()
