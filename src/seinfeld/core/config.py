"""Chain configuration: increment coercion and YAML persistence.

A config file pins down everything needed to scan an event history
except the events themselves::

    start_date: 2012-01-01
    increment:
      weeks: 1
    skip_weekdays: [7]
    skip_dates: [2012-12-25]
    event_column: timestamp

Usage::

    from seinfeld.core.config import load_chain_config

    cfg = load_chain_config(Path("seinfeld.yaml"))
    cfg.duration()     # timedelta(days=7)
    cfg.exclusion()    # predicate or None
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Mapping

import yaml
from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from seinfeld.core.defaults import (
    CALENDAR_UNITS,
    DEFAULT_EVENT_COLUMN,
    DEFAULT_INCREMENT,
    INCREMENT_PROBE_DATE,
    INCREMENT_UNITS,
)
from seinfeld.core.time import combine_exclusions, skip_dates, skip_weekdays
from seinfeld.core.types import Duration, ExclusionPredicate, Instant

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a start date, increment or config file is unusable."""


# ---------------------------------------------------------------------------
# Increment coercion
# ---------------------------------------------------------------------------


def _increment_from_units(units: Mapping[str, Any]) -> Duration:
    unknown = sorted(set(units) - set(INCREMENT_UNITS))
    if unknown:
        raise ConfigurationError(
            f"Unknown increment unit(s) {unknown}; "
            f"expected some of {list(INCREMENT_UNITS)}"
        )
    if not units:
        raise ConfigurationError("increment must name at least one unit")

    amounts: dict[str, int] = {}
    for unit, amount in units.items():
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ConfigurationError(
                f"Increment amount for {unit!r} must be an integer, got {amount!r}"
            )
        amounts[unit] = amount

    if CALENDAR_UNITS & amounts.keys():
        return relativedelta(**amounts)
    return timedelta(**amounts)


def coerce_increment(value: Any, anchor: Instant | None = None) -> Duration:
    """Turn *value* into a period increment, rejecting unusable ones.

    Accepts a :class:`~datetime.timedelta`, a
    :class:`~dateutil.relativedelta.relativedelta`, or a mapping of unit
    names to integers such as ``{"weeks": 1}``.  Mappings that mention
    ``years`` or ``months`` become a ``relativedelta``; everything else
    becomes a ``timedelta``.

    The increment must move *anchor* strictly forward.  Checking against
    the real start date matters: ``date + timedelta(hours=1)`` is the
    same date, so sub-day increments only work with datetime instants.

    Args:
        value: Increment in one of the accepted forms.
        anchor: Instant the increment will be applied to first.  Defaults
            to midnight on :data:`~seinfeld.core.defaults.INCREMENT_PROBE_DATE`.

    Returns:
        A duration usable with :func:`~seinfeld.core.time.advance_period`.

    Raises:
        ConfigurationError: If *value* has the wrong type, names unknown
            units, or does not advance *anchor*.
    """
    if isinstance(value, (timedelta, relativedelta)):
        increment = value
    elif isinstance(value, Mapping):
        increment = _increment_from_units(value)
    else:
        raise ConfigurationError(
            "increment must be a timedelta, relativedelta or mapping of units, "
            f"got {type(value).__name__}"
        )

    probe = anchor if anchor is not None else datetime.combine(INCREMENT_PROBE_DATE, datetime.min.time())
    try:
        advances = probe + increment > probe
    except TypeError as exc:
        raise ConfigurationError(
            f"increment {value!r} has a time component; use datetime instants"
        ) from exc
    if not advances:
        raise ConfigurationError(
            f"increment {value!r} must move {probe} strictly forward"
        )
    return increment


def parse_increment(text: str) -> dict[str, int]:
    """Parse the CLI form ``"weeks=1"`` / ``"months=1,days=2"`` into units.

    Raises:
        ConfigurationError: If a part is not ``unit=integer``.
    """
    units: dict[str, int] = {}
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        unit, sep, amount = part.partition("=")
        if not sep:
            raise ConfigurationError(f"Expected unit=amount, got {part!r}")
        try:
            units[unit.strip()] = int(amount.strip())
        except ValueError as exc:
            raise ConfigurationError(
                f"Increment amount for {unit.strip()!r} must be an integer, got {amount.strip()!r}"
            ) from exc
    if not units:
        raise ConfigurationError(f"No increment units in {text!r}")
    return units


# ---------------------------------------------------------------------------
# Config model
# ---------------------------------------------------------------------------


class ChainConfig(BaseModel, frozen=True):
    """Persistable description of a period grid and its exclusions."""

    start_date: date | datetime = Field(
        description="Start of the first period; a datetime enables sub-day increments.",
    )
    increment: dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_INCREMENT),
        description="Period length as unit -> amount, e.g. {'weeks': 1}.",
    )
    skip_weekdays: list[int] = Field(
        default_factory=list,
        description="ISO weekdays (1=Mon .. 7=Sun) whose periods are skipped.",
    )
    skip_dates: list[date] = Field(
        default_factory=list,
        description="Calendar dates whose periods are skipped.",
    )
    event_column: str = Field(
        default=DEFAULT_EVENT_COLUMN,
        min_length=1,
        description="Timestamp column in event files.",
    )

    @field_validator("start_date", mode="before")
    @classmethod
    def _keep_datetime_strings(cls, value: Any) -> Any:
        # A midnight datetime string would otherwise validate as a plain date.
        if isinstance(value, str) and ("T" in value or " " in value.strip()):
            return datetime.fromisoformat(value.strip())
        return value

    @model_validator(mode="after")
    def _validate_config(self) -> ChainConfig:
        self.exclusion()
        coerce_increment(self.increment, anchor=self.start_date)
        return self

    def duration(self) -> Duration:
        return coerce_increment(self.increment, anchor=self.start_date)

    def exclusion(self) -> ExclusionPredicate | None:
        """Build the combined exclusion predicate, or ``None`` if nothing is skipped."""
        return combine_exclusions(
            skip_weekdays(self.skip_weekdays) if self.skip_weekdays else None,
            skip_dates(self.skip_dates) if self.skip_dates else None,
        )


# ---------------------------------------------------------------------------
# YAML I/O
# ---------------------------------------------------------------------------


def load_chain_config(path: Path) -> ChainConfig:
    """Load and validate a chain config from a YAML file.

    Args:
        path: Path to a YAML file matching :class:`ChainConfig`.

    Returns:
        Validated ``ChainConfig``.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ConfigurationError: If the YAML is malformed or invalid.
    """
    try:
        raw = yaml.safe_load(path.read_text())
        config = ChainConfig.model_validate(raw)
    except (yaml.YAMLError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid chain config {path}: {exc}") from exc
    logger.info("Loaded chain config from %s (start=%s)", path, config.start_date)
    return config


def save_chain_config(config: ChainConfig, path: Path) -> Path:
    """Serialize *config* to YAML and return the *path* written."""
    data = config.model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))
    return path
