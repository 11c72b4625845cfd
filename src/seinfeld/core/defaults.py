"""Centralised default constants for seinfeld.

Every project-wide magic number / string lives here.
Import these instead of hard-coding values in function signatures or CLI options.
"""

from __future__ import annotations

from datetime import date
from typing import Final

# ── Periods ──
DEFAULT_INCREMENT: Final[dict[str, int]] = {"days": 1}
INCREMENT_UNITS: Final[tuple[str, ...]] = (
    "years",
    "months",
    "weeks",
    "days",
    "hours",
    "minutes",
    "seconds",
)
CALENDAR_UNITS: Final[frozenset[str]] = frozenset({"years", "months"})
# Reference instant used to check that an increment moves time forward.
INCREMENT_PROBE_DATE: Final[date] = date(2000, 1, 1)

# ── Events ──
DEFAULT_EVENT_COLUMN: Final[str] = "timestamp"
EVENT_FILE_SUFFIXES: Final[tuple[str, ...]] = (".csv", ".parquet")

# ── Paths ──
DEFAULT_CONFIG_PATH: Final[str] = "seinfeld.yaml"
DEFAULT_OUT_DIR: Final[str] = "artifacts"
