"""Report export utilities: JSON and CSV output."""

from __future__ import annotations

import csv
import json
from pathlib import Path

from seinfeld.report.summary import ChainReport

_CSV_FIELDS = [
    "chain",
    "start_period",
    "end_period",
    "start_event",
    "end_event",
    "length",
    "num_events",
]


def export_report_json(report: ChainReport, path: Path) -> Path:
    """Write *report* to a JSON file.

    Instants are written as ISO-8601 strings; absent chains and unset
    ``as_of`` fields are omitted.

    Args:
        report: A ``ChainReport`` instance to serialize.
        path: Destination JSON file path.

    Returns:
        The *path* that was written.
    """
    data = report.model_dump(mode="json", exclude_none=True)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))
    return path


def _chain_rows(report: ChainReport) -> list[dict[str, object]]:
    """Flatten the ``last`` and ``longest`` chains into tabular rows."""
    rows: list[dict[str, object]] = []
    for name, chain in (("longest", report.longest), ("last", report.last)):
        if chain is None:
            continue
        row: dict[str, object] = {"chain": name}
        row.update(chain.model_dump(mode="json"))
        rows.append(row)
    return rows


def export_report_csv(report: ChainReport, path: Path) -> Path:
    """Write the chains of *report* as a CSV with one row per chain.

    Columns: ``chain`` (``longest`` or ``last``), ``start_period``,
    ``end_period``, ``start_event``, ``end_event``, ``length``,
    ``num_events``.  An empty report produces a header-only file.

    Args:
        report: A ``ChainReport`` instance.
        path: Destination CSV file path.

    Returns:
        The *path* that was written.
    """
    rows = _chain_rows(report)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=_CSV_FIELDS)
        writer.writeheader()
        writer.writerows(rows)
    return path
