"""Rendering utilities for the results report and the console summary."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, List

from .models import REPORT_COLUMNS, OutcomeRecord, RunSummary

DEFAULT_REPORT_NAME = "results.csv"


class ReportWriteError(RuntimeError):
    """Raised when the results file cannot be written."""


def write_results(path: Path, outcomes: Iterable[OutcomeRecord]) -> None:
    """Write ``outcomes`` to ``path``, replacing any existing file."""

    try:
        with path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.DictWriter(handle, fieldnames=list(REPORT_COLUMNS))
            writer.writeheader()
            for outcome in outcomes:
                writer.writerow(outcome.as_dict())
    except OSError as exc:
        raise ReportWriteError(f"Could not write {path}: {exc}") from exc


def read_results(path: Path) -> list[OutcomeRecord]:
    outcomes: List[OutcomeRecord] = []
    with path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        for row in reader:
            outcomes.append(OutcomeRecord(**{column: row.get(column) or "" for column in REPORT_COLUMNS}))
    return outcomes


def generate_summary(summary: RunSummary) -> str:
    rows = [
        ("Plex rows read", summary.external_total),
        ("Stash scenes", summary.catalog_total),
        ("Matched by path", summary.matched),
        ("Unmatched", summary.unmatched),
        ("Skipped (no change)", summary.skipped),
        ("Would update" if summary.dry_run else "To update", summary.candidates),
    ]
    if not summary.dry_run:
        rows.append(("Updated", summary.succeeded))
        rows.append(("Failed", summary.failed))

    lines = ["", "=" * 60]
    lines.append("DRY RUN SUMMARY (no scenes were updated)" if summary.dry_run else "MIGRATION SUMMARY")
    lines.append("=" * 60)
    for label, count in rows:
        lines.append(f"  {label + ':':<22s}{count:6d}")
    lines.append("=" * 60)
    return "\n".join(lines)
