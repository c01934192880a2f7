"""Utilities for reading and normalising the two source exports."""
from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Any, List

from .client import scene_from_payload
from .models import CatalogRecord, ExternalRecord

PLEX_DELIMITER = "|"
PLEX_QUOTE = '"'
PLEX_COLUMNS = ("path", "title", "views", "rating")


class NormalizationError(RuntimeError):
    """Raised when a source file cannot be normalised."""


def _optional(raw: str) -> str | None:
    value = raw.strip()
    return value or None


def normalise_row(fields: list[str]) -> ExternalRecord:
    padded = list(fields[: len(PLEX_COLUMNS)]) + [""] * (len(PLEX_COLUMNS) - len(fields))
    path, title, views, rating = padded
    return ExternalRecord(
        path=path,
        title=title,
        views=_optional(views),
        rating=_optional(rating),
    )


def parse_plex_csv(text: str) -> list[ExternalRecord]:
    """Parse the pipe-delimited Plex export (no header, ``"`` quoting)."""

    reader = csv.reader(
        io.StringIO(text),
        delimiter=PLEX_DELIMITER,
        quotechar=PLEX_QUOTE,
        strict=True,
    )
    try:
        return [normalise_row(fields) for fields in reader if any(f.strip() for f in fields)]
    except csv.Error as exc:
        raise NormalizationError(f"Malformed Plex export at line {reader.line_num}: {exc}") from exc


def parse_plex_lines(text: str) -> list[ExternalRecord]:
    """Minimal variant: split lines on ``|`` and strip surrounding quotes."""

    records: List[ExternalRecord] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        fields = [field.strip(PLEX_QUOTE) for field in line.split(PLEX_DELIMITER)]
        records.append(normalise_row(fields))
    return records


def load_plex_export(path: Path, *, simple: bool = False) -> list[ExternalRecord]:
    if not path.exists():
        raise FileNotFoundError(path)

    try:
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise NormalizationError(f"{path} is not valid UTF-8: {exc}") from exc
    return parse_plex_lines(text) if simple else parse_plex_csv(text)


def _scene_items(document: Any) -> list[Any]:
    if isinstance(document, list):
        return document
    if isinstance(document, dict):
        if "data" in document and isinstance(document["data"], dict):
            document = document["data"]
        scenes = document.get("allScenes")
        if isinstance(scenes, list):
            return scenes
    raise NormalizationError("Stash document has no allScenes list")


def load_stash_scenes(path: Path) -> list[CatalogRecord]:
    """Load a pre-fetched ``allScenes`` result from a JSON file."""

    if not path.exists():
        raise FileNotFoundError(path)

    with path.open(encoding="utf-8") as handle:
        try:
            document = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise NormalizationError(f"Invalid JSON in {path}: {exc}") from exc

    try:
        return [scene_from_payload(item) for item in _scene_items(document)]
    except (KeyError, TypeError, ValueError) as exc:
        raise NormalizationError(f"Invalid scene entry in {path}: {exc}") from exc
