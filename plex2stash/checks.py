"""Change detection that turns matched pairs into the update worklist."""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple

from .models import CatalogRecord, ExternalRecord, UpdateCandidate

MIN_SCORE = 1
MAX_SCORE = 10
RATING_SCALE = 10

_INTEGER = re.compile(r"^[+-]?[0-9]+$")


def parse_score(raw: Optional[str]) -> Optional[int]:
    """Return the integer value of a present field, ``None`` when absent.

    Raises ``ValueError`` for anything other than an optionally signed run of
    ASCII digits.
    """

    if raw is None or not raw.strip():
        return None
    value = raw.strip()
    if not _INTEGER.match(value):
        raise ValueError(f"Not an integer: {raw!r}")
    return int(value)


def _in_range(value: Optional[int]) -> bool:
    return value is None or MIN_SCORE <= value <= MAX_SCORE


def evaluate_pair(external: ExternalRecord, catalog: CatalogRecord) -> UpdateCandidate | None:
    try:
        views = parse_score(external.views)
        rating = parse_score(external.rating)
    except ValueError:
        return None

    if not (_in_range(views) and _in_range(rating)):
        return None

    views_changed = views is not None and views != catalog.play_count
    rating_changed = rating is not None and rating * RATING_SCALE != catalog.rating100
    if not (views_changed or rating_changed):
        return None

    return UpdateCandidate(
        id=catalog.id,
        path=external.path,
        title=external.title,
        views=external.views.strip() if views is not None else None,
        rating=external.rating.strip() if rating is not None else None,
    )


def build_worklist(pairs: Iterable[Tuple[ExternalRecord, CatalogRecord]]) -> list[UpdateCandidate]:
    worklist: List[UpdateCandidate] = []
    for external, catalog in pairs:
        candidate = evaluate_pair(external, catalog)
        if candidate:
            worklist.append(candidate)
    return worklist
