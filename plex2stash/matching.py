"""Record matching between the Plex export and the Stash catalog."""
from __future__ import annotations

from typing import Callable, Dict, Iterable, Iterator, Tuple

from .models import CatalogRecord, ExternalRecord

ProgressCallback = Callable[[int], None]


def index_by_path(catalog: Iterable[CatalogRecord]) -> Dict[str, CatalogRecord]:
    """Map each path to the first catalog record carrying it."""

    index: Dict[str, CatalogRecord] = {}
    for record in catalog:
        index.setdefault(record.path, record)
    return index


def match_records(
    external: Iterable[ExternalRecord],
    catalog: Iterable[CatalogRecord],
    *,
    on_progress: ProgressCallback | None = None,
) -> Iterator[Tuple[ExternalRecord, CatalogRecord]]:
    """Yield ``(external, catalog)`` pairs whose paths are equal.

    External records without a catalog counterpart are dropped. The pairs come
    out lazily in external order; ``on_progress`` receives the number of
    external records consumed so far.
    """

    index = index_by_path(catalog)
    for position, record in enumerate(external, start=1):
        match = index.get(record.path)
        if on_progress is not None:
            on_progress(position)
        if match is not None:
            yield record, match
